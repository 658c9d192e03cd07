"""Unit tests for the violation gate."""

import pytest

from clone_gate.errors import MissingReport, ReportUnreadable, ViolationsFound
from clone_gate.gate import (
    PRESETS,
    check_violations,
    count_elements,
    evaluate,
    is_applicable,
    spec_for_preset,
)
from clone_gate.models import GateStatus, ViolationGateSpec


PMD_REPORT = """<?xml version="1.0" encoding="UTF-8"?>
<pmd version="5.0">
<file name="/src/A.java">
<violation beginline="3" rule="UnusedLocalVariable">x is unused</violation>
<violation beginline="9" rule="EmptyCatchBlock">empty catch</violation>
</file>
<file name="/src/B.java">
<violation beginline="1" rule="UnusedImports">unused import</violation>
</file>
</pmd>
"""


@pytest.fixture
def report(tmp_path):
    path = tmp_path / "pmd.xml"
    path.write_text(PMD_REPORT, encoding="utf-8")
    return path


def spec(path, **kwargs):
    return ViolationGateSpec(report_path=path, finding_element="violation", noun="violation", **kwargs)


class TestCountElements:
    """Test streaming element counting."""

    def test_counts_named_elements(self, report):
        assert count_elements(report, "violation") == 3
        assert count_elements(report, "file") == 2
        assert count_elements(report, "duplication") == 0

    def test_namespaced_tags_match_local_name(self, tmp_path):
        path = tmp_path / "pmd.xml"
        path.write_text(
            '<pmd xmlns="http://pmd.sourceforge.net/report/2.0.0">'
            "<file><violation/><violation/></file></pmd>",
            encoding="utf-8",
        )

        assert count_elements(path, "violation") == 2

    def test_large_report(self, tmp_path):
        path = tmp_path / "cpd.xml"
        with open(path, "w", encoding="utf-8") as f:
            f.write("<pmd-cpd>\n")
            for i in range(5000):
                f.write(f'<duplication lines="5" tokens="100"><file line="{i}" path="a"/></duplication>\n')
            f.write("</pmd-cpd>\n")

        assert count_elements(path, "duplication") == 5000

    def test_malformed_report(self, tmp_path):
        path = tmp_path / "pmd.xml"
        path.write_text("<pmd><violation></pmd>", encoding="utf-8")

        with pytest.raises(ReportUnreadable) as exc_info:
            count_elements(path, "violation")

        assert exc_info.value.path == path
        assert str(path) in str(exc_info.value)


class TestGatePolicy:
    """Test pass, fail, and skip decisions."""

    def test_fails_with_count_and_plural_noun(self, report):
        with pytest.raises(ViolationsFound) as exc_info:
            check_violations(spec(report, fail_on_violation=True))

        assert exc_info.value.count == 3
        assert str(exc_info.value) == "You have 3 violations."

    def test_single_finding_is_singular(self, tmp_path):
        path = tmp_path / "cpd.xml"
        path.write_text("<pmd-cpd><duplication/></pmd-cpd>", encoding="utf-8")
        cpd_spec = ViolationGateSpec(path, "duplication", noun="duplication")

        with pytest.raises(ViolationsFound, match=r"^You have 1 duplication\.$"):
            check_violations(cpd_spec)

    def test_passes_when_not_failing_on_violations(self, report):
        result = check_violations(spec(report, fail_on_violation=False))

        assert result.status is GateStatus.PASSED
        assert result.count == 3
        assert result.passed

    def test_evaluate_reports_failure_without_raising(self, report):
        result = evaluate(spec(report))

        assert result.status is GateStatus.FAILED
        assert result.count == 3
        assert not result.passed

    def test_passes_on_clean_report(self, tmp_path):
        path = tmp_path / "pmd.xml"
        path.write_text("<pmd></pmd>", encoding="utf-8")

        result = check_violations(spec(path))

        assert result.status is GateStatus.PASSED
        assert result.count == 0

    def test_missing_report(self, tmp_path):
        with pytest.raises(MissingReport) as exc_info:
            check_violations(spec(tmp_path / "pmd.xml"))

        assert exc_info.value.path == tmp_path / "pmd.xml"

    def test_inapplicable_gate_never_opens_report(self, tmp_path, monkeypatch):
        def explode(*args, **kwargs):
            raise AssertionError("report should not be read")

        monkeypatch.setattr("clone_gate.gate.count_elements", explode)

        result = check_violations(spec(tmp_path / "does-not-exist.xml", applicable=False))

        assert result.status is GateStatus.SKIPPED
        assert result.passed


class TestApplicability:

    def test_language_and_directory_required(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()

        assert is_applicable("java", src)
        assert is_applicable("JAVA", src)
        assert not is_applicable("java", tmp_path / "missing")
        assert not is_applicable("cobol", src)
        assert not is_applicable(None, src)
        assert is_applicable("python", src, languages=["java", "python"])


class TestPresets:

    def test_cpd_preset(self, tmp_path):
        cpd_spec = spec_for_preset("cpd", tmp_path)

        assert cpd_spec.report_path == tmp_path / "cpd.xml"
        assert cpd_spec.finding_element == "duplication"
        assert cpd_spec.fail_on_violation

    def test_pmd_preset(self, tmp_path):
        pmd_spec = spec_for_preset("pmd", tmp_path, fail_on_violation=False)

        assert pmd_spec.report_path == tmp_path / "pmd.xml"
        assert pmd_spec.finding_element == PRESETS["pmd"].element == "violation"
        assert not pmd_spec.fail_on_violation
