"""End-to-end tests for the duplication report pipeline."""

import logging
from pathlib import Path

import pytest

from clone_gate.errors import ConfigurationError, UnsupportedEncoding, ViolationsFound
from clone_gate.fileset import find_source_files
from clone_gate.gate import check_violations, count_elements, spec_for_preset
from clone_gate.models import DetectionConfig, RenderRequest
from clone_gate.pipeline import produce_duplication_report
from clone_gate.site import SITE_PAGE_NAME

from conftest import SNIPPET


def files_under(src: Path):
    return find_source_files([src], language="any")


class TestProduceReport:
    """Test scanning and writing in one pass."""

    def test_xml_report_feeds_the_gate(self, tmp_path, twin_sources, any_config):
        src, first, second = twin_sources
        request = RenderRequest(format="xml", output_encoding="UTF-8", target_directory=tmp_path / "target")

        result = produce_duplication_report(files_under(src), any_config, request)

        assert result.artifact == tmp_path / "target" / "cpd.xml"
        assert len(result.matches) == 1
        assert count_elements(result.artifact, "duplication") == len(result.matches)

        with pytest.raises(ViolationsFound, match="You have 1 duplication."):
            check_violations(spec_for_preset("cpd", tmp_path / "target"))

    def test_format_none_writes_nothing(self, tmp_path, twin_sources, any_config):
        src, _, _ = twin_sources
        target = tmp_path / "target"
        request = RenderRequest(format="none", output_encoding="UTF-8", target_directory=target)

        result = produce_duplication_report(files_under(src), any_config, request)

        assert result.artifact is None
        assert len(result.matches) == 1
        assert not target.exists()

    def test_report_copied_into_site(self, tmp_path, twin_sources, any_config):
        src, _, _ = twin_sources
        request = RenderRequest(
            format="xml",
            output_encoding="UTF-8",
            target_directory=tmp_path / "target",
            site_directory=tmp_path / "site",
            include_in_site=True,
        )

        result = produce_duplication_report(files_under(src), any_config, request)

        copy = tmp_path / "site" / "cpd.xml"
        assert copy.read_bytes() == result.artifact.read_bytes()

    def test_html_goes_to_site_page(self, tmp_path, twin_sources, any_config):
        src, _, _ = twin_sources
        request = RenderRequest(format="html", output_encoding="UTF-8", target_directory=tmp_path / "target")

        result = produce_duplication_report(files_under(src), any_config, request)

        assert result.artifact is None
        assert result.site_page == tmp_path / "target" / "site" / SITE_PAGE_NAME
        page = result.site_page.read_text(encoding="utf-8")
        assert "a/First.c" in page
        assert "b/Second.c" in page
        assert "Duplication 1" in page

    def test_html_page_without_findings(self, tmp_path, any_config):
        src = tmp_path / "src"
        src.mkdir()
        (src / "only.c").write_text(SNIPPET, encoding="utf-8")
        request = RenderRequest(format="html", output_encoding="UTF-8", site_directory=tmp_path / "site")

        result = produce_duplication_report(files_under(src), any_config, request)

        assert result.matches == []
        assert "CPD found no problems" in result.site_page.read_text(encoding="utf-8")


class TestNoOpRuns:

    def test_skip(self, tmp_path, twin_sources, any_config):
        src, _, _ = twin_sources
        request = RenderRequest(format="xml", output_encoding="UTF-8", target_directory=tmp_path / "target")

        assert produce_duplication_report(files_under(src), any_config, request, skip=True) is None
        assert not (tmp_path / "target").exists()

    def test_nothing_to_scan(self, tmp_path, any_config):
        request = RenderRequest(format="xml", output_encoding="UTF-8", target_directory=tmp_path / "target")

        assert produce_duplication_report({}, any_config, request) is None
        assert not (tmp_path / "target").exists()


class TestEncodingHandling:

    def test_unset_encoding_warns_once(self, tmp_path, twin_sources, caplog):
        src, _, _ = twin_sources
        config = DetectionConfig(minimum_tokens=20, language="any")
        request = RenderRequest(format="none", output_encoding="UTF-8")

        with caplog.at_level(logging.WARNING, logger="clone_gate"):
            produce_duplication_report(files_under(src), config, request)

        warnings = [r for r in caplog.records if "platform dependent" in r.getMessage()]
        assert len(warnings) == 1

    def test_bad_source_encoding_fails_before_reading(self, tmp_path, twin_sources):
        src, _, _ = twin_sources
        config = DetectionConfig(minimum_tokens=20, language="any", source_encoding="no-such-codec")
        request = RenderRequest(format="xml", output_encoding="UTF-8", target_directory=tmp_path / "target")

        with pytest.raises(UnsupportedEncoding):
            produce_duplication_report(files_under(src), config, request)

        assert not (tmp_path / "target").exists()

    def test_bad_output_encoding_is_a_configuration_error(self, tmp_path, twin_sources, any_config):
        src, _, _ = twin_sources
        request = RenderRequest(format="xml", output_encoding="no-such-codec", target_directory=tmp_path / "target")

        with pytest.raises(ConfigurationError):
            produce_duplication_report(files_under(src), any_config, request)
