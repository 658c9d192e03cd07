"""Tests for the clonegate command line."""

import xml.etree.ElementTree as ET

import pytest
from click.testing import CliRunner

from clone_gate.cli import main, merge_config_with_cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, twin_sources, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestMergeConfig:

    def test_explicit_cli_value_wins(self):
        assert merge_config_with_cli({"minimum_tokens": 50}, 75, "minimum_tokens", 100) == 75

    def test_config_used_when_cli_is_default(self):
        assert merge_config_with_cli({"minimum_tokens": 50}, 100, "minimum_tokens", 100) == 50

    def test_default_when_neither(self):
        assert merge_config_with_cli({}, 100, "minimum_tokens", 100) == 100


class TestCpdCommand:

    def test_writes_xml_report(self, runner, project):
        result = runner.invoke(main, ["cpd", "src", "-l", "any", "-t", "20", "--encoding", "utf-8"])

        assert result.exit_code == 0, result.output
        assert "Found 1 duplication" in result.output
        root = ET.parse(project / "target" / "cpd.xml").getroot()
        assert len(root.findall("duplication")) == 1

    def test_reads_settings_from_config_file(self, runner, project):
        (project / ".clonegaterc").write_text(
            '[clonegate.cpd]\nminimum_tokens = 20\nlanguage = "any"\nencoding = "utf-8"\nformat = "csv"\n',
            encoding="utf-8",
        )

        result = runner.invoke(main, ["cpd", "src"])

        assert result.exit_code == 0, result.output
        assert (project / "target" / "cpd.csv").is_file()

    def test_skip(self, runner, project):
        result = runner.invoke(main, ["cpd", "src", "-l", "any", "--skip"])

        assert result.exit_code == 0
        assert "skipped" in result.output
        assert not (project / "target").exists()

    def test_unknown_language_exits_with_error(self, runner, project):
        result = runner.invoke(main, ["cpd", "src", "-l", "cobol"])

        assert result.exit_code == 2
        assert "cobol" in result.output

    def test_bad_minimum_tokens(self, runner, project):
        result = runner.invoke(main, ["cpd", "src", "-l", "any", "-t", "0"])

        assert result.exit_code == 2

    def test_invalid_config_file(self, runner, project):
        (project / ".clonegaterc").write_text("[clonegate.cpd\n", encoding="utf-8")

        result = runner.invoke(main, ["cpd", "src"])

        assert result.exit_code == 2
        assert "Invalid config file" in result.output


class TestCheckCommand:

    def test_fails_build_on_duplications(self, runner, project):
        runner.invoke(main, ["cpd", "src", "-l", "any", "-t", "20", "--encoding", "utf-8"])

        result = runner.invoke(main, ["check", "-l", "any", "--source-dir", "src"])

        assert result.exit_code == 1
        assert "You have 1 duplication." in result.output

    def test_reports_without_failing(self, runner, project):
        runner.invoke(main, ["cpd", "src", "-l", "any", "-t", "20", "--encoding", "utf-8"])

        result = runner.invoke(
            main, ["check", "-l", "any", "--source-dir", "src", "--no-fail-on-violation"]
        )

        assert result.exit_code == 0
        assert "1 duplication found" in result.output

    def test_skipped_without_sources(self, runner, project):
        result = runner.invoke(main, ["check", "--source-dir", "missing"])

        assert result.exit_code == 0
        assert "skipped" in result.output

    def test_missing_report(self, runner, project):
        result = runner.invoke(main, ["check", "-l", "any", "--source-dir", "src"])

        assert result.exit_code == 2
        assert "unable to find" in result.output

    def test_pmd_report(self, runner, project):
        (project / "target").mkdir()
        (project / "target" / "pmd.xml").write_text(
            "<pmd><file><violation/><violation/></file></pmd>", encoding="utf-8"
        )

        result = runner.invoke(main, ["check", "-k", "pmd", "-l", "any", "--source-dir", "src"])

        assert result.exit_code == 1
        assert "You have 2 violations." in result.output
