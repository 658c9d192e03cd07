# Clone Gate - Find copy-paste code and gate builds on report findings
# Copyright (C) 2025  Jonathan Louis
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
CLI entry point for clone-gate.

Usage:
    clonegate cpd [SOURCES...] [options]
    clonegate check [options]
    clonegate --help
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import load_config
from .errors import CloneGateError, ViolationsFound, pluralize
from .fileset import find_source_files
from .gate import PRESETS, check_violations, is_applicable
from .languages import normalize_language, supported_languages
from .models import (
    DetectionConfig,
    GateStatus,
    RenderRequest,
    ViolationGateSpec,
    DEFAULT_FORMAT,
    DEFAULT_LANGUAGE,
    DEFAULT_MINIMUM_TOKENS,
    DEFAULT_OUTPUT_ENCODING,
)
from .pipeline import produce_duplication_report


# Exit status for operational failures (violations exit with 1)
EXIT_ERROR = 2


def merge_config_with_cli(
    config: dict,
    cli_value,
    config_key: str,
    default_value,
):
    """
    Merge config file value with CLI value.

    If CLI value differs from default, use CLI (user explicitly set it).
    Otherwise, use config value if present, else use default.

    Args:
        config: Config dict from file
        cli_value: Value from CLI argument
        config_key: Key to look up in config
        default_value: Default value for this option

    Returns:
        Final value to use
    """
    if cli_value != default_value:
        return cli_value

    return config.get(config_key, default_value)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def fail(error: CloneGateError, exit_code: int = EXIT_ERROR) -> None:
    click.echo(f"❌ {error}", err=True)
    sys.exit(exit_code)


@click.group()
@click.version_option(version=__version__)
def main():
    """Find copy-paste code and gate builds on report findings."""


@main.command()
@click.argument("sources", nargs=-1, type=click.Path(file_okay=False, dir_okay=True))
@click.option(
    "-t", "--minimum-tokens",
    type=int,
    default=DEFAULT_MINIMUM_TOKENS,
    help=f"Tokens a span needs before it counts as duplicated (default: {DEFAULT_MINIMUM_TOKENS})"
)
@click.option(
    "-l", "--language",
    type=str,
    default=DEFAULT_LANGUAGE,
    help=f"Language profile: {', '.join(sorted(supported_languages()))} (default: {DEFAULT_LANGUAGE})"
)
@click.option("--ignore-literals", is_flag=True, help="Treat literals with different values as equal")
@click.option("--ignore-identifiers", is_flag=True, help="Treat differently named identifiers as equal")
@click.option("--ignore-annotations", is_flag=True, help="Drop annotations/decorators before comparing")
@click.option("--skip-duplicates", is_flag=True, help="Ignore files with the same name and length as one already scanned")
@click.option("--encoding", type=str, default=None, help="Source file encoding (default: platform encoding)")
@click.option("--uri", type=str, default=None, help="External source locator, e.g. sqlite:///code.db?table=sources")
@click.option(
    "-f", "--format", "report_format",
    type=str,
    default=DEFAULT_FORMAT,
    help="Report format: xml, csv, text, json, html, none, or a dotted renderer class (default: xml)"
)
@click.option(
    "--output-encoding",
    type=str,
    default=DEFAULT_OUTPUT_ENCODING,
    help=f"Encoding of the written report (default: {DEFAULT_OUTPUT_ENCODING})"
)
@click.option("--target-dir", type=click.Path(file_okay=False), default="target", help="Where cpd.<format> is written (default: target)")
@click.option("--site-dir", type=click.Path(file_okay=False), default=None, help="Site output directory")
@click.option("--include-xml-in-site", is_flag=True, help="Also copy the report into the site directory")
@click.option("-e", "--exclude", multiple=True, help="Glob patterns to exclude (repeatable)")
@click.option("-i", "--include", multiple=True, help="Only scan matching paths (repeatable)")
@click.option("--skip", is_flag=True, help="Skip report generation")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cpd(
    sources: tuple,
    minimum_tokens: int,
    language: str,
    ignore_literals: bool,
    ignore_identifiers: bool,
    ignore_annotations: bool,
    skip_duplicates: bool,
    encoding: Optional[str],
    uri: Optional[str],
    report_format: str,
    output_encoding: str,
    target_dir: str,
    site_dir: Optional[str],
    include_xml_in_site: bool,
    exclude: tuple,
    include: tuple,
    skip: bool,
    verbose: bool,
):
    """
    Produce a duplicate code report.

    SOURCES are the source roots to scan (default: current directory).

    Examples:

      # XML report at target/cpd.xml
      clonegate cpd src/main/java

      # Looser matching, CSV output
      clonegate cpd src --minimum-tokens 50 --ignore-literals -f csv

      # Include code stored in a database
      clonegate cpd src --uri "sqlite:///code.db?table=routines"
    """
    try:
        config = load_config(Path.cwd(), "cpd")
    except CloneGateError as e:
        fail(e)

    minimum_tokens = merge_config_with_cli(config, minimum_tokens, "minimum_tokens", DEFAULT_MINIMUM_TOKENS)
    language = merge_config_with_cli(config, language, "language", DEFAULT_LANGUAGE)
    ignore_literals = merge_config_with_cli(config, ignore_literals, "ignore_literals", False)
    ignore_identifiers = merge_config_with_cli(config, ignore_identifiers, "ignore_identifiers", False)
    ignore_annotations = merge_config_with_cli(config, ignore_annotations, "ignore_annotations", False)
    skip_duplicates = merge_config_with_cli(config, skip_duplicates, "skip_duplicates", False)
    encoding = merge_config_with_cli(config, encoding, "encoding", None)
    uri = merge_config_with_cli(config, uri, "uri", None)
    report_format = merge_config_with_cli(config, report_format, "format", DEFAULT_FORMAT)
    output_encoding = merge_config_with_cli(config, output_encoding, "output_encoding", DEFAULT_OUTPUT_ENCODING)
    target_dir = merge_config_with_cli(config, target_dir, "target_dir", "target")
    site_dir = merge_config_with_cli(config, site_dir, "site_dir", None)
    include_xml_in_site = merge_config_with_cli(config, include_xml_in_site, "include_xml_in_site", False)
    skip = merge_config_with_cli(config, skip, "skip", False)
    verbose = merge_config_with_cli(config, verbose, "verbose", False)

    # These are lists in config, tuples from CLI
    if not sources and isinstance(config.get("sources"), list):
        sources = tuple(config["sources"])
    if not exclude and isinstance(config.get("exclude"), list):
        exclude = tuple(config["exclude"])
    if not include and isinstance(config.get("include"), list):
        include = tuple(config["include"])

    configure_logging(verbose)

    if skip:
        click.echo("⏭️  Duplicate code report skipped")
        return

    try:
        detection = DetectionConfig(
            minimum_tokens=minimum_tokens,
            language=normalize_language(language),
            ignore_literals=ignore_literals,
            ignore_identifiers=ignore_identifiers,
            ignore_annotations=ignore_annotations,
            skip_duplicate_files=skip_duplicates,
            source_encoding=encoding,
            source_uri=uri or None,
        )
        request = RenderRequest(
            format=report_format,
            output_encoding=output_encoding,
            target_directory=Path(target_dir),
            site_directory=Path(site_dir) if site_dir else None,
            include_in_site=include_xml_in_site,
        )

        roots = [Path(s) for s in (sources or (".",))]
        files = find_source_files(
            roots,
            language=detection.language,
            exclude_patterns=list(exclude),
            include_patterns=list(include),
        )
        click.echo(f"📂 Scanning {len(files)} files" + (f" plus {uri}" if uri else ""))

        result = produce_duplication_report(files, detection, request)
    except CloneGateError as e:
        fail(e)

    if result is None:
        click.echo("   Nothing to scan, no report generated")
        return

    count = len(result.matches)
    click.echo(f"   Found {count} {pluralize('duplication', count)}")
    if result.artifact:
        click.echo(f"   ✅ Report written to: {result.artifact}")
    if result.site_page:
        click.echo(f"   ✅ Site page written to: {result.site_page}")


@main.command()
@click.option(
    "-k", "--kind",
    type=click.Choice(sorted(PRESETS)),
    default="cpd",
    help="Which report to check: cpd (duplications) or pmd (violations)"
)
@click.option("-r", "--report", type=click.Path(dir_okay=False), default=None, help="Report file (default: <target-dir>/<kind>.xml)")
@click.option("--element", type=str, default=None, help="Element name counted as one finding (default: from --kind)")
@click.option("--noun", type=str, default=None, help="Word used for one finding in messages (default: from --kind)")
@click.option("--target-dir", type=click.Path(file_okay=False), default="target", help="Where reports live (default: target)")
@click.option("--fail-on-violation/--no-fail-on-violation", default=True, help="Fail when findings exist (default: on)")
@click.option("-l", "--language", type=str, default=DEFAULT_LANGUAGE, help=f"Project language (default: {DEFAULT_LANGUAGE})")
@click.option("--source-dir", type=click.Path(file_okay=False), default="src", help="Project source directory (default: src)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def check(
    kind: str,
    report: Optional[str],
    element: Optional[str],
    noun: Optional[str],
    target_dir: str,
    fail_on_violation: bool,
    language: str,
    source_dir: str,
    verbose: bool,
):
    """
    Fail when a previously written report holds findings.

    Does nothing when the project language has no profile or the source
    directory does not exist.

    Examples:

      # Fail if target/cpd.xml lists any duplication
      clonegate check

      # Count <violation> elements in a PMD report, report only
      clonegate check --kind pmd --no-fail-on-violation
    """
    try:
        config = load_config(Path.cwd(), "check")
    except CloneGateError as e:
        fail(e)

    kind = merge_config_with_cli(config, kind, "kind", "cpd")
    report = merge_config_with_cli(config, report, "report", None)
    element = merge_config_with_cli(config, element, "element", None)
    noun = merge_config_with_cli(config, noun, "noun", None)
    target_dir = merge_config_with_cli(config, target_dir, "target_dir", "target")
    fail_on_violation = merge_config_with_cli(config, fail_on_violation, "fail_on_violation", True)
    language = merge_config_with_cli(config, language, "language", DEFAULT_LANGUAGE)
    source_dir = merge_config_with_cli(config, source_dir, "source_dir", "src")
    verbose = merge_config_with_cli(config, verbose, "verbose", False)

    configure_logging(verbose)

    preset = PRESETS.get(kind)
    if preset is None:
        click.echo(f"❌ Unknown report kind '{kind}'. Valid: {', '.join(sorted(PRESETS))}", err=True)
        sys.exit(EXIT_ERROR)

    spec = ViolationGateSpec(
        report_path=Path(report) if report else Path(target_dir) / preset.report_name,
        finding_element=element or preset.element,
        noun=noun or preset.noun,
        fail_on_violation=fail_on_violation,
        applicable=is_applicable(language, Path(source_dir), supported_languages()),
    )

    try:
        result = check_violations(spec)
    except ViolationsFound as e:
        fail(e, exit_code=1)
    except CloneGateError as e:
        fail(e)

    if result.status is GateStatus.SKIPPED:
        click.echo("⏭️  Check skipped: no sources for a supported language")
    elif result.count:
        click.echo(f"⚠️  {result.count} {pluralize(spec.noun, result.count)} found (not failing the build)")
    else:
        click.echo(f"✅ No {pluralize(spec.noun, 0)} found")


# Entry point alias for pyproject.toml
cli = main


if __name__ == "__main__":
    main()
