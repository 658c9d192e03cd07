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
Violation gate - fails a build when a report holds findings.

The gate knows nothing about what the findings are: it streams any XML
report, counts elements with one tag name, and applies the policy. The same
code checks duplication reports and style-violation reports.
"""

from pathlib import Path
from typing import Iterable, NamedTuple, Optional
import logging
import xml.etree.ElementTree as ET

from .errors import MissingReport, ReportUnreadable, ViolationsFound, pluralize
from .models import GateResult, GateStatus, ViolationGateSpec


logger = logging.getLogger(__name__)


class GatePreset(NamedTuple):
    """Report name, counted element, and noun for one kind of finding."""

    report_name: str
    element: str
    noun: str


PRESETS = {
    "cpd": GatePreset("cpd.xml", "duplication", "duplication"),
    "pmd": GatePreset("pmd.xml", "violation", "violation"),
}

DEFAULT_APPLICABLE_LANGUAGES = ("java",)


def is_applicable(
    language: Optional[str],
    source_directory: Optional[Path],
    languages: Iterable[str] = DEFAULT_APPLICABLE_LANGUAGES,
) -> bool:
    """A gate applies only to a recognized language whose source directory exists."""
    if not language or language.lower() not in {l.lower() for l in languages}:
        return False
    return source_directory is not None and Path(source_directory).is_dir()


def spec_for_preset(
    kind: str,
    target_directory: Path,
    fail_on_violation: bool = True,
    applicable: bool = True,
) -> ViolationGateSpec:
    """Gate spec for a named preset ("cpd" or "pmd")."""
    preset = PRESETS[kind]
    return ViolationGateSpec(
        report_path=Path(target_directory) / preset.report_name,
        finding_element=preset.element,
        noun=preset.noun,
        fail_on_violation=fail_on_violation,
        applicable=applicable,
    )


def count_elements(report_path: Path, element: str) -> int:
    """
    Count elements named `element` in a single forward pass.

    Tags are compared by local name, so `{namespace}violation` counts as
    `violation`. Finished subtrees are dropped as the parse goes, so memory
    stays flat however large the report is.

    Raises:
        ReportUnreadable: the file cannot be opened or is not well-formed XML
    """
    count = 0
    depth = 0
    root = None

    try:
        with open(report_path, "rb") as f:
            for event, elem in ET.iterparse(f, events=("start", "end")):
                if event == "start":
                    if root is None:
                        root = elem
                    depth += 1
                    if _local_name(elem.tag) == element:
                        count += 1
                else:
                    depth -= 1
                    if depth == 1:
                        root.clear()
    except ET.ParseError as e:
        raise ReportUnreadable(Path(report_path), str(e)) from e
    except OSError as e:
        raise ReportUnreadable(Path(report_path), str(e)) from e

    return count


def evaluate(spec: ViolationGateSpec) -> GateResult:
    """
    Apply the gate policy without raising on findings.

    Raises:
        MissingReport: the gate applies but the report was never produced
        ReportUnreadable: the report cannot be streamed
    """
    if not spec.applicable:
        logger.debug("Gate not applicable, skipping %s", spec.report_path)
        return GateResult(GateStatus.SKIPPED, 0, spec.report_path)

    report_path = Path(spec.report_path)
    if not report_path.exists():
        raise MissingReport(report_path)

    count = count_elements(report_path, spec.finding_element)
    logger.info("%s: %d %s", report_path, count, pluralize(spec.noun, count))

    if count > 0 and spec.fail_on_violation:
        return GateResult(GateStatus.FAILED, count, report_path)
    return GateResult(GateStatus.PASSED, count, report_path)


def check_violations(spec: ViolationGateSpec) -> GateResult:
    """
    Run the gate and turn a failing result into ViolationsFound.

    Returns:
        A PASSED or SKIPPED result

    Raises:
        ViolationsFound: findings exist and the spec fails on them
        MissingReport, ReportUnreadable: see evaluate()
    """
    result = evaluate(spec)
    if result.status is GateStatus.FAILED:
        raise ViolationsFound(result.count, spec.noun)
    return result


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
