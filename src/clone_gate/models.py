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
Data models for clone-gate.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .errors import ConfigurationError, IOFailure


DEFAULT_MINIMUM_TOKENS = 100
DEFAULT_LANGUAGE = "java"
DEFAULT_FORMAT = "xml"
DEFAULT_OUTPUT_ENCODING = "UTF-8"

# Sentinel format that disables standalone artifact rendering
NO_FORMAT = "none"
# Site-style rendering, handled outside the renderer dispatcher
HTML_FORMAT = "html"


class SourceOrigin(Enum):
    FILESYSTEM = "filesystem"
    EXTERNAL = "external"


@dataclass(frozen=True)
class SourceUnit:
    """One item to scan, whether it lives on disk or came from an external store."""

    identity: str                  # File path, or synthetic name for external content
    origin: SourceOrigin
    source_root: Path              # Owning module/source root, used for display
    encoding: Optional[str] = None  # Overrides the run-wide source encoding
    content: Optional[str] = field(default=None, repr=False)  # External content only

    @property
    def is_external(self) -> bool:
        return self.origin is SourceOrigin.EXTERNAL

    @property
    def path(self) -> Path:
        return Path(self.identity)

    @property
    def display_name(self) -> str:
        """Identity relative to the owning source root, when it sits under it."""
        try:
            return str(self.path.relative_to(self.source_root))
        except ValueError:
            return self.identity

    def read_text(self, encoding: str) -> str:
        """Read the unit's text the same way regardless of origin."""
        if self.is_external:
            return self.content or ""
        try:
            return self.path.read_bytes().decode(self.encoding or encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailure(f"Unable to read {self.identity}: {e}", self.path) from e


@dataclass(frozen=True)
class Occurrence:
    """Where one copy of a duplicated span sits."""

    source_id: str    # SourceUnit.identity
    start_line: int   # 1-indexed
    end_line: int     # Inclusive

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def location(self) -> str:
        return f"{self.source_id}:{self.start_line}-{self.end_line}"


@dataclass(frozen=True)
class MatchGroup:
    """One duplicated span and every place it occurs."""

    token_count: int
    occurrences: Tuple[Occurrence, ...]
    fragment: str = ""    # Source text of the first occurrence

    @property
    def line_count(self) -> int:
        return self.occurrences[0].line_count if self.occurrences else 0

    @property
    def files(self) -> Tuple[str, ...]:
        """Unique source identities, in occurrence order."""
        return tuple(dict.fromkeys(o.source_id for o in self.occurrences))


@dataclass(frozen=True)
class DetectionConfig:
    """Everything the detection engine needs to know before a run."""

    minimum_tokens: int = DEFAULT_MINIMUM_TOKENS
    language: str = DEFAULT_LANGUAGE
    ignore_literals: bool = False
    ignore_identifiers: bool = False
    ignore_annotations: bool = False
    skip_duplicate_files: bool = False
    source_encoding: Optional[str] = None
    source_uri: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.minimum_tokens, bool) or not isinstance(self.minimum_tokens, int):
            raise ConfigurationError(
                f"Minimum token count must be an integer, got {self.minimum_tokens!r}"
            )
        if self.minimum_tokens < 1:
            raise ConfigurationError(
                f"Minimum token count must be positive, got {self.minimum_tokens}"
            )


@dataclass(frozen=True)
class RenderRequest:
    """Which artifact to produce and where to put it."""

    format: str = DEFAULT_FORMAT
    output_encoding: str = DEFAULT_OUTPUT_ENCODING
    target_directory: Path = Path("target")
    site_directory: Optional[Path] = None
    include_in_site: bool = False

    @property
    def artifact_name(self) -> str:
        return f"cpd.{self.format}"

    @property
    def destination(self) -> Path:
        return Path(self.target_directory) / self.artifact_name

    @property
    def publish_destination(self) -> Optional[Path]:
        if not self.include_in_site or self.site_directory is None:
            return None
        return Path(self.site_directory) / self.artifact_name

    @property
    def is_disabled(self) -> bool:
        return self.format in ("", NO_FORMAT)


@dataclass(frozen=True)
class ViolationGateSpec:
    """Which report to inspect, what to count, and whether findings fail the build."""

    report_path: Path
    finding_element: str
    noun: str = "violation"
    fail_on_violation: bool = True
    applicable: bool = True


class GateStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class GateResult:
    """Outcome of a violation check."""

    status: GateStatus
    count: int = 0
    report_path: Optional[Path] = None

    @property
    def passed(self) -> bool:
        return self.status is not GateStatus.FAILED
