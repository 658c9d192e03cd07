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
Source unit catalog - every item a run scans, keyed by identity.

Filesystem units come from the file-set resolver. External units are
synthesized from content store items and attributed to a placeholder root,
so findings that reference them can still be displayed.
"""

from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional

from .models import SourceOrigin, SourceUnit
from .store import ContentItem


# Module root for units that have no filesystem location
EXTERNAL_SOURCE_ROOT = Path("/Database")


class SourceCatalog:
    """Ordered mapping of SourceUnit.identity -> SourceUnit."""

    def __init__(self, units: Iterable[SourceUnit] = ()):
        self._units: dict[str, SourceUnit] = {}
        for unit in units:
            self.add(unit)

    @classmethod
    def from_files(cls, files: Mapping[Path, Path], encoding: Optional[str] = None) -> "SourceCatalog":
        """
        Build a catalog from resolver output.

        Args:
            files: File path -> owning source root
            encoding: Per-unit encoding override (None uses the run-wide one)
        """
        return cls(
            SourceUnit(
                identity=str(path),
                origin=SourceOrigin.FILESYSTEM,
                source_root=Path(root),
                encoding=encoding,
            )
            for path, root in files.items()
        )

    def add(self, unit: SourceUnit) -> None:
        self._units[unit.identity] = unit

    def add_external(self, item: ContentItem) -> SourceUnit:
        """Synthesize and register a unit for one content store item."""
        unit = SourceUnit(
            identity=item.name,
            origin=SourceOrigin.EXTERNAL,
            source_root=EXTERNAL_SOURCE_ROOT,
            content=item.content,
        )
        self.add(unit)
        return unit

    def get(self, identity: str) -> Optional[SourceUnit]:
        return self._units.get(identity)

    def __getitem__(self, identity: str) -> SourceUnit:
        return self._units[identity]

    def __contains__(self, identity: object) -> bool:
        return identity in self._units

    def __iter__(self) -> Iterator[SourceUnit]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)

    @property
    def filesystem_units(self) -> list[SourceUnit]:
        return [u for u in self._units.values() if u.origin is SourceOrigin.FILESYSTEM]

    @property
    def external_units(self) -> list[SourceUnit]:
        return [u for u in self._units.values() if u.origin is SourceOrigin.EXTERNAL]

    def display_name(self, identity: str) -> str:
        """Root-relative name for an identity, or the identity itself if unknown."""
        unit = self._units.get(identity)
        return unit.display_name if unit else identity
