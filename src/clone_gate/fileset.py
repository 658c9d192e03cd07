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
File-set resolver - decides which files on disk belong to the scan.

Walks each source root, keeps files whose extension the language profile
understands, and applies include/exclude globs. Every file is attributed to
the root it was found under so reports can show root-relative names.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional
import fnmatch
import logging

from .languages import extensions_for_language


logger = logging.getLogger(__name__)


# Default patterns to always exclude
DEFAULT_EXCLUDES = [
    "*.git/*",
    "*node_modules/*",
    "*__pycache__/*",
    "*venv/*",
    "*.egg-info/*",
    "*.tox/*",
    "*.cache/*",
]


def find_source_files(
    source_roots: Iterable[Path],
    language: str,
    exclude_patterns: Optional[List[str]] = None,
    include_patterns: Optional[List[str]] = None,
) -> Dict[Path, Path]:
    """
    Resolve the files to scan.

    Args:
        source_roots: Directories to walk (missing ones are ignored)
        language: Language profile; selects which extensions are candidates
        exclude_patterns: Glob patterns to exclude (added to defaults)
        include_patterns: Only keep files matching at least one of these

    Returns:
        Mapping of absolute file path -> source root it belongs to,
        in a stable (sorted) order
    """
    all_excludes = DEFAULT_EXCLUDES + (exclude_patterns or [])
    extensions = extensions_for_language(language)
    files: Dict[Path, Path] = {}

    for root in source_roots:
        root = Path(root).resolve()
        if not root.is_dir():
            logger.debug("Skipping missing source root %s", root)
            continue

        for file_path in sorted(root.rglob("*")):
            if not file_path.is_file():
                continue

            # An empty extension set means the profile accepts any file
            if extensions and file_path.suffix.lower() not in extensions:
                continue

            # Make relative for pattern matching
            rel_path = str(file_path.relative_to(root))

            if any(fnmatch.fnmatch(rel_path, pat) or fnmatch.fnmatch(str(file_path), pat)
                   for pat in all_excludes):
                continue

            if include_patterns:
                if not any(fnmatch.fnmatch(rel_path, pat) or fnmatch.fnmatch(file_path.name, pat)
                           for pat in include_patterns):
                    continue

            # First root wins when roots overlap
            files.setdefault(file_path, root)

    return files
