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
Duplication engine - finds token spans that occur more than once.

Every registered source is tokenized and laid end to end. Each window of
`minimum_tile_size` tokens is hashed (vectorized with numpy), windows with
equal hashes are verified token-for-token, and every verified group is
grown left and right to its maximal shared length. Windows never span two
sources, and copies within one source never overlap.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Set, Tuple
import logging

import numpy as np

from .errors import IOFailure
from .languages import Token, TokenizerOptions, get_tokenizer
from .models import MatchGroup, Occurrence


logger = logging.getLogger(__name__)


_HASH_BASE = np.uint64(1000003)


@dataclass(frozen=True)
class EngineConfig:
    """Resolved engine settings."""

    minimum_tile_size: int
    language: str
    tokenizer_options: TokenizerOptions
    source_encoding: str
    skip_duplicates: bool = False


class _Source(NamedTuple):
    identity: str
    text: str
    tokens: List[Token]


class DetectionEngine:
    """Collects sources, then reports duplicated token spans across them."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self._tokenizer = get_tokenizer(config.language, config.tokenizer_options)
        self._sources: List[_Source] = []
        self._signatures: Set[Tuple[str, int]] = set()
        self._matches: Optional[List[MatchGroup]] = None

    @property
    def source_count(self) -> int:
        return len(self._sources)

    @property
    def matches(self) -> List[MatchGroup]:
        """Result of the last run (empty before the first)."""
        return list(self._matches or [])

    def add_path(self, path: Path, encoding: Optional[str] = None) -> bool:
        """
        Register a file by path.

        Returns:
            False when the file was skipped as a duplicate of one already added

        Raises:
            IOFailure: the file cannot be read or decoded
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise IOFailure(f"Unable to read {path}: {e}", path) from e

        if self._is_duplicate(path.name, len(data), str(path)):
            return False

        try:
            text = data.decode(encoding or self.config.source_encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise IOFailure(f"Unable to decode {path}: {e}", path) from e

        logger.debug("adding %s", path)
        self._add(str(path), text)
        return True

    def add_content(self, name: str, text: str) -> bool:
        """Register in-memory source under a synthetic name."""
        size = len(text.encode(self.config.source_encoding, errors="replace"))
        if self._is_duplicate(Path(name).name, size, name):
            return False

        logger.debug("adding %s", name)
        self._add(name, text)
        return True

    def run(self) -> List[MatchGroup]:
        """Scan everything registered so far and return the match groups in detection order."""
        self._matches = self._find_matches()
        logger.debug(
            "Found %d duplications across %d sources", len(self._matches), len(self._sources)
        )
        return self.matches

    def _is_duplicate(self, name: str, size: int, identity: str) -> bool:
        if not self.config.skip_duplicates:
            return False
        signature = (name, size)
        if signature in self._signatures:
            logger.info(
                "Skipping %s since it appears to be a duplicate file (same name and length)",
                identity,
            )
            return True
        self._signatures.add(signature)
        return False

    def _add(self, identity: str, text: str) -> None:
        self._sources.append(_Source(identity, text, self._tokenizer.tokenize(text)))
        self._matches = None

    def _find_matches(self) -> List[MatchGroup]:
        size = self.config.minimum_tile_size

        vocabulary: Dict[str, int] = {}
        ids_list: List[int] = []
        lines_list: List[int] = []
        owner_list: List[int] = []
        for index, source in enumerate(self._sources):
            for token in source.tokens:
                ids_list.append(vocabulary.setdefault(token.image, len(vocabulary) + 1))
                lines_list.append(token.line)
                owner_list.append(index)

        ids = np.array(ids_list, dtype=np.int64)
        lines = np.array(lines_list, dtype=np.int64)
        owner = np.array(owner_list, dtype=np.int64)

        window_count = len(ids) - size + 1
        if window_count < 2:
            return []

        groups = _verified_groups(ids, owner, size, window_count)

        group_of = np.full(window_count, -1, dtype=np.int64)
        for index, members in enumerate(groups):
            group_of[members] = index

        matches: List[MatchGroup] = []
        seen: Set[Tuple[Tuple[int, ...], int]] = set()

        for members in groups:
            if _continues_previous_group(members, ids, owner, group_of, groups):
                continue

            starts = _non_overlapping(members, owner, size)
            if len(starts) < 2:
                continue

            starts, length = _extend(np.array(starts, dtype=np.int64), size, ids, owner)

            key = (tuple(starts.tolist()), length)
            if key in seen:
                continue
            seen.add(key)

            matches.append(self._build_match(starts, length, lines, owner))

        return matches

    def _build_match(self, starts: np.ndarray, length: int, lines: np.ndarray, owner: np.ndarray) -> MatchGroup:
        occurrences = tuple(
            Occurrence(
                source_id=self._sources[int(owner[s])].identity,
                start_line=int(lines[s]),
                end_line=int(lines[s + length - 1]),
            )
            for s in starts.tolist()
        )

        first = occurrences[0]
        text = self._sources[int(owner[starts[0]])].text
        fragment = "\n".join(text.splitlines()[first.start_line - 1:first.end_line])

        return MatchGroup(token_count=length, occurrences=occurrences, fragment=fragment)


def _window_hashes(ids: np.ndarray, size: int, window_count: int) -> np.ndarray:
    """Polynomial hash of every window; uint64 arithmetic wraps silently."""
    values = ids.astype(np.uint64)
    hashes = np.zeros(window_count, dtype=np.uint64)
    for k in range(size):
        hashes = hashes * _HASH_BASE + values[k:k + window_count]
    return hashes


def _verified_groups(ids: np.ndarray, owner: np.ndarray, size: int, window_count: int) -> List[List[int]]:
    """Window start positions grouped by identical token content, ordered by first position."""
    hashes = _window_hashes(ids, size, window_count)

    # A window is usable only if it starts and ends in the same source
    positions = np.nonzero(owner[:window_count] == owner[size - 1:])[0]
    if len(positions) < 2:
        return []

    order = positions[np.argsort(hashes[positions], kind="stable")]
    sorted_hashes = hashes[order]
    splits = np.nonzero(sorted_hashes[1:] != sorted_hashes[:-1])[0] + 1

    groups: List[List[int]] = []
    for bucket in np.split(order, splits):
        if len(bucket) < 2:
            continue
        # Hash collisions are split apart by the exact token content
        by_window: Dict[bytes, List[int]] = {}
        for p in bucket.tolist():
            by_window.setdefault(ids[p:p + size].tobytes(), []).append(p)
        groups.extend(members for members in by_window.values() if len(members) >= 2)

    groups.sort(key=lambda members: members[0])
    return groups


def _continues_previous_group(members, ids, owner, group_of, groups) -> bool:
    """True when every member's predecessor window forms the same-sized group."""
    previous = set()
    for p in members:
        if p == 0 or owner[p - 1] != owner[p] or group_of[p - 1] < 0:
            return False
        previous.add(int(group_of[p - 1]))
    if len(previous) != 1:
        return False
    return len(groups[previous.pop()]) == len(members)


def _non_overlapping(members: List[int], owner: np.ndarray, size: int) -> List[int]:
    starts: List[int] = []
    for p in members:
        if starts and owner[p] == owner[starts[-1]] and p - starts[-1] < size:
            continue
        starts.append(p)
    return starts


def _extend(starts: np.ndarray, length: int, ids: np.ndarray, owner: np.ndarray) -> Tuple[np.ndarray, int]:
    """Grow a verified group left, then right, while every copy still agrees."""
    same_owner = owner[starts[1:]] == owner[starts[:-1]]
    gaps = (starts[1:] - starts[:-1])[same_owner]
    max_length = int(gaps.min()) if len(gaps) else len(ids)
    home = owner[starts]

    while length < max_length:
        previous = starts - 1
        if previous.min() < 0:
            break
        if not np.all(owner[previous] == home):
            break
        if not np.all(ids[previous] == ids[previous[0]]):
            break
        starts = previous
        length += 1

    while length < max_length:
        ends = starts + length
        if ends.max() >= len(ids):
            break
        if not np.all(owner[ends] == home):
            break
        if not np.all(ids[ends] == ids[ends[0]]):
            break
        length += 1

    return starts, length
