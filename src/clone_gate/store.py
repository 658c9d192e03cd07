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
External content store - pulls source code that does not live on disk.

Locators look like database URLs:

    sqlite:///relative/path.db?table=sources&name=name&content=content
    sqlite:////absolute/path.db

The table holds one row per source item: a name column (used as the item's
synthetic file name) and a content column (TEXT or BLOB).
"""

from pathlib import Path
from typing import List, NamedTuple
from urllib.parse import urlsplit, parse_qs
import logging
import re
import sqlite3

from .errors import InvalidSourceLocator, SourceStoreError


logger = logging.getLogger(__name__)


SUPPORTED_SCHEMES = ("sqlite",)

DEFAULT_TABLE = "sources"
DEFAULT_NAME_COLUMN = "name"
DEFAULT_CONTENT_COLUMN = "content"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ContentItem(NamedTuple):
    name: str
    content: str


class SourceLocator(NamedTuple):
    """A parsed external store locator."""

    raw: str
    database: Path
    table: str
    name_column: str
    content_column: str


def parse_locator(locator: str) -> SourceLocator:
    """
    Parse a store locator.

    Raises:
        InvalidSourceLocator: unsupported scheme, missing database path,
            or table/column names that are not plain identifiers
    """
    try:
        parts = urlsplit(locator)
    except ValueError as e:
        raise InvalidSourceLocator(locator, str(e)) from e

    if parts.scheme not in SUPPORTED_SCHEMES:
        raise InvalidSourceLocator(
            locator, f"unsupported scheme '{parts.scheme}' (supported: {', '.join(SUPPORTED_SCHEMES)})"
        )
    if parts.netloc:
        raise InvalidSourceLocator(locator, "sqlite locators take no host")

    # sqlite:///rel.db -> "rel.db", sqlite:////abs.db -> "/abs.db"
    database = parts.path[1:]
    if not database:
        raise InvalidSourceLocator(locator, "missing database path")

    query = parse_qs(parts.query, keep_blank_values=True)
    unknown = set(query) - {"table", "name", "content"}
    if unknown:
        raise InvalidSourceLocator(locator, f"unknown parameters: {', '.join(sorted(unknown))}")

    def single(key: str, default: str) -> str:
        values = query.get(key, [default])
        if len(values) != 1 or not _IDENTIFIER_RE.match(values[0]):
            raise InvalidSourceLocator(locator, f"'{key}' must be a single identifier")
        return values[0]

    return SourceLocator(
        raw=locator,
        database=Path(database),
        table=single("table", DEFAULT_TABLE),
        name_column=single("name", DEFAULT_NAME_COLUMN),
        content_column=single("content", DEFAULT_CONTENT_COLUMN),
    )


def fetch_items(locator: SourceLocator, encoding: str) -> List[ContentItem]:
    """
    Read every content item the locator points at, ordered by name.

    Raises:
        SourceStoreError: the database cannot be opened or queried,
            or a BLOB cannot be decoded with the given encoding
    """
    if not locator.database.is_file():
        raise SourceStoreError(locator.raw, f"database {locator.database} does not exist")

    sql = (
        f'SELECT "{locator.name_column}", "{locator.content_column}" '
        f'FROM "{locator.table}" ORDER BY "{locator.name_column}"'
    )

    # Read-only so a typo never creates an empty database
    uri = locator.database.resolve().as_uri() + "?mode=ro"
    try:
        conn = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as e:
        raise SourceStoreError(locator.raw, str(e)) from e

    try:
        rows = conn.execute(sql).fetchall()
    except sqlite3.Error as e:
        raise SourceStoreError(locator.raw, str(e)) from e
    finally:
        conn.close()

    items = []
    for name, content in rows:
        if isinstance(content, bytes):
            try:
                content = content.decode(encoding)
            except UnicodeDecodeError as e:
                raise SourceStoreError(locator.raw, f"cannot decode {name}: {e}") from e
        items.append(ContentItem(name=str(name), content=content or ""))

    logger.debug("Fetched %d items from %s", len(items), locator.raw)
    return items
