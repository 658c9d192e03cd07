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
Detection adapter - drives the duplication engine over a source catalog.
"""

from typing import List
import logging

from .catalog import SourceCatalog
from .engine import DetectionEngine, EngineConfig
from .errors import CloneGateError, SourceStoreError
from .languages import TokenizerOptions, normalize_language
from .models import DetectionConfig, MatchGroup
from .store import fetch_items, parse_locator


logger = logging.getLogger(__name__)


def build_engine_config(config: DetectionConfig, encoding: str) -> EngineConfig:
    """
    Translate a DetectionConfig into engine settings.

    Raises:
        ConfigurationError: unknown language profile
    """
    return EngineConfig(
        minimum_tile_size=config.minimum_tokens,
        language=normalize_language(config.language),
        tokenizer_options=TokenizerOptions(
            ignore_literals=config.ignore_literals,
            ignore_identifiers=config.ignore_identifiers,
            ignore_annotations=config.ignore_annotations,
        ),
        source_encoding=encoding,
        skip_duplicates=config.skip_duplicate_files,
    )


def detect_duplicates(
    catalog: SourceCatalog,
    config: DetectionConfig,
    encoding: str,
) -> List[MatchGroup]:
    """
    Run one detection pass over the catalog.

    Filesystem units are registered by path. When the config names an
    external source locator, its items are registered as in-memory content
    and added to the catalog, so renderers can attribute matches to them.

    Args:
        catalog: Units to scan; gains the external units as a side effect
        config: Detection settings
        encoding: Resolved source encoding

    Returns:
        Match groups in the engine's detection order

    Raises:
        ConfigurationError: bad language profile or locator, before any reading
        IOFailure: a unit cannot be read, or the external store cannot be queried
    """
    engine_config = build_engine_config(config, encoding)
    locator = parse_locator(config.source_uri) if config.source_uri else None

    if locator is not None:
        try:
            items = fetch_items(locator, encoding)
        except CloneGateError:
            raise
        except Exception as e:
            raise SourceStoreError(locator.raw, str(e)) from e

        # Re-fetched items replace their earlier catalog entry
        for item in items:
            catalog.add_external(item)

    engine = DetectionEngine(engine_config)

    for unit in catalog.filesystem_units:
        engine.add_path(unit.path, unit.encoding)

    for unit in catalog.external_units:
        engine.add_content(unit.identity, unit.read_text(encoding))

    logger.debug("Scanning %d sources", engine.source_count)
    return engine.run()
