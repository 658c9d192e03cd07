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
Duplication report pipeline.

catalog -> encoding -> detection -> artifact (or site page)
"""

from pathlib import Path
from typing import List, Mapping, NamedTuple, Optional
import logging

from .catalog import SourceCatalog
from .detector import detect_duplicates
from .encoding import resolve_encoding, validate_encoding
from .models import DetectionConfig, MatchGroup, RenderRequest, HTML_FORMAT
from .reporter import write_report
from .site import write_site_page


logger = logging.getLogger(__name__)


class ReportResult(NamedTuple):
    matches: List[MatchGroup]
    catalog: SourceCatalog
    artifact: Optional[Path] = None
    site_page: Optional[Path] = None


def produce_duplication_report(
    files: Mapping[Path, Path],
    config: DetectionConfig,
    request: RenderRequest,
    skip: bool = False,
) -> Optional[ReportResult]:
    """
    Scan the given files (plus any external source) and write the report.

    Args:
        files: File path -> owning source root, from the file-set resolver
        config: Detection settings
        request: Output format and destinations
        skip: Do nothing at all

    Returns:
        The run's result, or None when skipped or there is nothing to scan

    Raises:
        ConfigurationError: invalid encoding, language, locator; raised
            before any source is read
        IOFailure: a source cannot be read or the artifact cannot be written
        RendererNotFound: the format names no renderer
    """
    if skip:
        logger.info("Duplication report skipped")
        return None

    if not files and not config.source_uri:
        logger.info("No source files to scan, report not generated")
        return None

    catalog = SourceCatalog.from_files(files)
    encoding = resolve_encoding(config.source_encoding, has_units=len(catalog) > 0)
    if not request.is_disabled:
        validate_encoding(request.output_encoding)

    matches = detect_duplicates(catalog, config, encoding)
    logger.info("Found %d duplications in %d sources", len(matches), len(catalog))

    if request.format == HTML_FORMAT:
        site_directory = request.site_directory or Path(request.target_directory) / "site"
        page = write_site_page(matches, catalog, site_directory, config.minimum_tokens)
        return ReportResult(matches, catalog, site_page=page)

    artifact = write_report(matches, request)
    return ReportResult(matches, catalog, artifact=artifact)
