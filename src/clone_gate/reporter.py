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
Report dispatcher - renders match groups into a standalone artifact.

Writes target/cpd.<format> and, when asked, mirrors it into the site
directory. The "none" format (or an empty one) is a no-op. Site-style HTML
is produced by the site module, never here.
"""

from pathlib import Path
from typing import List, Optional
import logging
import shutil

from .encoding import validate_encoding
from .errors import IOFailure
from .models import MatchGroup, RenderRequest
from .renderers import create_renderer


logger = logging.getLogger(__name__)


def write_report(matches: List[MatchGroup], request: RenderRequest) -> Optional[Path]:
    """
    Render and write the primary artifact.

    Args:
        matches: Match groups from one detection run
        request: Format, output encoding, and destinations

    Returns:
        Path of the primary artifact, or None when the format disables output

    Raises:
        UnsupportedEncoding: the output encoding is unknown
        RendererNotFound: the format names no renderer
        IOFailure: the artifact cannot be written or copied
    """
    if request.is_disabled:
        logger.debug("Report format is '%s', no artifact written", request.format)
        return None

    encoding = validate_encoding(request.output_encoding)
    renderer = create_renderer(request.format, encoding)
    text = renderer.render(matches)

    target = request.destination
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding=encoding) as f:
            f.write(text)
    except UnicodeEncodeError as e:
        raise IOFailure(
            f"Unable to write {target}: {e.object[e.start:e.end]!r} cannot be encoded as {encoding}, "
            f"choose an output encoding that can represent the sources",
            target,
        ) from e
    except OSError as e:
        raise IOFailure(f"Unable to write {target}: {e}", target) from e

    logger.info("Wrote %s", target)

    publish = request.publish_destination
    if publish is not None:
        publish_copy(target, publish)

    return target


def publish_copy(source: Path, destination: Path) -> Path:
    """Copy an artifact verbatim, creating parent directories."""
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as e:
        raise IOFailure(f"Unable to copy {source} to {destination}: {e}", destination) from e

    logger.info("Copied %s to %s", source, destination)
    return destination
