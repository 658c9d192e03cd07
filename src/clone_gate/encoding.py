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
Character encoding negotiation for source reading and report writing.
"""

from typing import Optional
import io
import locale
import logging

from .errors import UnsupportedEncoding


logger = logging.getLogger(__name__)


def platform_encoding() -> str:
    """The encoding the platform uses when none is configured."""
    return locale.getpreferredencoding(False)


def validate_encoding(encoding: str) -> str:
    """
    Check that text can be written in the given encoding.

    Constructs a writer against a throwaway in-memory sink, so an unknown
    codec fails here instead of halfway through a scan.

    Raises:
        UnsupportedEncoding: the codec is unknown to this interpreter
    """
    try:
        with io.TextIOWrapper(io.BytesIO(), encoding=encoding) as writer:
            writer.write("")
    except LookupError as e:
        raise UnsupportedEncoding(encoding) from e
    return encoding


def resolve_encoding(explicit: Optional[str], has_units: bool) -> str:
    """
    Decide which encoding a run reads sources with.

    Args:
        explicit: Configured encoding, if any
        has_units: Whether there is anything to read

    Returns:
        The explicit encoding once validated, else the platform default.
        Falling back while there are units to read logs one warning.
    """
    if explicit:
        return validate_encoding(explicit)

    default = platform_encoding()
    if has_units:
        logger.warning(
            "File encoding has not been set, using platform encoding %s, "
            "i.e. build is platform dependent!",
            default,
        )
    return default
