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
Error taxonomy for clone-gate.

Every failure the pipeline or the gate can surface is a subclass of
CloneGateError, so callers can tell a policy failure (ViolationsFound) from an
operational one without inspecting messages.
"""

from pathlib import Path
from typing import Optional


class CloneGateError(Exception):
    """Base class for all clone-gate failures."""


class ConfigurationError(CloneGateError):
    """Invalid or unsupported configuration. Raised before any scanning starts."""


class UnsupportedEncoding(ConfigurationError):
    """The platform cannot read or write the requested character encoding."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Encoding '{encoding}' is not supported.")


class InvalidSourceLocator(ConfigurationError):
    """An external content store locator could not be parsed."""

    def __init__(self, locator: str, reason: str = ""):
        self.locator = locator
        message = f'Invalid source locator format - "{locator}"'
        if reason:
            message += f": {reason}"
        super().__init__(message)


class IOFailure(CloneGateError):
    """A source unit could not be read, or an artifact could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class SourceStoreError(IOFailure):
    """The external content store was reachable by locator but could not be queried."""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        super().__init__(f'Problem adding source locator - "{locator}": {reason}')


class RendererNotFound(CloneGateError):
    """A custom renderer name could not be resolved to a renderer."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Can't find duplication report format {name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MissingReport(CloneGateError):
    """The gate's input report does not exist (the analysis step never ran)."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Unable to perform check, unable to find {path}")


class ReportUnreadable(CloneGateError):
    """The gate's input report exists but could not be streamed."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        message = f"Unable to read results xml: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ViolationsFound(CloneGateError):
    """Policy failure: the report holds findings and the gate is set to fail on them."""

    def __init__(self, count: int, noun: str):
        self.count = count
        self.noun = noun
        super().__init__(f"You have {count} {pluralize(noun, count)}.")


def pluralize(noun: str, count: int) -> str:
    """Return noun with an 's' appended unless count is exactly one."""
    return noun if count == 1 else f"{noun}s"
