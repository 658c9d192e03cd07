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
Configuration file support for clone-gate.

Looks for .clonegaterc or .clonegate.toml in current directory or project root.
"""

from pathlib import Path
from typing import Optional, Dict, Any

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import ConfigurationError


CONFIG_NAMES = [".clonegaterc", ".clonegate.toml"]


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for .clonegaterc or .clonegate.toml in start_path and parent directories.

    Searches up to the root directory or until a config file is found.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    # Start from the given path and walk up to root
    current = start_path.resolve()

    while True:
        for name in CONFIG_NAMES:
            config_path = current / name
            if config_path.is_file():
                return config_path

        parent = current.parent

        # Stop if we've reached the root
        if parent == current:
            break

        current = parent

    return None


def load_config(path: Path, section: Optional[str] = None) -> Dict[str, Any]:
    """
    Load clone-gate configuration.

    Searches for a config file starting from the given path and walking up
    parent directories. Returns empty dict if no config file is found.

    Args:
        path: Directory to start searching from
        section: Sub-table of [clonegate] to return ("cpd" or "check");
            None returns the whole [clonegate] table

    Returns:
        Dictionary of configuration values

    Raises:
        ConfigurationError: a config file exists but cannot be read or parsed

    Example config file (.clonegaterc or .clonegate.toml):
        [clonegate.cpd]
        minimum_tokens = 75
        language = "java"
        ignore_literals = true
        encoding = "UTF-8"
        format = "xml"
        exclude = ["**/generated/**"]

        [clonegate.check]
        fail_on_violation = true
    """
    config_path = find_config_file(path)

    if config_path is None:
        return {}

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    config = data.get("clonegate", {})
    if section is None:
        return config

    values = config.get(section, {})
    if not isinstance(values, dict):
        raise ConfigurationError(f"[clonegate.{section}] in {config_path} must be a table")
    return values
