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
Clone Gate - Find copy-paste code and gate builds on report findings.

Scans source trees (and optionally code held in a database) for duplicated
token spans, writes the findings as XML, CSV, text, JSON, or an HTML page,
and checks previously written reports against a fail-on-findings policy.
"""

__version__ = "0.1.0"

from .pipeline import produce_duplication_report
from .detector import detect_duplicates
from .reporter import write_report
from .gate import check_violations, evaluate
from .fileset import find_source_files
from .config import load_config, find_config_file

__all__ = [
    "__version__",
    "produce_duplication_report",
    "detect_duplicates",
    "write_report",
    "check_violations",
    "evaluate",
    "find_source_files",
    "load_config",
    "find_config_file",
]
