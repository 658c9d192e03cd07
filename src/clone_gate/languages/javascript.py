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
JavaScript tokenizer using tree-sitter.
"""

from .base import TreeSitterTokenizer


class JavaScriptTokenizer(TreeSitterTokenizer):
    """Leaf tokens of the tree-sitter-javascript grammar."""

    literal_types = frozenset({
        "string",
        "template_string",
        "number",
        "regex",
        "true",
        "false",
        "null",
        "undefined",
    })
    identifier_types = frozenset({
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "private_property_identifier",
    })
    annotation_types = frozenset({"decorator"})
    comment_types = frozenset({"comment"})

    def _load_language(self):
        import tree_sitter_javascript as tsjavascript
        return tsjavascript.language()
