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
Java tokenizer using tree-sitter.
"""

from .base import TreeSitterTokenizer


class JavaTokenizer(TreeSitterTokenizer):
    """Leaf tokens of the tree-sitter-java grammar."""

    literal_types = frozenset({
        "decimal_integer_literal",
        "hex_integer_literal",
        "octal_integer_literal",
        "binary_integer_literal",
        "decimal_floating_point_literal",
        "hex_floating_point_literal",
        "character_literal",
        "string_literal",
        "text_block",
        "true",
        "false",
        "null_literal",
    })
    identifier_types = frozenset({"identifier", "type_identifier"})
    annotation_types = frozenset({"annotation", "marker_annotation"})
    comment_types = frozenset({"line_comment", "block_comment"})

    def _load_language(self):
        import tree_sitter_java as tsjava
        return tsjava.language()
