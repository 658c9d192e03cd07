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
Base tokenizer interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, List, NamedTuple


# Images substituted for normalized tokens
LITERAL_IMAGE = "<literal>"
IDENTIFIER_IMAGE = "<identifier>"


class Token(NamedTuple):
    image: str   # Normalized token text
    line: int    # 1-indexed line the token starts on


@dataclass(frozen=True)
class TokenizerOptions:
    """Normalizations applied while tokenizing."""

    ignore_literals: bool = False
    ignore_identifiers: bool = False
    ignore_annotations: bool = False


class BaseTokenizer(ABC):
    """Abstract base class for language tokenizers."""

    def __init__(self, options: TokenizerOptions = TokenizerOptions()):
        self.options = options

    @abstractmethod
    def tokenize(self, content: str) -> List[Token]:
        """
        Split source text into normalized tokens.

        Comments and whitespace never produce tokens.

        Args:
            content: Full file content

        Returns:
            Tokens in source order
        """
        pass


class TreeSitterTokenizer(BaseTokenizer):
    """
    Tokenizer that walks the leaves of a tree-sitter syntax tree.

    Subclasses name the grammar and the node types that count as literals,
    identifiers, annotations, and comments.
    """

    literal_types: FrozenSet[str] = frozenset()
    identifier_types: FrozenSet[str] = frozenset()
    annotation_types: FrozenSet[str] = frozenset()
    comment_types: FrozenSet[str] = frozenset()

    def __init__(self, options: TokenizerOptions = TokenizerOptions()):
        super().__init__(options)
        self._parser = None

    @abstractmethod
    def _load_language(self):
        """Return the grammar handle for tree_sitter.Language."""
        pass

    def _ensure_parser(self):
        """Lazy-load tree-sitter parser."""
        if self._parser is not None:
            return

        from tree_sitter import Language, Parser

        self._parser = Parser(Language(self._load_language()))

    def tokenize(self, content: str) -> List[Token]:
        self._ensure_parser()

        tree = self._parser.parse(content.encode("utf-8"))
        tokens: List[Token] = []

        # Explicit stack keeps deeply nested files off the recursion limit
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            node_type = node.type

            if node_type in self.comment_types:
                continue
            if self.options.ignore_annotations and node_type in self.annotation_types:
                continue

            # Literals are atomic even when the grammar splits them into parts
            if node_type in self.literal_types:
                image = LITERAL_IMAGE if self.options.ignore_literals else _text(node)
                tokens.append(Token(image, node.start_point[0] + 1))
                continue

            if node.child_count == 0:
                if node.start_byte == node.end_byte:
                    continue  # Missing nodes inserted by error recovery
                if self.options.ignore_identifiers and node_type in self.identifier_types:
                    image = IDENTIFIER_IMAGE
                else:
                    image = _text(node)
                tokens.append(Token(image, node.start_point[0] + 1))
                continue

            stack.extend(reversed(node.children))

        return tokens


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")
