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
Language-neutral tokenizer for the "any" profile.

Used for sources without a dedicated grammar. Splits on C-family lexical
shapes: quoted strings, numbers, words, @-annotations, and single punctuation
characters. Keywords are words too, so ignoring identifiers also folds
keywords together.
"""

import re
from typing import List

from .base import BaseTokenizer, Token, LITERAL_IMAGE, IDENTIFIER_IMAGE


_TOKEN_RE = re.compile(
    r"""
    (?P<comment>/\*.*?\*/|//[^\n]*)
    |(?P<literal>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|\b\d[\w.]*)
    |(?P<annotation>@[A-Za-z_][\w.]*)
    |(?P<word>[A-Za-z_$][\w$]*)
    |(?P<space>\s+)
    |(?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)


class GenericTokenizer(BaseTokenizer):
    """Regex tokenizer shared by every language without a grammar."""

    def tokenize(self, content: str) -> List[Token]:
        tokens: List[Token] = []
        line = 1
        last = 0

        for match in _TOKEN_RE.finditer(content):
            line += content.count("\n", last, match.start())
            last = match.start()

            kind = match.lastgroup
            if kind in ("comment", "space"):
                continue

            image = match.group()
            if kind == "literal" and self.options.ignore_literals:
                image = LITERAL_IMAGE
            elif kind == "word" and self.options.ignore_identifiers:
                image = IDENTIFIER_IMAGE
            elif kind == "annotation" and self.options.ignore_annotations:
                continue

            tokens.append(Token(image, line))

        return tokens
