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
Renderers - turn match groups into report text.

Built-in renderers are registered by format name. Any other name is
treated as a dotted path to a renderer class (``package.module.ClassName``)
and imported on demand.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List
from xml.sax.saxutils import quoteattr
import csv
import importlib
import io
import json
import re

from .errors import RendererNotFound
from .models import MatchGroup, DEFAULT_OUTPUT_ENCODING


# Element the XML renderer writes once per match group
DUPLICATION_ELEMENT = "duplication"


class Renderer(ABC):
    """Renders a sequence of match groups to text."""

    @abstractmethod
    def render(self, matches: List[MatchGroup]) -> str:
        pass


RendererFactory = Callable[[str], Renderer]

_RENDERER_REGISTRY: Dict[str, RendererFactory] = {}


def register_renderer(name: str) -> Callable:
    """
    Class decorator registering a renderer under a format name.

    The class is constructed with the output encoding as its only argument.
    """
    def decorator(cls):
        _RENDERER_REGISTRY[name] = cls
        return cls
    return decorator


def available_formats() -> List[str]:
    return sorted(_RENDERER_REGISTRY)


def create_renderer(name: str, encoding: str = DEFAULT_OUTPUT_ENCODING) -> Renderer:
    """
    Look up a renderer by format name or dotted class path.

    Raises:
        RendererNotFound: unknown name, failed import, or the object
            found cannot render
    """
    if name in _RENDERER_REGISTRY:
        return _RENDERER_REGISTRY[name](encoding)

    module_name, _, attr = name.rpartition(".")
    if not module_name:
        raise RendererNotFound(name, f"known formats: {', '.join(available_formats())}")

    try:
        module = importlib.import_module(module_name)
        renderer_class = getattr(module, attr)
        renderer = renderer_class()
    except Exception as e:
        raise RendererNotFound(name, f"{type(e).__name__}: {e}") from e

    if not callable(getattr(renderer, "render", None)):
        raise RendererNotFound(name, "object has no render() method")
    return renderer


@register_renderer("xml")
class XmlRenderer(Renderer):
    """
    CPD-style XML.

    The declaration names the output encoding, so the artifact's declared
    and actual encodings always agree.
    """

    def __init__(self, encoding: str = DEFAULT_OUTPUT_ENCODING):
        self.encoding = encoding

    def render(self, matches: List[MatchGroup]) -> str:
        lines = [f'<?xml version="1.0" encoding="{self.encoding}"?>', "<pmd-cpd>"]

        for match in matches:
            lines.append(
                f'<{DUPLICATION_ELEMENT} lines="{match.line_count}" tokens="{match.token_count}">'
            )
            for occurrence in match.occurrences:
                lines.append(
                    f'<file line="{occurrence.start_line}" endline="{occurrence.end_line}" '
                    f'path={self._attribute(occurrence.source_id)}/>'
                )
            lines.append(f"<codefragment><![CDATA[{_cdata(_xml_text(match.fragment))}]]></codefragment>")
            lines.append(f"</{DUPLICATION_ELEMENT}>")

        lines.append("</pmd-cpd>")
        return "\n".join(lines) + "\n"

    def _attribute(self, value: str) -> str:
        # Characters the output encoding lacks become character references
        quoted = quoteattr(_xml_text(value))
        return quoted.encode(self.encoding, "xmlcharrefreplace").decode(self.encoding)


@register_renderer("csv")
class CsvRenderer(Renderer):
    """One row per match: line count, token count, occurrence count, then line/path pairs."""

    def __init__(self, encoding: str = DEFAULT_OUTPUT_ENCODING, separator: str = ","):
        self.encoding = encoding
        self.separator = separator

    def render(self, matches: List[MatchGroup]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.separator, lineterminator="\n")
        writer.writerow(["lines", "tokens", "occurrences"])
        for match in matches:
            row = [match.line_count, match.token_count, len(match.occurrences)]
            for occurrence in match.occurrences:
                row.extend([occurrence.start_line, occurrence.source_id])
            writer.writerow(row)
        return buffer.getvalue()


@register_renderer("text")
class TextRenderer(Renderer):
    """Plain text listing, one block per match."""

    def __init__(self, encoding: str = DEFAULT_OUTPUT_ENCODING):
        self.encoding = encoding

    def render(self, matches: List[MatchGroup]) -> str:
        lines = []
        for match in matches:
            lines.append(
                f"Found a {match.line_count} line ({match.token_count} tokens) "
                f"duplication in the following files: "
            )
            for occurrence in match.occurrences:
                lines.append(f"Starting at line {occurrence.start_line} of {occurrence.source_id}")
            lines.append("")
            lines.append(match.fragment)
            lines.append("")
            lines.append("=" * 70)
        return "\n".join(lines) + ("\n" if lines else "")


@register_renderer("json")
class JsonRenderer(Renderer):
    """JSON format for programmatic use."""

    def __init__(self, encoding: str = DEFAULT_OUTPUT_ENCODING):
        self.encoding = encoding

    def render(self, matches: List[MatchGroup]) -> str:
        data = {
            "meta": {
                "duplication_count": len(matches),
                "total_duplicated_lines": sum(m.line_count * len(m.occurrences) for m in matches),
                "timestamp": datetime.now().isoformat(),
            },
            "duplications": [
                {
                    "lines": match.line_count,
                    "tokens": match.token_count,
                    "occurrences": [
                        {
                            "file": occurrence.source_id,
                            "start_line": occurrence.start_line,
                            "end_line": occurrence.end_line,
                        }
                        for occurrence in match.occurrences
                    ],
                    "fragment": match.fragment,
                }
                for match in matches
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)


# Characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS = re.compile(
    "[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def _xml_text(text: str) -> str:
    return _INVALID_XML_CHARS.sub("", text)


def _cdata(text: str) -> str:
    # "]]>" cannot appear inside a CDATA section
    return text.replace("]]>", "]]]]><![CDATA[>")
