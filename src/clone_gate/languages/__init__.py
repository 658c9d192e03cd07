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
Language profiles for tokenization.

A profile names a tokenizer and the file extensions it claims. Profiles with a
tree-sitter grammar get AST-accurate tokens; "any" uses the regex tokenizer
and accepts every file.
"""

from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError
from .base import BaseTokenizer, Token, TokenizerOptions
from .generic import GenericTokenizer


# Language registry - maps profile name to tokenizer class
_TOKENIZER_REGISTRY: dict[str, type[BaseTokenizer]] = {}

# Extensions claimed by each profile; an empty set matches everything
_LANGUAGE_EXTENSIONS: dict[str, set[str]] = {
    "java": {".java"},
    "python": {".py", ".pyw"},
    "javascript": {".js", ".mjs", ".cjs", ".jsx"},
    "any": set(),
}

# Alternate spellings accepted on the command line
_ALIASES = {
    "ecmascript": "javascript",
    "js": "javascript",
    "py": "python",
}

# Extension to language mapping
EXTENSION_MAP = {
    ext: language
    for language, extensions in _LANGUAGE_EXTENSIONS.items()
    for ext in extensions
}


def register_tokenizer(language: str, tokenizer_class: type[BaseTokenizer], extensions: set[str] = frozenset()) -> None:
    """Register a tokenizer for a language profile."""
    language = language.lower()
    _TOKENIZER_REGISTRY[language] = tokenizer_class
    _LANGUAGE_EXTENSIONS.setdefault(language, set()).update(extensions)
    for ext in extensions:
        EXTENSION_MAP.setdefault(ext, language)


def normalize_language(language: str) -> str:
    """Canonical profile name, or ConfigurationError for unknown profiles."""
    name = (language or "").strip().lower()
    name = _ALIASES.get(name, name)
    if name not in _LANGUAGE_EXTENSIONS:
        known = ", ".join(sorted(supported_languages()))
        raise ConfigurationError(f"Unknown language '{language}'. Known: {known}")
    return name


def supported_languages() -> set[str]:
    return set(_LANGUAGE_EXTENSIONS)


def extensions_for_language(language: str) -> set[str]:
    """Get file extensions for a language."""
    return set(_LANGUAGE_EXTENSIONS[normalize_language(language)])


def detect_language(file_path: Path) -> Optional[str]:
    """Detect language from file extension."""
    return EXTENSION_MAP.get(file_path.suffix.lower())


def get_tokenizer(language: str, options: TokenizerOptions = TokenizerOptions()) -> BaseTokenizer:
    """
    Get a tokenizer instance for the given language profile.

    Raises:
        ConfigurationError: unknown profile, or its grammar is not installed
    """
    language = normalize_language(language)

    if language in _TOKENIZER_REGISTRY:
        return _TOKENIZER_REGISTRY[language](options)

    try:
        if language == "java":
            from .java import JavaTokenizer
            tokenizer = JavaTokenizer(options)
        elif language == "python":
            from .python import PythonTokenizer
            tokenizer = PythonTokenizer(options)
        elif language == "javascript":
            from .javascript import JavaScriptTokenizer
            tokenizer = JavaScriptTokenizer(options)
        else:
            return GenericTokenizer(options)

        # Load the grammar now so a broken install fails before scanning
        tokenizer._ensure_parser()
    except ImportError as e:
        raise ConfigurationError(
            f"tree-sitter grammar for '{language}' not installed. "
            f"Install with: pip install tree-sitter-{language}"
        ) from e

    return tokenizer


__all__ = [
    "BaseTokenizer",
    "Token",
    "TokenizerOptions",
    "EXTENSION_MAP",
    "register_tokenizer",
    "normalize_language",
    "supported_languages",
    "extensions_for_language",
    "detect_language",
    "get_tokenizer",
]
