"""Shared fixtures for clone-gate tests."""

from pathlib import Path

import pytest

from clone_gate.models import DetectionConfig


# 46 tokens under the "any" profile
SNIPPET = """int compute(int a, int b) {
    int total = a + b;
    for (int i = 0; i < 10; i++) {
        total = total * 2 + i;
    }
    return total;
}
"""

SNIPPET_TOKENS = 46


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def twin_sources(tmp_path):
    """Two files sharing SNIPPET, each starting on line 2."""
    src = tmp_path / "src"
    first = write(src / "a" / "First.c", "// first file\n" + SNIPPET)
    second = write(src / "b" / "Second.c", "void other() { x(); }\n" + SNIPPET)
    return src, first, second


@pytest.fixture
def any_config():
    return DetectionConfig(minimum_tokens=20, language="any", source_encoding="utf-8")
