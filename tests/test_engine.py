"""Unit tests for the duplication engine."""

import pytest

from conftest import SNIPPET, SNIPPET_TOKENS, write
from clone_gate.engine import DetectionEngine, EngineConfig
from clone_gate.errors import IOFailure
from clone_gate.languages import TokenizerOptions


def make_engine(minimum=20, skip_duplicates=False, **options):
    return DetectionEngine(EngineConfig(
        minimum_tile_size=minimum,
        language="any",
        tokenizer_options=TokenizerOptions(**options),
        source_encoding="utf-8",
        skip_duplicates=skip_duplicates,
    ))


class TestDetection:
    """Test match finding over registered sources."""

    def test_shared_snippet_is_one_match(self, twin_sources):
        _, first, second = twin_sources
        engine = make_engine()
        engine.add_path(first)
        engine.add_path(second)

        matches = engine.run()

        assert len(matches) == 1
        match = matches[0]
        assert match.token_count == SNIPPET_TOKENS
        assert [o.source_id for o in match.occurrences] == [str(first), str(second)]
        assert [(o.start_line, o.end_line) for o in match.occurrences] == [(2, 8), (2, 8)]
        assert match.fragment.startswith("int compute(int a, int b) {")
        assert match.fragment.rstrip().endswith("}")

    def test_no_match_below_minimum(self, twin_sources):
        _, first, second = twin_sources
        engine = make_engine(minimum=SNIPPET_TOKENS + 1)
        engine.add_path(first)
        engine.add_path(second)

        assert engine.run() == []

    def test_three_copies_form_one_group(self, tmp_path):
        engine = make_engine()
        for name in ("A.c", "B.c", "C.c"):
            engine.add_path(write(tmp_path / name, SNIPPET))

        matches = engine.run()

        assert len(matches) == 1
        assert len(matches[0].occurrences) == 3

    def test_copies_within_one_file(self, tmp_path):
        path = write(tmp_path / "Twice.c", SNIPPET + "\n" + SNIPPET)
        engine = make_engine()
        engine.add_path(path)

        matches = engine.run()

        assert len(matches) == 1
        first, second = matches[0].occurrences
        assert first.source_id == second.source_id == str(path)
        assert first.end_line < second.start_line

    def test_matches_respect_minimum_and_have_two_occurrences(self, tmp_path):
        engine = make_engine(minimum=10)
        engine.add_path(write(tmp_path / "A.c", SNIPPET + "int y = compute(1, 2);\n"))
        engine.add_path(write(tmp_path / "B.c", "int y = compute(1, 2);\n" + SNIPPET))
        engine.add_path(write(tmp_path / "C.c", SNIPPET.replace("10", "11")))

        matches = engine.run()

        assert matches
        for match in matches:
            assert match.token_count >= 10
            assert len(match.occurrences) >= 2

    def test_repeated_runs_are_identical(self, twin_sources):
        _, first, second = twin_sources
        engine = make_engine()
        engine.add_path(first)
        engine.add_path(second)

        assert engine.run() == engine.run()

    def test_empty_engine_finds_nothing(self):
        assert make_engine().run() == []

    def test_add_content_registers_in_memory_source(self, tmp_path):
        path = write(tmp_path / "A.c", SNIPPET)
        engine = make_engine()
        engine.add_path(path)
        engine.add_content("SCHEMA.COMPUTE", SNIPPET)

        matches = engine.run()

        assert len(matches) == 1
        assert matches[0].occurrences[1].source_id == "SCHEMA.COMPUTE"

    def test_unreadable_path_is_io_failure(self, tmp_path):
        with pytest.raises(IOFailure):
            make_engine().add_path(tmp_path / "missing.c")


class TestNormalization:
    """Test tokenizer options change what counts as equal."""

    def test_ignore_literals(self, tmp_path):
        changed = SNIPPET.replace("10", "20").replace("= 0", "= 1").replace("* 2", "* 3")
        first = write(tmp_path / "A.c", SNIPPET)
        second = write(tmp_path / "B.c", changed)

        strict = make_engine(minimum=30)
        strict.add_path(first)
        strict.add_path(second)
        assert strict.run() == []

        loose = make_engine(minimum=30, ignore_literals=True)
        loose.add_path(first)
        loose.add_path(second)
        matches = loose.run()
        assert len(matches) == 1
        assert matches[0].token_count == SNIPPET_TOKENS

    def test_ignore_identifiers(self, tmp_path):
        renamed = SNIPPET.replace("total", "sum").replace("compute", "calc")
        first = write(tmp_path / "A.c", SNIPPET)
        second = write(tmp_path / "B.c", renamed)

        strict = make_engine(minimum=30)
        strict.add_path(first)
        strict.add_path(second)
        assert strict.run() == []

        loose = make_engine(minimum=30, ignore_identifiers=True)
        loose.add_path(first)
        loose.add_path(second)
        assert len(loose.run()) == 1

    def test_ignore_annotations(self, tmp_path):
        annotated = (
            SNIPPET.replace("    int total", "    @Checked int total")
            .replace("        total =", "        @Checked total =")
        )
        first = write(tmp_path / "A.c", SNIPPET)
        second = write(tmp_path / "B.c", annotated)

        strict = make_engine(minimum=30)
        strict.add_path(first)
        strict.add_path(second)
        assert strict.run() == []

        loose = make_engine(minimum=30, ignore_annotations=True)
        loose.add_path(first)
        loose.add_path(second)
        assert len(loose.run()) == 1


class TestSkipDuplicates:
    """Test the same-name-and-length heuristic."""

    def test_same_name_and_length_is_skipped(self, tmp_path):
        first = write(tmp_path / "a" / "Dup.c", SNIPPET)
        second = write(tmp_path / "b" / "Dup.c", SNIPPET)
        engine = make_engine(skip_duplicates=True)

        assert engine.add_path(first) is True
        assert engine.add_path(second) is False
        assert engine.source_count == 1
        assert engine.run() == []

    def test_without_flag_both_are_scanned(self, tmp_path):
        engine = make_engine()
        engine.add_path(write(tmp_path / "a" / "Dup.c", SNIPPET))
        engine.add_path(write(tmp_path / "b" / "Dup.c", SNIPPET))

        assert len(engine.run()) == 1

    def test_same_name_different_length_is_kept(self, tmp_path):
        engine = make_engine(skip_duplicates=True)
        engine.add_path(write(tmp_path / "a" / "Dup.c", SNIPPET))
        engine.add_path(write(tmp_path / "b" / "Dup.c", SNIPPET + "\n// extra\n"))

        assert engine.source_count == 2
        assert len(engine.run()) == 1
