"""Unit tests for source file resolution."""

from clone_gate.fileset import find_source_files

from conftest import write


class TestFindSourceFiles:

    def test_filters_by_language_extension(self, tmp_path):
        src = tmp_path / "src"
        java = write(src / "pkg" / "Main.java", "class Main {}\n")
        write(src / "pkg" / "notes.txt", "hello\n")
        write(src / "tool.py", "pass\n")

        files = find_source_files([src], language="java")

        assert list(files) == [java.resolve()]
        assert files[java.resolve()] == src.resolve()

    def test_any_accepts_every_file(self, tmp_path):
        src = tmp_path / "src"
        write(src / "a.c", "x\n")
        write(src / "b.txt", "y\n")

        assert len(find_source_files([src], language="any")) == 2

    def test_default_and_custom_excludes(self, tmp_path):
        src = tmp_path / "src"
        keep = write(src / "app.py", "pass\n")
        write(src / "__pycache__" / "cached.py", "pass\n")
        write(src / "generated" / "stub.py", "pass\n")

        files = find_source_files([src], language="python", exclude_patterns=["generated/*"])

        assert list(files) == [keep.resolve()]

    def test_include_patterns(self, tmp_path):
        src = tmp_path / "src"
        write(src / "core" / "a.py", "pass\n")
        test_file = write(src / "tests" / "test_a.py", "pass\n")

        files = find_source_files([src], language="python", include_patterns=["test_*.py"])

        assert list(files) == [test_file.resolve()]

    def test_first_root_wins_and_missing_roots_ignored(self, tmp_path):
        src = tmp_path / "src"
        inner = src / "inner"
        shared = write(inner / "A.java", "class A {}\n")

        files = find_source_files([src, inner, tmp_path / "missing"], language="java")

        assert files == {shared.resolve(): src.resolve()}

    def test_stable_order(self, tmp_path):
        src = tmp_path / "src"
        for name in ["c.py", "a.py", "b.py"]:
            write(src / name, "pass\n")

        names = [p.name for p in find_source_files([src], language="python")]

        assert names == ["a.py", "b.py", "c.py"]
