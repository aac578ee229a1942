# SPDX-License-Identifier: MIT
"""Tests for dmake.scaffold (dmake init)."""

import errno
from pathlib import Path

import pytest

from dmake import scaffold
from dmake.configure.config import Config
from dmake.core.descriptor import BuildDescriptor, Language, OutputType
from dmake.core.errors import ConflictError, DmakeFilesystemError, ScaffoldError
from dmake.scaffold import (
    MAKEFILE_TEMPLATE,
    compiler_options,
    create_file,
    init_project,
    options_filename,
    parse_init_args,
)


def snapshot(directory: Path) -> dict[str, str]:
    return {
        str(p.relative_to(directory)): p.read_text()
        for p in sorted(directory.rglob("*"))
        if p.is_file()
    }


class TestParseInitArgs:
    def test_defaults(self):
        opts = parse_init_args([])
        assert opts.build_mode == "debug"
        assert opts.language is Language.UNKNOWN
        assert opts.language_std == ""
        assert opts.project_type is OutputType.UNKNOWN

    def test_all_keywords(self):
        opts = parse_init_args(["tool", "exe", "c", "c99", "release"])
        assert opts.output_name == "tool"
        assert opts.project_type is OutputType.EXE
        assert opts.language is Language.C
        assert opts.language_std == "c99"
        assert opts.build_mode == "release"

    def test_default_standards(self):
        assert parse_init_args(["c"]).language_std == "c11"
        assert parse_init_args(["c++"]).language_std == "c++14"

    def test_language_from_sources(self):
        opts = parse_init_args([], detected=Language.CXX)
        assert opts.language is Language.CXX
        assert opts.language_std == "c++14"

    def test_language_from_standard(self):
        assert parse_init_args(["c17"]).language is Language.C
        assert parse_init_args(["c++20"]).language is Language.CXX

    def test_language_must_match_sources(self):
        with pytest.raises(ConflictError, match="not the language used"):
            parse_init_args(["c"], detected=Language.CXX)

    @pytest.mark.parametrize(
        "args",
        [
            ["c", "c++"],
            ["exe", "lib"],
            ["debug", "release"],
            ["c++11", "c++17"],
            ["one", "two"],
        ],
    )
    def test_repeated_category(self, args):
        with pytest.raises(ConflictError, match="already specified"):
            parse_init_args(args)

    def test_name_from_output_option(self):
        with pytest.raises(ConflictError, match="output filename"):
            parse_init_args(["other"], output_name="given")

    def test_c_standard_for_cxx(self):
        with pytest.raises(ConflictError, match="C standard specified"):
            parse_init_args(["c11"], detected=Language.CXX)

    def test_cxx_standard_for_c(self):
        with pytest.raises(ConflictError, match=r"C\+\+ standard specified"):
            parse_init_args(["c", "c++17"])


class TestFiles:
    def test_compiler_options_debug(self):
        opts = parse_init_args(["c"])
        text = compiler_options(opts)
        assert text.startswith("# This file is read by dcc")
        assert "-std=c11\n" in text
        assert "-Wall -Wextra -pedantic\n" in text
        assert "-DDEBUG\n-O0\n" in text

    def test_compiler_options_release(self):
        text = compiler_options(parse_init_args(["c++", "release"]))
        assert "-std=c++14\n" in text
        assert "-DNDEBUG\n-O2\n" in text

    def test_options_filename(self):
        assert options_filename(Language.C) == "CFLAGS"
        assert options_filename(Language.OBJC) == "CFLAGS"
        assert options_filename(Language.CXX) == "CXXFLAGS"
        assert options_filename(Language.OBJCXX) == "CXXFLAGS"

    def test_create_file_refuses_existing(self, tmp_path: Path):
        path = tmp_path / "f"
        path.write_text("keep")
        with pytest.raises(DmakeFilesystemError):
            create_file(path, "new")
        assert path.read_text() == "keep"

    def test_create_file_removes_partial_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        real_open = open

        class ShortWrite:
            def __init__(self, f):
                self.f = f

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                self.f.close()

            def write(self, text):
                self.f.write(text[:3])
                self.f.flush()
                raise OSError(errno.ENOSPC, "No space left on device")

        def short_open(*args, **kwargs):
            return ShortWrite(real_open(*args, **kwargs))

        monkeypatch.setattr(scaffold, "open", short_open, raising=False)
        path = tmp_path / "Makefile"
        with pytest.raises(DmakeFilesystemError):
            create_file(path, "all:\n\tdmake\n")
        assert not path.exists()


class TestInitProject:
    def test_c_executable(self, tmp_path: Path):
        d = tmp_path / "fred"
        d.mkdir()
        (d / "main.c").write_text("int main(void) { return 0; }\n")
        created = init_project([], BuildDescriptor.for_directory(d), Config())

        names = [str(p.relative_to(d)) for p in created]
        assert names == [
            str(Path(".dcc/CFLAGS")),
            str(Path(".dcc/LDFLAGS")),
            str(Path(".dcc/LIBS")),
            "Makefile",
        ]
        assert "-std=c11" in (d / ".dcc" / "CFLAGS").read_text()
        assert (d / "Makefile").read_text() == MAKEFILE_TEMPLATE
        assert not (d / ".dmake").exists()

    def test_cxx_library(self, tmp_path: Path):
        d = tmp_path / "widget" / "src"
        d.mkdir(parents=True)
        (d / "a.cpp").write_text("int f() { return 1; }\n")
        init_project([], BuildDescriptor.for_directory(d), Config())
        assert "-std=c++14" in (d / ".dcc" / "CXXFLAGS").read_text()
        assert not (d / ".dcc" / "LDFLAGS").exists()
        assert not (d / ".dcc" / "LIBS").exists()
        assert not (d / ".dmake").exists()

    def test_dll_gets_ldflags(self, tmp_path: Path):
        init_project(["dll", "c"], BuildDescriptor.for_directory(tmp_path), Config())
        assert (tmp_path / ".dcc" / "LDFLAGS").exists()
        assert not (tmp_path / ".dcc" / "LIBS").exists()

    def test_named_output_writes_dmakefile(self, tmp_path: Path):
        d = tmp_path / "proj"
        d.mkdir()
        init_project(["tool", "exe", "c"], BuildDescriptor.for_directory(d), Config())
        assert (d / ".dmake").read_text() == "EXE = tool\n"

    def test_output_option(self, tmp_path: Path):
        d = tmp_path / "proj"
        d.mkdir()
        descriptor = BuildDescriptor.for_directory(d, output_name="other")
        init_project(["lib", "c"], descriptor, Config())
        assert (d / ".dmake").read_text() == "LIB = other\n"

    def test_second_init_changes_nothing(self, tmp_path: Path):
        (tmp_path / "main.c").write_text("int main() {}\n")
        init_project([], BuildDescriptor.for_directory(tmp_path), Config())
        before = snapshot(tmp_path)
        with pytest.raises(ScaffoldError, match="already exists"):
            init_project(["release"], BuildDescriptor.for_directory(tmp_path), Config())
        assert snapshot(tmp_path) == before

    @pytest.mark.parametrize("existing", [".dcc", ".dmake", "Makefile"])
    def test_refuses_existing_files(self, tmp_path: Path, existing):
        if existing == ".dcc":
            (tmp_path / existing).mkdir()
        else:
            (tmp_path / existing).write_text("")
        with pytest.raises(ScaffoldError):
            init_project([], BuildDescriptor.for_directory(tmp_path), Config())
        assert sorted(p.name for p in tmp_path.iterdir()) == [existing]

    def test_conflict_creates_nothing(self, tmp_path: Path):
        (tmp_path / "a.cpp").write_text("")
        with pytest.raises(ConflictError):
            init_project(["c"], BuildDescriptor.for_directory(tmp_path), Config())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.cpp"]
