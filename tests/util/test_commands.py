# SPDX-License-Identifier: MIT
"""Tests for dmake.util.commands."""

import os
import stat
import sys
from pathlib import Path

import pytest

from dmake.util.commands import install, main


class TestInstall:
    def test_copies_and_sets_mode(self, tmp_path: Path):
        src = tmp_path / "src.txt"
        src.write_text("content")
        dest = tmp_path / "dest.txt"
        install(str(src), str(dest), 0o644)
        assert dest.read_text() == "content"
        if sys.platform != "win32":
            assert stat.S_IMODE(dest.stat().st_mode) == 0o644

    def test_replaces_read_only(self, tmp_path: Path):
        src = tmp_path / "src.txt"
        src.write_text("new")
        dest = tmp_path / "dest.txt"
        dest.write_text("old")
        os.chmod(dest, 0o444)
        install(str(src), str(dest), 0o444)
        assert dest.read_text() == "new"

    def test_missing_source(self, tmp_path: Path):
        dest = tmp_path / "dest.txt"
        with pytest.raises(OSError):
            install(str(tmp_path / "missing"), str(dest), 0o644)
        assert not dest.exists()


class TestMain:
    def test_install(self, tmp_path: Path):
        src = tmp_path / "a"
        src.write_text("x")
        dest = tmp_path / "b"
        assert main(["install", "600", str(src), str(dest)]) == 0
        assert dest.read_text() == "x"

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_unknown_command(self, capsys):
        assert main(["frobnicate"]) == 1
        assert "Unknown command" in capsys.readouterr().err

    def test_install_wrong_arguments(self):
        assert main(["install", "644"]) == 1

    def test_install_bad_mode(self, tmp_path: Path, capsys):
        assert main(["install", "rw", "a", "b"]) == 1
        assert "Invalid mode" in capsys.readouterr().err

    def test_install_failure(self, tmp_path: Path, capsys):
        missing = str(tmp_path / "missing")
        assert main(["install", "644", missing, str(tmp_path / "b")]) == 1
        assert "install:" in capsys.readouterr().err
