# SPDX-License-Identifier: MIT
"""Tests for dmake.core.descriptor."""

from pathlib import Path

import pytest

from dmake.core.descriptor import (
    Action,
    BuildDescriptor,
    Language,
    OutputType,
    default_output_name,
)
from dmake.core.errors import ConflictError, UsageError


class TestEnums:
    def test_action_keywords(self):
        assert Action.keywords() == {"build", "clean", "install", "init"}

    def test_output_type_keywords(self):
        assert OutputType.keywords() == {"exe", "lib", "dll", "plugin"}

    @pytest.mark.parametrize(
        "kind,arg,var",
        [
            (OutputType.EXE, "--exe", "EXE"),
            (OutputType.LIB, "--lib", "LIB"),
            (OutputType.DLL, "--dll", "DLL"),
            (OutputType.PLUGIN, "--plugin", "PLUGIN"),
        ],
    )
    def test_output_type_names(self, kind, arg, var):
        assert kind.dcc_argument == arg
        assert kind.var_name == var

    def test_unknown_output_type_has_no_names(self):
        with pytest.raises(ValueError):
            _ = OutputType.UNKNOWN.dcc_argument
        with pytest.raises(ValueError):
            _ = OutputType.UNKNOWN.var_name

    @pytest.mark.parametrize(
        "name,lang",
        [
            ("c", Language.C),
            ("c++", Language.CXX),
            ("objc", Language.OBJC),
            ("objc++", Language.OBJCXX),
        ],
    )
    def test_language_parse(self, name, lang):
        assert Language.parse(name) is lang
        assert str(lang) == name

    @pytest.mark.parametrize("name", ["", "C", "fortran"])
    def test_language_parse_invalid(self, name):
        with pytest.raises(UsageError):
            Language.parse(name)


class TestDefaultOutputName:
    def test_directory_name(self, tmp_path: Path):
        assert default_output_name(tmp_path / "fred") == "fred"

    @pytest.mark.parametrize("name", ["src", "source", "SRC", "Source"])
    def test_source_directory_uses_parent(self, tmp_path: Path, name):
        assert default_output_name(tmp_path / "widget" / name) == "widget"

    def test_relative_directory(self, tmp_path: Path, monkeypatch):
        (tmp_path / "widget").mkdir()
        monkeypatch.chdir(tmp_path / "widget")
        assert default_output_name(Path(".")) == "widget"


class TestBuildDescriptor:
    def test_for_directory_defaults(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path / "fred")
        assert d.output_name == "fred"
        assert d.output_name_is_default
        assert d.default_output_name == "fred"
        assert d.output_type is OutputType.UNKNOWN
        assert not d.has_sources
        assert not d.has_subdirectories

    def test_for_directory_with_name(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path / "fred", output_name="bob")
        assert d.output_name == "bob"
        assert not d.output_name_is_default
        assert d.default_output_name == "fred"

    def test_set_output_type_once(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path)
        d.set_output_type(OutputType.DLL)
        d.set_output_type(OutputType.DLL)
        assert d.output_type is OutputType.DLL

    def test_set_output_type_conflict(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path)
        d.set_output_type(OutputType.DLL)
        with pytest.raises(ConflictError, match="EXE definition conflicts with dll"):
            d.set_output_type(OutputType.EXE)
        assert d.output_type is OutputType.DLL

    def test_set_output_name(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path)
        d.set_output_name("other")
        assert d.output_name == "other"
        assert not d.output_name_is_default

    def test_path(self, tmp_path: Path):
        d = BuildDescriptor.for_directory(tmp_path)
        assert d.path("a.c") == tmp_path / "a.c"
