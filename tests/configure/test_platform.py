# SPDX-License-Identifier: MIT
"""Tests for dmake.configure.platform."""

import os

import pytest

from dmake.configure import platform as platform_mod
from dmake.configure.platform import (
    ALL_PLATFORMS,
    dependencies_file_for,
    elf_platform,
    form_filename,
    get_platform,
    host_arch,
    host_os,
    macos_platform,
    other_platforms_pattern,
    platform_for,
    windows_platform,
)
from dmake.core.descriptor import OutputType


class TestHostNames:
    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Linux", "linux"),
            ("Darwin", "darwin"),
            ("Windows", "windows"),
            ("SunOS", "solaris"),
            ("CYGWIN_NT-10.0", "windows"),
            ("FreeBSD", "freebsd"),
        ],
    )
    def test_host_os(self, monkeypatch, system, expected):
        monkeypatch.setattr(platform_mod._platform, "system", lambda: system)
        assert host_os() == expected

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", "amd64"),
            ("AMD64", "amd64"),
            ("aarch64", "arm64"),
            ("arm64", "arm64"),
            ("i686", "386"),
            ("mips", "mips"),
        ],
    )
    def test_host_arch(self, monkeypatch, machine, expected):
        monkeypatch.setattr(platform_mod._platform, "machine", lambda: machine)
        assert host_arch() == expected

    def test_get_platform_cached(self):
        assert get_platform() is get_platform()


class TestProfiles:
    def test_windows(self):
        p = windows_platform()
        assert p.is_windows and not p.is_posix
        assert p.exe_filename("fred") == "fred.exe"
        assert p.lib_filename("fred") == "fred.lib"
        assert p.dll_filename("fred") == "fred.dll"
        assert p.plugin_filename("fred") == "fred.dll"
        assert p.object_filename("fred") == "fred.obj"

    def test_macos(self):
        p = macos_platform()
        assert p.is_macos and p.is_posix
        assert p.exe_filename("fred") == "fred"
        assert p.lib_filename("fred") == "libfred.a"
        assert p.dll_filename("fred") == "libfred.dylib"
        assert p.plugin_filename("fred") == "fred.bundle"
        assert p.object_filename("fred") == "fred.o"

    def test_elf(self):
        p = elf_platform()
        assert p.is_linux and p.is_posix
        assert p.exe_filename("fred") == "fred"
        assert p.lib_filename("fred") == "libfred.a"
        assert p.dll_filename("fred") == "libfred.so"
        assert p.plugin_filename("fred") == "fred.so"

    def test_platform_for(self):
        assert platform_for("windows", "386").is_windows
        assert platform_for("darwin", "arm64").is_macos
        freebsd = platform_for("freebsd", "amd64")
        assert freebsd.os == "freebsd"
        assert freebsd.shared_lib_suffix == ".so"


class TestNaming:
    @pytest.mark.parametrize(
        "prefix,path,suffix,expected",
        [
            ("lib", "fred", ".a", "libfred.a"),
            ("lib", "libfred", ".a", "libfred.a"),
            ("lib", "fred.a", ".a", "libfred.a"),
            ("", "fred", "", "fred"),
            ("lib", "out/fred", ".a", os.path.join("out", "libfred.a")),
            ("lib", "./fred", ".so", "libfred.so"),
        ],
    )
    def test_form_filename(self, prefix, path, suffix, expected):
        assert form_filename(prefix, path, suffix) == expected

    @pytest.mark.parametrize(
        "kind", [OutputType.EXE, OutputType.LIB, OutputType.DLL, OutputType.PLUGIN]
    )
    @pytest.mark.parametrize(
        "p", [windows_platform(), macos_platform(), elf_platform()], ids=str
    )
    def test_name_for_idempotent(self, p, kind):
        once = p.name_for(kind, "thing")
        assert p.name_for(kind, once) == once

    def test_name_for_unknown(self):
        with pytest.raises(ValueError):
            elf_platform().name_for(OutputType.UNKNOWN, "thing")

    def test_object_file_for(self):
        p = elf_platform()
        assert p.object_file_for("foo.c", ".objs") == os.path.join(".objs", "foo.o")
        assert p.object_file_for("src/foo.cpp", ".objs") == os.path.join(
            "src", ".objs", "foo.o"
        )
        assert windows_platform().object_file_for("foo.c", "o") == os.path.join(
            "o", "foo.obj"
        )

    def test_dependencies_file_colocated(self):
        ofile = os.path.join("src", ".objs", "foo.o")
        assert dependencies_file_for(ofile, ".dcc.d", ".objs") == ofile

    def test_dependencies_file_in_depsdir(self):
        result = dependencies_file_for("foo.o", ".dcc.d", ".objs")
        assert result == os.path.join(".dcc.d", "foo.o")


class TestOtherPlatforms:
    def test_host_excluded(self):
        pattern = other_platforms_pattern("linux")
        assert pattern.search("x_windows.c")
        assert pattern.search("x_darwin.cpp")
        assert not pattern.search("x_linux.c")

    def test_needs_underscore_and_dot(self):
        pattern = other_platforms_pattern("linux")
        assert not pattern.search("windows.c")
        assert not pattern.search("x_windowsy.c")

    def test_every_other_name(self):
        pattern = other_platforms_pattern("linux")
        for name in ALL_PLATFORMS:
            assert bool(pattern.search(f"f_{name}.c")) == (name != "linux")
