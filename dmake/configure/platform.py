# SPDX-License-Identifier: MIT
"""Platform detection and output file naming.

The host platform decides how output files are named: the suffix of
object files and executables and the prefix/suffix of static, dynamic
and plugin libraries. Three profiles exist (Windows, macOS and generic
ELF); one is selected per process.

Platform and architecture names follow the Go conventions ("linux",
"darwin", "windows", "amd64", "arm64") because those are the names users
write in platform-specific file names such as ``file_linux.c`` and test
with ``$OS`` / ``$ARCH`` in .dmake files.
"""

from __future__ import annotations

import os
import platform as _platform
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmake.core.descriptor import OutputType

# Every platform name that may appear as a file name qualifier.
ALL_PLATFORMS = (
    "aix",
    "darwin",
    "dragonfly",
    "freebsd",
    "illumos",
    "ios",
    "linux",
    "netbsd",
    "openbsd",
    "solaris",
    "windows",
)

_SYSTEM_NAMES = {
    "sunos": "solaris",
    "cygwin": "windows",
    "msys": "windows",
}

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def host_os() -> str:
    """Return the host operating system name, Go style."""
    system = _platform.system().lower()
    for prefix, name in _SYSTEM_NAMES.items():
        if system.startswith(prefix):
            return name
    return system or "unknown"


def host_arch() -> str:
    """Return the host CPU architecture name, Go style."""
    machine = _platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine or "unknown")


@dataclass(frozen=True)
class Platform:
    """File naming conventions of a platform.

    Attributes:
        os: Operating system name ("linux", "darwin", "windows", ...).
        arch: Architecture name ("amd64", "arm64", ...).
        object_suffix: Suffix of compiled object files.
        exe_suffix: Suffix of executables.
        static_lib_prefix: Prefix of static libraries.
        static_lib_suffix: Suffix of static libraries.
        shared_lib_prefix: Prefix of dynamic libraries.
        shared_lib_suffix: Suffix of dynamic libraries.
        plugin_prefix: Prefix of loadable plugins.
        plugin_suffix: Suffix of loadable plugins.
    """

    os: str
    arch: str
    object_suffix: str
    exe_suffix: str
    static_lib_prefix: str
    static_lib_suffix: str
    shared_lib_prefix: str
    shared_lib_suffix: str
    plugin_prefix: str
    plugin_suffix: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_posix(self) -> bool:
        return not self.is_windows

    def exe_filename(self, path: str) -> str:
        return form_filename("", path, self.exe_suffix)

    def lib_filename(self, path: str) -> str:
        return form_filename(self.static_lib_prefix, path, self.static_lib_suffix)

    def dll_filename(self, path: str) -> str:
        return form_filename(self.shared_lib_prefix, path, self.shared_lib_suffix)

    def plugin_filename(self, path: str) -> str:
        return form_filename(self.plugin_prefix, path, self.plugin_suffix)

    def object_filename(self, path: str) -> str:
        return form_filename("", path, self.object_suffix)

    def name_for(self, kind: OutputType, stem: str) -> str:
        """Return the output file name for a module kind.

        Raises:
            ValueError: If kind is OutputType.UNKNOWN.
        """
        from dmake.core.descriptor import OutputType

        if kind is OutputType.EXE:
            return self.exe_filename(stem)
        if kind is OutputType.LIB:
            return self.lib_filename(stem)
        if kind is OutputType.DLL:
            return self.dll_filename(stem)
        if kind is OutputType.PLUGIN:
            return self.plugin_filename(stem)
        raise ValueError(f"no file name for output type {kind}")

    def object_file_for(self, source: str, objsdir: str) -> str:
        """Return the object file a source file compiles to.

        ``src/foo.c`` with objsdir ``.objs`` becomes ``src/.objs/foo.o``.
        """
        dirname, basename = os.path.split(source)
        stem = os.path.splitext(basename)[0]
        path = os.path.normpath(os.path.join(dirname, objsdir, stem))
        return self.object_filename(path)


def form_filename(prefix: str, path: str, suffix: str) -> str:
    """Add a prefix and suffix to the base name of path.

    Either is only added when the base name does not already carry it,
    so applying the same prefix/suffix again changes nothing.
    """
    dirname, basename = os.path.split(path)
    if prefix and not basename.startswith(prefix):
        basename = prefix + basename
    if suffix and not basename.endswith(suffix):
        basename += suffix
    return os.path.normpath(os.path.join(dirname, basename))


def dependencies_file_for(object_file: str, depsdir: str, objsdir: str) -> str:
    """Return the dependency file dcc writes for an object file.

    When the object file already lives in the objects directory the
    dependency file sits next to it; otherwise it goes into depsdir.
    """
    dirname, basename = os.path.split(object_file)
    if dirname.endswith(objsdir):
        return os.path.join(dirname, basename)
    return os.path.join(dirname, depsdir, basename)


def windows_platform(arch: str = "amd64") -> Platform:
    return Platform(
        os="windows",
        arch=arch,
        object_suffix=".obj",
        exe_suffix=".exe",
        static_lib_prefix="",
        static_lib_suffix=".lib",
        shared_lib_prefix="",
        shared_lib_suffix=".dll",
        plugin_prefix="",
        plugin_suffix=".dll",
    )


def macos_platform(arch: str = "arm64") -> Platform:
    return Platform(
        os="darwin",
        arch=arch,
        object_suffix=".o",
        exe_suffix="",
        static_lib_prefix="lib",
        static_lib_suffix=".a",
        shared_lib_prefix="lib",
        shared_lib_suffix=".dylib",
        plugin_prefix="",
        plugin_suffix=".bundle",
    )


def elf_platform(os_name: str = "linux", arch: str = "amd64") -> Platform:
    return Platform(
        os=os_name,
        arch=arch,
        object_suffix=".o",
        exe_suffix="",
        static_lib_prefix="lib",
        static_lib_suffix=".a",
        shared_lib_prefix="lib",
        shared_lib_suffix=".so",
        plugin_prefix="",
        plugin_suffix=".so",
    )


def platform_for(os_name: str, arch: str) -> Platform:
    """Return the naming profile for an operating system."""
    if os_name == "windows":
        return windows_platform(arch)
    if os_name == "darwin":
        return macos_platform(arch)
    return elf_platform(os_name, arch)


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Return the Platform of the build host."""
    return platform_for(host_os(), host_arch())


def other_platforms_pattern(host: str) -> re.Pattern[str]:
    """Return a regex matching file names qualified for another platform.

    ``foo_windows.c`` matches on a linux host, ``foo_linux.c`` does not.
    """
    names = [name for name in ALL_PLATFORMS if name != host]
    return re.compile("_(" + "|".join(names) + r")\.")
