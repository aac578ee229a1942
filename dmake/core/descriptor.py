# SPDX-License-Identifier: MIT
"""What gets built in one directory.

A BuildDescriptor is created for each directory dmake visits. It starts
out with defaults derived from the directory name and is filled in from
the command line, the directory's .dmake file and source inference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dmake.core.errors import ConflictError, UsageError

# Directory names whose parent names the module.
COMMON_SOURCE_DIRECTORIES = frozenset({"src", "source"})


class Action(Enum):
    """What dmake has been asked to do."""

    DEFAULT = "default"
    BUILDING = "build"
    CLEANING = "clean"
    INSTALLING = "install"
    INITING = "init"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def keywords(cls) -> frozenset[str]:
        return frozenset(a.value for a in cls if a is not cls.DEFAULT)


class OutputType(Enum):
    """Module kind being produced."""

    UNKNOWN = "unknown"
    EXE = "exe"
    LIB = "lib"
    DLL = "dll"
    PLUGIN = "plugin"

    def __str__(self) -> str:
        return self.value

    @property
    def dcc_argument(self) -> str:
        """The dcc option selecting this kind of output."""
        if self is OutputType.UNKNOWN:
            raise ValueError("unexpected output type: unknown")
        return f"--{self.value}"

    @property
    def var_name(self) -> str:
        """The .dmake variable that declares this kind of output."""
        if self is OutputType.UNKNOWN:
            raise ValueError("unexpected output type: unknown")
        return self.value.upper()

    @classmethod
    def keywords(cls) -> frozenset[str]:
        return frozenset(t.value for t in cls if t is not cls.UNKNOWN)


class Language(Enum):
    """Source language family."""

    UNKNOWN = ""
    C = "c"
    CXX = "c++"
    OBJC = "objc"
    OBJCXX = "objc++"

    def __str__(self) -> str:
        return self.value or "language not recognized"

    @classmethod
    def parse(cls, name: str) -> Language:
        """Return the Language called name.

        Raises:
            UsageError: If name is not a supported language.
        """
        for lang in cls:
            if lang is not cls.UNKNOWN and lang.value == name:
                return lang
        raise UsageError(f"{name!r} is not a valid language")

    @classmethod
    def keywords(cls) -> frozenset[str]:
        return frozenset(lang.value for lang in cls if lang is not cls.UNKNOWN)


def default_output_name(directory: Path) -> str:
    """Return the module name for a directory.

    This is the directory's name, or its parent's name when the directory
    is a conventional source directory such as ``src``.
    """
    directory = directory.absolute()
    if directory.name.lower() in COMMON_SOURCE_DIRECTORIES:
        return directory.parent.name
    return directory.name


@dataclass
class BuildDescriptor:
    """Build state for a single directory.

    Attributes:
        directory: The directory being built; all relative paths are
            relative to it.
        source_files: Source files to compile, relative to directory.
        output_type: Kind of module to produce.
        output_name: File name of the module.
        output_name_is_default: True until the user names the output.
        default_output_name: Module name derived from the directory.
        install_prefix: Installation prefix, "" if none was given.
        subdirectories: Sub-directories to process, relative to directory.
        language: Language of the source files, if known.
    """

    directory: Path
    source_files: list[str] = field(default_factory=list)
    output_type: OutputType = OutputType.UNKNOWN
    output_name: str = ""
    output_name_is_default: bool = True
    default_output_name: str = ""
    install_prefix: str = ""
    subdirectories: list[str] = field(default_factory=list)
    language: Language = Language.UNKNOWN

    @classmethod
    def for_directory(
        cls,
        directory: Path | str,
        output_name: str = "",
        install_prefix: str = "",
    ) -> BuildDescriptor:
        """Create a fresh descriptor for a directory."""
        directory = Path(directory)
        default = default_output_name(directory)
        return cls(
            directory=directory,
            output_name=output_name or default,
            output_name_is_default=not output_name,
            default_output_name=default,
            install_prefix=install_prefix,
        )

    def set_output_type(self, output_type: OutputType, source: str = "") -> None:
        """Set the module kind.

        Setting the kind that is already set is allowed; changing it is not.

        Raises:
            ConflictError: If a different kind was already set.
        """
        if (
            self.output_type is not OutputType.UNKNOWN
            and self.output_type is not output_type
        ):
            what = source or output_type.var_name
            raise ConflictError(
                f"{what} definition conflicts with {self.output_type}"
            )
        self.output_type = output_type

    def set_output_name(self, name: str) -> None:
        self.output_name = name
        self.output_name_is_default = False

    @property
    def has_subdirectories(self) -> bool:
        return bool(self.subdirectories)

    @property
    def has_sources(self) -> bool:
        return bool(self.source_files)

    def path(self, relative: str) -> Path:
        """Return a path inside the descriptor's directory."""
        return self.directory / relative
