# SPDX-License-Identifier: MIT
"""dmake init: set up a project directory.

    dmake init [<name>] [exe|lib|dll|plugin] [c|c++|objc|objc++]
               [c99|c11|c17|c++11|c++14|c++17|c++20] [debug|release]

Creates:

    .dcc/CFLAGS or .dcc/CXXFLAGS   compiler options
    .dcc/LDFLAGS                   for executables and dynamic libraries
    .dcc/LIBS                      for executables
    .dmake                         only if the output is not named after the directory
    Makefile                       all, clean and install targets running dmake

Nothing is created if any of .dcc, .dmake or Makefile already exist.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dmake.configure.config import Config
from dmake.core.descriptor import BuildDescriptor, Language, OutputType
from dmake.core.dmakefile import DMAKEFILE_NAME
from dmake.core.errors import ConflictError, DmakeFilesystemError, ScaffoldError
from dmake.core.sources import (
    MainFunctionDetector,
    determine_output_type,
    source_files,
)

logger = logging.getLogger(__name__)

DCC_OPTIONS_DIR = ".dcc"
MAKEFILE_NAME = "Makefile"

DEFAULT_BUILD_MODE = "debug"
DEFAULT_C_STANDARD = "c11"
DEFAULT_CXX_STANDARD = "c++14"
DEFAULT_RELEASE_OPTIM = "-O2"
DEFAULT_DEBUG_OPTIM = "-O0"
DEFAULT_WARNING_OPTS = "-Wall -Wextra -pedantic"

BUILD_MODES = frozenset({"debug", "release"})
C_STANDARDS = frozenset({"c99", "c11", "c17"})
CXX_STANDARDS = frozenset({"c++11", "c++14", "c++17", "c++20"})

READ_BY_DCC = "# This file is read by dcc\n#\n\n"

MAKEFILE_TEMPLATE = """\
# Generated by dmake init
.PHONY: all clean install
prefix?=/usr/local
quiet?=@
sudo?=
all:; $(quiet) dmake
clean:; $(quiet) dmake clean
install: all; $(quiet) $(sudo) dmake --prefix $(prefix) install
"""


@dataclass
class InitOptions:
    """Choices made on the dmake init command line."""

    output_name: str = ""
    project_type: OutputType = OutputType.UNKNOWN
    language: Language = Language.UNKNOWN
    language_std: str = ""
    build_mode: str = ""


def _cannot_already_have(what: str, value: object, arg: str) -> None:
    if value:
        raise ConflictError(f"{arg}: {what} already specified as {value}")


def parse_init_args(
    args: Sequence[str],
    detected: Language = Language.UNKNOWN,
    output_name: str = "",
) -> InitOptions:
    """Parse dmake init keywords.

    Each category (name, project type, language, standard, build mode)
    may be given once.

    Args:
        args: The keywords following "init".
        detected: Language of the sources in the directory, if any.
        output_name: Output name given with -o, if any.

    Raises:
        ConflictError: If a category is repeated or choices contradict.
    """
    opts = InitOptions(output_name=output_name)
    for arg in args:
        if arg in Language.keywords():
            _cannot_already_have("language", opts.language.value, arg)
            if detected is not Language.UNKNOWN and detected.value != arg:
                raise ConflictError(
                    f"{arg} is not the language used by source files, {detected}"
                )
            opts.language = Language.parse(arg)
        elif arg in OutputType.keywords():
            if opts.project_type is not OutputType.UNKNOWN:
                _cannot_already_have("project type", opts.project_type, arg)
            opts.project_type = OutputType(arg)
        elif arg in BUILD_MODES:
            _cannot_already_have("build mode", opts.build_mode, arg)
            opts.build_mode = arg
        elif arg in C_STANDARDS or arg in CXX_STANDARDS:
            _cannot_already_have("language standard", opts.language_std, arg)
            opts.language_std = arg
        else:
            _cannot_already_have("output filename", opts.output_name, arg)
            opts.output_name = arg

    if opts.language is Language.UNKNOWN:
        opts.language = detected

    if opts.language_std in C_STANDARDS:
        if opts.language in (Language.CXX, Language.OBJCXX):
            raise ConflictError("C standard specified but this is a C++ project")
        if opts.language is Language.UNKNOWN:
            opts.language = Language.C
    elif opts.language_std in CXX_STANDARDS:
        if opts.language in (Language.C, Language.OBJC):
            raise ConflictError("C++ standard specified but this is a C project")
        if opts.language is Language.UNKNOWN:
            opts.language = Language.CXX

    if not opts.build_mode:
        opts.build_mode = DEFAULT_BUILD_MODE
    if not opts.language_std:
        if opts.language is Language.C:
            opts.language_std = DEFAULT_C_STANDARD
        elif opts.language is Language.CXX:
            opts.language_std = DEFAULT_CXX_STANDARD
    return opts


def create_file(path: Path, content: str) -> Path:
    """Write a new file, removing it again if writing fails."""
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(content)
    except FileExistsError as e:
        raise DmakeFilesystemError("create", path, e) from e
    except OSError as e:
        path.unlink(missing_ok=True)
        raise DmakeFilesystemError("create", path, e) from e
    logger.info("Created %s", path)
    return path


def compiler_options(opts: InitOptions) -> str:
    """Return the contents of the compiler options file."""
    lines = []
    if opts.language_std:
        lines.append(f"-std={opts.language_std}")
    lines.append(DEFAULT_WARNING_OPTS)
    lines.append("-g")
    if opts.build_mode == "release":
        lines.extend(["-DNDEBUG", DEFAULT_RELEASE_OPTIM])
    else:
        lines.extend(["-DDEBUG", DEFAULT_DEBUG_OPTIM])
    return READ_BY_DCC + "\n".join(lines) + "\n"


def options_filename(language: Language) -> str:
    if language in (Language.CXX, Language.OBJCXX):
        return "CXXFLAGS"
    return "CFLAGS"


def check_existing(directory: Path) -> None:
    """Refuse to initialise a directory that already has dmake files.

    Raises:
        ScaffoldError: If .dcc, .dmake or Makefile exists.
    """
    for name, what in (
        (DCC_OPTIONS_DIR, "a .dcc directory"),
        (DMAKEFILE_NAME, "a .dmake file"),
        (MAKEFILE_NAME, "a Makefile"),
    ):
        if (directory / name).exists():
            raise ScaffoldError(f"{what} already exists, not continuing")


def init_project(
    args: Sequence[str],
    descriptor: BuildDescriptor,
    config: Config,
    detector: MainFunctionDetector | None = None,
) -> list[Path]:
    """Initialise the descriptor's directory for dmake and dcc.

    Args:
        args: Keywords following "init" on the command line.
        descriptor: The directory to initialise.
        config: Run settings (forced language, dll/plugin inference).
        detector: Decides which sources define main().

    Returns:
        The files created, in creation order.

    Raises:
        ScaffoldError: If the directory already holds dmake files.
        ConflictError: If the keywords conflict.
    """
    directory = descriptor.directory
    check_existing(directory)

    files, detected = source_files(directory, config.language)
    name = "" if descriptor.output_name_is_default else descriptor.output_name
    opts = parse_init_args(args, detected, name)

    if not opts.output_name:
        opts.output_name = descriptor.default_output_name
    if opts.project_type is OutputType.UNKNOWN:
        opts.project_type = determine_output_type(
            files,
            directory,
            dll=config.dll,
            plugin=config.plugin,
            detector=detector,
        )

    dcc_dir = directory / DCC_OPTIONS_DIR
    try:
        dcc_dir.mkdir(exist_ok=True)
    except OSError as e:
        raise DmakeFilesystemError("create directory", dcc_dir, e) from e

    created = [
        create_file(dcc_dir / options_filename(opts.language), compiler_options(opts))
    ]
    if opts.project_type in (OutputType.EXE, OutputType.DLL, OutputType.PLUGIN):
        created.append(create_file(dcc_dir / "LDFLAGS", READ_BY_DCC))
    if opts.project_type is OutputType.EXE:
        created.append(create_file(dcc_dir / "LIBS", READ_BY_DCC))

    if opts.output_name != descriptor.default_output_name:
        created.append(
            create_file(
                directory / DMAKEFILE_NAME,
                f"{opts.project_type.var_name} = {opts.output_name}\n",
            )
        )

    created.append(create_file(directory / MAKEFILE_NAME, MAKEFILE_TEMPLATE))
    return created
