# SPDX-License-Identifier: MIT
"""Building, cleaning and installing one directory.

Dmake runs one action for one directory:

1. read the directory's .dmake file, if there is one;
2. run the action in any sub-directories it declares;
3. find the source files, unless .dmake listed them;
4. infer the module kind, unless it is already known;
5. clean, or build with dcc and optionally install.

Sub-directories get their own Dmake with a fresh BuildDescriptor, so
nothing leaks from one directory into another.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from dmake.builders.install import Installer, default_installer
from dmake.configure.config import Config
from dmake.configure.platform import dependencies_file_for, get_platform
from dmake.core.descriptor import Action, BuildDescriptor, OutputType
from dmake.core.dmakefile import DMAKEFILE_NAME, read_dmakefile, read_source_list
from dmake.core.errors import (
    ConflictError,
    DmakeFilesystemError,
    ResolutionError,
    UsageError,
)
from dmake.core.sources import (
    MainFunctionDetector,
    determine_output_type,
    expand_globs,
    source_files,
)
from dmake.core.vars import VariableStore
from dmake.core.walker import walk
from dmake.tools.dcc import DccDriver
from dmake.util.source_location import SourceLocation

logger = logging.getLogger(__name__)

# .dmake variables declaring the module kind, checked in this order.
OUTPUT_TYPE_VARS = (
    OutputType.DLL,
    OutputType.PLUGIN,
    OutputType.EXE,
    OutputType.LIB,
)


class Dmake:
    """Runs dmake actions for a single directory.

    Example:
        descriptor = BuildDescriptor.for_directory(Path("widget/src"))
        Dmake(descriptor, Config.from_environ()).run(Action.BUILDING)

    Attributes:
        descriptor: Build state of the directory.
        config: Settings shared by the whole run.
        driver: Runs dcc.
        installer: Installs built modules.
        detector: Decides which sources define main().
    """

    def __init__(
        self,
        descriptor: BuildDescriptor,
        config: Config,
        *,
        driver: DccDriver | None = None,
        installer: Installer | None = None,
        detector: MainFunctionDetector | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.config = config
        self.driver = driver or DccDriver()
        self.installer = installer or default_installer()
        self.detector = detector or MainFunctionDetector()

    def child(self, directory: Path) -> Dmake:
        """Return a Dmake for a sub-directory, sharing delegates."""
        descriptor = BuildDescriptor.for_directory(
            directory, install_prefix=self.descriptor.install_prefix
        )
        return Dmake(
            descriptor,
            self.config,
            driver=self.driver,
            installer=self.installer,
            detector=self.detector,
        )

    def run(self, action: Action) -> None:
        """Run an action in the descriptor's directory.

        Raises:
            DmakeError: If anything fails; nothing is rolled back.
        """
        if action is Action.DEFAULT:
            action = Action.BUILDING
        if action is Action.INITING:
            raise UsageError("init cannot be combined with a build")
        d = self.descriptor
        logger.debug("action=%s directory=%s", action, d.directory)

        self.read_dmakefile()

        if d.has_subdirectories:
            self.directories(action)

        if not d.has_sources:
            d.source_files, d.language = source_files(d.directory, self.config.language)

        if not d.has_sources:
            if d.has_subdirectories:
                return
            raise ResolutionError(
                "no C, Objective-C++, Objective-C or C++ source files found"
                f" in {d.directory}"
            )

        logger.debug("sourceFiles=%s", d.source_files)

        if d.output_type is OutputType.UNKNOWN:
            d.output_type = self.determine_output_type()
            if d.output_name_is_default:
                self.set_output_name_from_type()

        if action is Action.CLEANING:
            self.clean_action()
            return

        self.build_action()

        if action is Action.INSTALLING:
            self.install_action()

    def set_output_type(self, output_type: OutputType, what: str = "") -> None:
        """Declare the module kind, naming the output after it if defaulted.

        Raises:
            ConflictError: If a different kind is already declared.
        """
        self.descriptor.set_output_type(output_type, what)
        if self.descriptor.output_name_is_default:
            self.set_output_name_from_type()

    def set_output_name_from_type(self) -> None:
        d = self.descriptor
        d.output_name = get_platform().name_for(d.output_type, d.default_output_name)

    def determine_output_type(self) -> OutputType:
        d = self.descriptor
        return determine_output_type(
            d.source_files,
            d.directory,
            dll=self.config.dll,
            plugin=self.config.plugin,
            detector=self.detector,
        )

    def read_dmakefile(self) -> None:
        """Read the directory's .dmake file, if any, into the descriptor."""
        path = self.descriptor.path(DMAKEFILE_NAME)
        if not path.is_file():
            return
        try:
            store = read_dmakefile(path)
        except OSError as e:
            raise DmakeFilesystemError("read", path, e) from e
        self.init_from_vars(store, path)

    def init_from_vars(self, store: VariableStore, path: Path | str = "") -> None:
        """Set up the descriptor from .dmake variables.

        Recognized variables:
            SRCS      glob patterns matching source files
            SRCSFILE  file holding more glob patterns
            DLL       output a dynamic library with the given name
            PLUGIN    output a plugin with the given name
            EXE       output an executable with the given name
            LIB       output a static library with the given name
            DIRS      glob patterns matching sub-directories to build
            PREFIX    installation prefix

        Raises:
            ResolutionError: If SRCS or DIRS match nothing.
            ConflictError: If more than one module kind is declared.
        """
        d = self.descriptor
        location = SourceLocation.of(path) if path else None

        patterns: list[str] = []
        srcs = store.get_value("SRCS")
        if srcs is not None:
            patterns.extend(srcs.split())
        srcsfile = store.get_value("SRCSFILE")
        if srcsfile is not None:
            patterns.extend(read_source_list(d.path(srcsfile)))
        if srcs is not None or srcsfile is not None:
            d.source_files = expand_globs(patterns, d.directory)
            if not d.source_files:
                what = f"SRCS={srcs}" if srcs is not None else f"SRCSFILE={srcsfile}"
                raise ResolutionError(f"{what} matches no source files", location)
            d.language = self.config.language

        prefix = store.get_value("PREFIX")
        if prefix is not None and not d.install_prefix:
            d.install_prefix = prefix

        directories = store.get_value("DIRS")
        if directories is not None:
            d.subdirectories = [
                name
                for name in expand_globs(directories, d.directory)
                if d.path(name).is_dir()
            ]
            if not d.subdirectories:
                raise ResolutionError(
                    f"DIRS={directories} matches no directories", location
                )

        platform = get_platform()
        for output_type in OUTPUT_TYPE_VARS:
            name = store.get_value(output_type.var_name)
            if name is None:
                continue
            try:
                d.set_output_type(output_type, output_type.var_name)
            except ConflictError as e:
                raise ConflictError(e.message, location) from None
            if name:
                d.set_output_name(platform.name_for(output_type, name))
            elif d.output_name_is_default:
                self.set_output_name_from_type()

    def directories(self, action: Action) -> None:
        """Run the action in each declared sub-directory."""
        logger.debug("directories %s", self.descriptor.subdirectories)
        walk(
            self.descriptor.subdirectories,
            action,
            self.descriptor.directory,
            lambda path, action: self.child(path).run(action),
            keep_going=self.config.keep_going,
        )

    def build_action(self) -> None:
        """Build the module with dcc."""
        d = self.descriptor
        for directory in (os.path.dirname(d.output_name), self.config.objsdir):
            if directory:
                _mkdir(d.path(directory))
        self.driver.build(d, self.config)

    def clean_action(self) -> None:
        """Remove the module, its object files and dependency files."""
        d = self.descriptor
        platform = get_platform()
        _remove(d.path(d.output_name))
        for source in d.source_files:
            ofile = platform.object_file_for(source, self.config.objsdir)
            depfile = dependencies_file_for(
                ofile, self.config.depsdir, self.config.objsdir
            )
            self._clean(ofile, self.config.objsdir)
            self._clean(depfile, self.config.depsdir)

    def _clean(self, path: str, deletable: str) -> None:
        """Remove a file and, if named deletable, its directory."""
        _remove(self.descriptor.path(path))
        dirname = os.path.dirname(path)
        if dirname and os.path.basename(dirname) == deletable:
            directory = self.descriptor.path(dirname)
            logger.debug("removing directory %s", directory)
            try:
                shutil.rmtree(directory)
            except FileNotFoundError:
                pass
            except OSError as e:
                raise DmakeFilesystemError("remove directory", directory, e) from e

    def install_action(self) -> None:
        """Install the built module under the install prefix."""
        self.installer.install(self.descriptor, self.config)


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DmakeFilesystemError("create directory", path, e) from e


def _remove(path: Path) -> None:
    logger.debug("removing %s", path)
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise DmakeFilesystemError("remove", path, e) from e
