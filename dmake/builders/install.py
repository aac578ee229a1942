# SPDX-License-Identifier: MIT
"""Installing built modules.

Executables go to ``<prefix>/bin`` with mode 0555, libraries of every
kind to ``<prefix>/lib`` with mode 0444. The copying is done by an
external program: /usr/bin/install on POSIX systems, dmake's own copy
helper (run as ``python -m dmake.util.commands``) on Windows.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

from dmake.configure.platform import get_platform
from dmake.core.descriptor import OutputType
from dmake.tools.dcc import run_command

if TYPE_CHECKING:
    from dmake.configure.config import Config
    from dmake.core.descriptor import BuildDescriptor

logger = logging.getLogger(__name__)

EXE_MODE = 0o555
LIB_MODE = 0o444


def install_destination(output_type: OutputType, prefix: str) -> tuple[str, int]:
    """Return the (directory, file mode) a module installs with."""
    prefix = prefix or "."
    if output_type is OutputType.EXE:
        return os.path.join(prefix, "bin"), EXE_MODE
    return os.path.join(prefix, "lib"), LIB_MODE


class Installer:
    """Base class for installers.

    Subclasses provide the command line that copies one file.
    """

    def command(self, filename: str, destination: str, mode: int) -> list[str]:
        raise NotImplementedError

    def install(self, descriptor: BuildDescriptor, config: Config) -> None:
        """Install the descriptor's module under its install prefix.

        Raises:
            DelegateError: If the install program fails.
        """
        dest_dir, mode = install_destination(
            descriptor.output_type, descriptor.install_prefix
        )
        destination = os.path.join(dest_dir, os.path.basename(descriptor.output_name))
        logger.info("installing %s as %s", descriptor.output_name, destination)
        cmd = self.command(descriptor.output_name, destination, mode)
        run_command(cmd, descriptor.directory, config.env)


class UsrBinInstaller(Installer):
    """Installs with the system's install(1) program."""

    def __init__(self, program: str = "/usr/bin/install") -> None:
        self.program = program

    def command(self, filename: str, destination: str, mode: int) -> list[str]:
        return [self.program, "-c", "-m", f"{mode:o}", filename, destination]


class CopyInstaller(Installer):
    """Installs by running dmake's copy helper."""

    def command(self, filename: str, destination: str, mode: int) -> list[str]:
        return [
            sys.executable,
            "-m",
            "dmake.util.commands",
            "install",
            f"{mode:o}",
            filename,
            destination,
        ]


def default_installer() -> Installer:
    """Return the installer for the host platform."""
    if get_platform().is_windows:
        return CopyInstaller()
    return UsrBinInstaller()

