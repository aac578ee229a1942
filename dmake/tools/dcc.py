# SPDX-License-Identifier: MIT
"""The dcc compiler driver.

dmake never compiles anything itself. It works out what to build and
hands dcc a command line such as::

    dcc --exe fred --objdir .objs main.cpp util.cpp

dcc does the compiling, linking and dependency tracking.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from dmake.core.errors import DelegateError

if TYPE_CHECKING:
    from dmake.configure.config import Config
    from dmake.core.descriptor import BuildDescriptor

logger = logging.getLogger(__name__)


def run_command(
    cmd: Sequence[str],
    cwd: Path | str,
    env: Mapping[str, str],
) -> None:
    """Run a delegate program and wait for it.

    Output goes straight to dmake's stdout/stderr.

    Raises:
        DelegateError: If the program cannot be started or exits non-zero.
    """
    logger.debug("ENV: %s", dict(env))
    logger.debug("RUN: %s (in %s)", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            env=dict(env),
            stdin=subprocess.DEVNULL,
        )
    except OSError as e:
        raise DelegateError(cmd, reason=e.strerror or str(e)) from e
    if result.returncode != 0:
        raise DelegateError(cmd, result.returncode)


class DccDriver:
    """Builds modules by running dcc.

    Attributes:
        command: Name or path of the dcc program.
    """

    def __init__(self, command: str = "dcc") -> None:
        self.command = command

    def arguments(self, descriptor: BuildDescriptor, config: Config) -> list[str]:
        """Return the dcc arguments that build a descriptor's module."""
        args: list[str] = []
        if config.dcc_debug:
            args.append("--debug")
        if config.quiet:
            args.append("--quiet")
        args.extend([descriptor.output_type.dcc_argument, descriptor.output_name])
        args.extend(["--objdir", config.objsdir])
        args.extend(descriptor.source_files)
        return args

    def build(self, descriptor: BuildDescriptor, config: Config) -> None:
        """Run dcc in the descriptor's directory.

        Raises:
            DelegateError: If dcc fails.
        """
        cmd = [self.command, *self.arguments(descriptor, config)]
        run_command(cmd, descriptor.directory, config.env)
