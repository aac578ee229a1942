# SPDX-License-Identifier: MIT
"""Running dmake across a list of directories.

Directories are processed one after the other, each with its own fresh
build state. Nothing changes the process's working directory: each run
is handed the directory it works in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from dmake.core.descriptor import Action
from dmake.core.errors import DmakeError, DmakeFilesystemError

logger = logging.getLogger(__name__)

# Runs dmake for one directory. Raises DmakeError on failure.
DirectoryRunner = Callable[[Path, Action], None]


def walk(
    directories: Sequence[str | Path],
    action: Action,
    base: Path,
    run: DirectoryRunner,
    *,
    keep_going: bool = False,
) -> None:
    """Run an action in each directory, in order.

    Args:
        directories: Directories, relative to base (or absolute).
        action: What to do in each directory.
        base: Directory the names are relative to.
        run: Called with each directory's path and the action.
        keep_going: Continue after a failing directory instead of
            stopping; the first error is raised once all are done.

    Raises:
        DmakeError: The first error encountered.
    """
    first_error: DmakeError | None = None
    for name in directories:
        path = base / name
        try:
            if not path.is_dir():
                reason = "not a directory" if path.exists() else "no such directory"
                raise DmakeFilesystemError("enter directory", name, reason)
            logger.info("entering %r", str(name))
            try:
                run(path, action)
            finally:
                logger.info(" leaving %r", str(name))
        except DmakeError as e:
            if not keep_going:
                raise
            logger.error("%s", e)
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error
