# SPDX-License-Identifier: MIT
"""Reader for .dmake files and source-list files.

A .dmake file is line oriented::

    # comment
    SRCS = *.c
    CFLAGS += -DVERSION=$VERSION
    NAME -= -debug
    VERBOSE

Each line is ``<key> <op> <value>`` with op one of ``=``, ``+=`` or
``-=``, or a bare key which sets the key to "true". Keys are a single
token. Values may refer to variables defined on earlier lines, and to
the predefined OS and ARCH variables.

A source-list file simply holds glob patterns, any number per line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from dmake.configure.platform import get_platform
from dmake.core.errors import DmakeFilesystemError, ParseError
from dmake.core.vars import Op, Variable, VariableStore
from dmake.util.source_location import SourceLocation

logger = logging.getLogger(__name__)

DMAKEFILE_NAME = ".dmake"

_OPERATORS = {"+": Op.APPEND, "-": Op.SUBTRACT}


def new_store() -> VariableStore:
    """Return a VariableStore holding the predefined variables."""
    platform = get_platform()
    store = VariableStore()
    store.set_value("OS", platform.os)
    store.set_value("ARCH", platform.arch)
    return store


def parse_line(line: str) -> tuple[str, Variable] | None:
    """Parse one line, returning (key, variable) or None for blank/comment.

    Raises:
        ValueError: With the reason if the line is malformed.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    index = line.find("=")
    if index == -1:
        if len(line.split()) != 1:
            raise ValueError("malformed line, no '='")
        return line, Variable.assign("true")

    op = Op.ASSIGN
    key_end = index
    if index > 0 and line[index - 1] in _OPERATORS:
        op = _OPERATORS[line[index - 1]]
        key_end = index - 1

    key = line[:key_end].strip()
    if not key:
        raise ValueError(f"malformed line, no variable name before '{op}'")
    if len(key.split()) != 1:
        raise ValueError("malformed line, spaces in key")

    return key, Variable(op, line[index + 1 :].strip())


def parse_lines(
    lines: Iterable[str],
    path: Path | str,
    store: VariableStore | None = None,
) -> VariableStore:
    """Apply the lines of a .dmake file to a store.

    Args:
        lines: The file's lines.
        path: File name used in error messages.
        store: Store to update; a new one with OS and ARCH if None.

    Returns:
        The updated store.

    Raises:
        ParseError: On the first malformed line.
    """
    if store is None:
        store = new_store()
    for lineno, line in enumerate(lines, start=1):
        try:
            parsed = parse_line(line)
        except ValueError as e:
            raise ParseError(str(e), SourceLocation.of(path, lineno)) from None
        if parsed is None:
            continue
        key, var = parsed
        store.apply(key, Variable(var.op, store.interpolate(var.value)))
    return store


def read_dmakefile(
    path: Path | str, store: VariableStore | None = None
) -> VariableStore:
    """Read a .dmake file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the file is malformed.
    """
    # Undecodable bytes are kept as-is, so they reach dcc unchanged.
    with open(path, encoding="utf-8", errors="surrogateescape") as f:
        store = parse_lines(f, path, store)
    logger.debug("%s: %r", path, store)
    return store


def read_source_list(path: Path | str) -> list[str]:
    """Read a source-list file and return its glob patterns in order.

    Raises:
        DmakeFilesystemError: If the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            lines = f.readlines()
    except OSError as e:
        raise DmakeFilesystemError("read", path, e) from e

    patterns: list[str] = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.extend(line.split())
    return patterns
