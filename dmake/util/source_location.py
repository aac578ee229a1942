# SPDX-License-Identifier: MIT
"""Source locations for error reporting.

A SourceLocation names a line in a file read by dmake (a .dmake file
or a source-list file) so that errors can point the user at it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceLocation:
    """A 1-based line in a named file.

    Attributes:
        path: The file, as given to the reader.
        line: Line number, starting at 1. Zero means "whole file".
    """

    path: str
    line: int = 0

    @classmethod
    def of(cls, path: Path | str, line: int = 0) -> SourceLocation:
        return cls(str(path), line)

    def __str__(self) -> str:
        if self.line > 0:
            return f"{self.path}:{self.line}"
        return self.path
