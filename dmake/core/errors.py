# SPDX-License-Identifier: MIT
"""Custom exceptions for dmake.

All dmake exceptions inherit from DmakeError, which includes
optional source location information for better error messages.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmake.util.source_location import SourceLocation


class DmakeError(Exception):
    """Base class for all dmake exceptions.

    Attributes:
        message: The error message.
        location: Optional source location where the error occurred.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location} - {self.message}"
        return self.message


class ParseError(DmakeError):
    """Malformed line in a .dmake or source-list file."""


class ConflictError(DmakeError):
    """Something was declared twice.

    Raised when a module kind is defined more than once with different
    values (command line vs. .dmake file), or when an init keyword
    category is supplied twice.
    """


class ResolutionError(DmakeError):
    """Sources or sub-directories could not be resolved."""


class UsageError(DmakeError):
    """The command line could not be understood."""


class ScaffoldError(DmakeError):
    """dmake init refused to run or could not finish."""


class DelegateError(DmakeError):
    """An external program (dcc, install) failed.

    Attributes:
        command: The command line that was run.
        returncode: Exit status, or None if the program could not be started.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        program = self.command[0] if self.command else "?"
        if reason is not None:
            message = f"{program}: {reason}"
        else:
            message = f"{program} exited with status {returncode}"
        super().__init__(message)


class DmakeFilesystemError(DmakeError):
    """A file system operation failed.

    The message carries the failing operation and path, e.g.
    ``No such file or directory (enter directory 'lib')``.

    Attributes:
        operation: What was being attempted.
        path: The path involved.
    """

    def __init__(
        self,
        operation: str,
        path: Path | str,
        cause: OSError | str | None = None,
    ) -> None:
        self.operation = operation
        self.path = str(path)
        if isinstance(cause, OSError):
            reason = cause.strerror or str(cause)
        else:
            reason = cause or "failed"
        super().__init__(f"{reason} ({operation} {self.path!r})")
