# SPDX-License-Identifier: MIT
"""
dmake: configure and run builds with dcc.

dmake works out what to build in a directory (its source files, whether
they make an executable or a library, and what the output is called),
then hands the build to the dcc compiler driver. Directories can refine
the defaults with a small .dmake file of variable assignments.
"""

from __future__ import annotations

__version__ = "0.1.0"

from dmake.configure.config import Config  # noqa: E402
from dmake.core.descriptor import (  # noqa: E402
    Action,
    BuildDescriptor,
    Language,
    OutputType,
)
from dmake.core.errors import DmakeError  # noqa: E402
from dmake.core.orchestrator import Dmake  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Core classes
    "Action",
    "BuildDescriptor",
    "Config",
    "Dmake",
    "DmakeError",
    "Language",
    "OutputType",
]
