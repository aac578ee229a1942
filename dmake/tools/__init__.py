# SPDX-License-Identifier: MIT
"""External programs dmake delegates to."""

from dmake.tools.dcc import DccDriver, run_command

__all__ = ["DccDriver", "run_command"]
