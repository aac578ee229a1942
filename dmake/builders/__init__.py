# SPDX-License-Identifier: MIT
"""Installing built modules."""

from dmake.builders.install import (
    CopyInstaller,
    Installer,
    UsrBinInstaller,
    default_installer,
)

__all__ = ["CopyInstaller", "Installer", "UsrBinInstaller", "default_installer"]
