# SPDX-License-Identifier: MIT
"""Process-wide settings for dmake.

Config collects everything that stays the same across the directories
of one dmake invocation: the object and dependency directory names
(overridable from the environment), command line flags and the
environment passed on to dcc and install.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dmake.core.descriptor import Language

DEFAULT_OBJS_DIR = ".objs"
DEFAULT_DEPS_DIR = ".dcc.d"

# Environment variables passed through to dcc and install.
DELEGATE_ENV_VARS = (
    # Standard/common names
    "HOME",
    "LOGNAME",
    "PATH",
    "SHELL",
    "TERM",
    "TERMCAP",
    "USER",
    # dcc recognized
    "CC",
    "CXX",
    "NJOBS",
    "CCFILE",
    "CXXFILE",
    "CFLAGSFILE",
    "CXXFLAGSFILE",
    "LDFLAGSFILE",
    "LIBSFILE",
)

# Windows needs these to start any program at all.
WINDOWS_ENV_VARS = ("SYSTEMROOT", "COMSPEC", "PATHEXT", "TEMP", "TMP")


def get_env_var(
    name: str, default: str = "", environ: Mapping[str, str] | None = None
) -> str:
    """Get an environment variable, treating an empty value as unset."""
    if environ is None:
        environ = os.environ
    return environ.get(name) or default


def prepare_env(
    environ: Mapping[str, str] | None = None, windows: bool | None = None
) -> dict[str, str]:
    """Build the environment for delegate programs.

    Only the allow-listed variables are passed on, and only when set.
    On Windows the variables needed to start programs are added.
    """
    if environ is None:
        environ = os.environ
    if windows is None:
        windows = os.name == "nt"
    names = DELEGATE_ENV_VARS + (WINDOWS_ENV_VARS if windows else ())
    return {name: environ[name] for name in names if environ.get(name)}


@dataclass
class Config:
    """Settings shared by every directory of a dmake run.

    Attributes:
        objsdir: Name of the object file sub-directory.
        depsdir: Name of the dependency file sub-directory.
        install_prefix: Installation prefix from the command line or
            environment, "" if none.
        keep_going: Continue with other directories after an error.
        dll: Infer dynamic libraries rather than static ones.
        plugin: Infer plugins rather than static ones.
        dcc_debug: Ask dcc for debug output.
        quiet: Ask dcc to be quiet.
        language: Language forced on the command line.
        env: Environment for dcc and install.
    """

    objsdir: str = DEFAULT_OBJS_DIR
    depsdir: str = DEFAULT_DEPS_DIR
    install_prefix: str = ""
    keep_going: bool = False
    dll: bool = False
    plugin: bool = False
    dcc_debug: bool = False
    quiet: bool = False
    language: Language = Language.UNKNOWN
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Create a Config from OBJDIR, DCCDEPS and PREFIX."""
        if environ is None:
            environ = os.environ
        return cls(
            objsdir=get_env_var("OBJDIR", DEFAULT_OBJS_DIR, environ),
            depsdir=get_env_var("DCCDEPS", DEFAULT_DEPS_DIR, environ),
            install_prefix=get_env_var("PREFIX", "", environ),
            env=prepare_env(environ),
        )

    def add_variables(self, variables: Mapping[str, str]) -> None:
        """Add NAME=value pairs from the command line to the delegate env."""
        self.env.update(variables)
