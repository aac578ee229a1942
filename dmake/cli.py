# SPDX-License-Identifier: MIT
"""Command-line interface for dmake."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dmake.configure.config import Config
from dmake.core.descriptor import Action, BuildDescriptor, Language, OutputType
from dmake.core.errors import DmakeError, DmakeFilesystemError, UsageError
from dmake.core.orchestrator import Dmake
from dmake.core.walker import walk
from dmake.scaffold import init_project

# Set up logging
logger = logging.getLogger("dmake")

DESCRIPTION = """\
The first form builds, installs or cleans the module in the current
directory. The module type (exe, lib, dll or plugin) is inferred from the
sources when not given: a module defining main() is an executable,
anything else a library. Building and cleaning run the dcc command.

The install action copies the module to <prefix>/bin (executables) or
<prefix>/lib (libraries), the prefix being set by --prefix, $PREFIX or a
.dmake file.

The second form runs dmake in each of the named directories.

The third form initializes a project's directory, creating dcc option
files and a simple Makefile with conventional targets that run dmake.
"""

USAGE = """\
dmake [options] [exe|lib|dll|plugin] [build|clean|install]
       dmake [options] [build|clean|install] path...
       dmake [options] init [name] [exe|lib|dll|plugin] [c|c++|objc|objc++]
                            [c99|c11|c17|c++11|c++14|c++17|c++20] [debug|release]"""


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse NAME=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid NAME=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


@dataclass
class Command:
    """What the positional arguments ask for."""

    action: Action = Action.DEFAULT
    output_type: OutputType = OutputType.UNKNOWN
    directories: list[str] = field(default_factory=list)
    init_args: list[str] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)


def parse_command(args: list[str]) -> Command:
    """Interpret the positional arguments.

    "init" must come first and takes everything after it. Otherwise at
    most one action keyword and one module type may be given, and any
    other argument names a directory.

    Raises:
        UsageError: If the arguments cannot be combined.
    """
    variables, remaining = parse_variables(args)
    command = Command(variables=variables)

    if remaining and remaining[0] == Action.INITING.value:
        command.action = Action.INITING
        command.init_args = remaining[1:]
        return command

    for arg in remaining:
        if arg in Action.keywords():
            if command.action is not Action.DEFAULT:
                raise UsageError(f"{arg}: action already specified as {command.action}")
            if arg == Action.INITING.value:
                raise UsageError("init must be the first argument")
            command.action = Action(arg)
        elif arg in OutputType.keywords():
            if command.output_type is not OutputType.UNKNOWN:
                raise UsageError(
                    f"{arg}: module type already specified as {command.output_type}"
                )
            command.output_type = OutputType(arg)
        else:
            command.directories.append(arg)

    if command.directories and command.output_type is not OutputType.UNKNOWN:
        raise UsageError("a module type cannot be given with directories")
    return command


def make_config(args: argparse.Namespace, variables: dict[str, str]) -> Config:
    """Create the run's Config from the environment and command line."""
    config = Config.from_environ()
    if args.prefix is not None:
        config.install_prefix = args.prefix
    config.keep_going = args.keep_going
    config.dll = args.dll
    config.plugin = args.plugin
    config.dcc_debug = args.dcc_debug
    config.quiet = args.quiet
    if args.lang:
        config.language = Language.parse(args.lang)
    config.add_variables(variables)
    return config


def run(args: argparse.Namespace) -> int:
    """Run dmake as described by parsed arguments.

    Raises:
        DmakeError: If anything fails.
    """
    base = Path.cwd()
    if args.chdir:
        base = base / args.chdir
        if not base.is_dir():
            raise DmakeFilesystemError(
                "change directory", args.chdir, "no such directory"
            )

    command = parse_command(args.args)
    config = make_config(args, command.variables)
    logger.debug("ENV: %s", config.env)

    if command.action is Action.INITING:
        descriptor = BuildDescriptor.for_directory(base, output_name=args.output or "")
        created = init_project(command.init_args, descriptor, config)
        for path in created:
            print(f"Created {path.relative_to(base)}")
        return 0

    if command.directories:
        if args.output:
            raise UsageError("-o cannot be used with directories")

        def run_directory(path: Path, action: Action) -> None:
            descriptor = BuildDescriptor.for_directory(
                path, install_prefix=config.install_prefix
            )
            Dmake(descriptor, config).run(action)

        walk(
            command.directories,
            command.action,
            base,
            run_directory,
            keep_going=config.keep_going,
        )
        return 0

    descriptor = BuildDescriptor.for_directory(
        base,
        output_name=args.output or "",
        install_prefix=config.install_prefix,
    )
    dmake = Dmake(descriptor, config)
    if command.output_type is not OutputType.UNKNOWN:
        dmake.set_output_type(command.output_type)
    dmake.run(command.action)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dmake",
        usage=USAGE,
        description="A build tool on top of dcc.",
        epilog=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    from dmake import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-C", dest="chdir", metavar="DIR", help="Change to DIR before doing anything"
    )
    parser.add_argument("-o", dest="output", metavar="NAME", help="Output filename")
    parser.add_argument("-v", "--verbose", action="store_true", help="Issue messages")
    parser.add_argument(
        "-k",
        "--keep-going",
        action="store_true",
        help="Keep going, don't stop on the first error",
    )
    parser.add_argument(
        "--dll", action="store_true", help="Create dynamic libraries by default"
    )
    parser.add_argument(
        "--plugin", action="store_true", help="Create plugins by default"
    )
    parser.add_argument(
        "--prefix",
        metavar="PATH",
        help="Installation path prefix (default: $PREFIX)",
    )
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--dcc-debug", action="store_true", help="Enable dcc debug output"
    )
    parser.add_argument("--quiet", action="store_true", help="Ask dcc to avoid output")
    parser.add_argument(
        "--lang",
        choices=sorted(Language.keywords()),
        help="Source language, overriding detection",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Module type and action, directories, or init options (NAME=value "
        "arguments are passed to dcc's environment)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the dmake CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.debug)

    try:
        return run(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.error("%s", e)
        return 2
    except DmakeError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
