# SPDX-License-Identifier: MIT
"""Cross-platform command helpers for dmake.

These helpers stand in for system programs that are not available
everywhere, /usr/bin/install in particular. They are run as a separate
process, like any other delegate:

Usage:
    python -m dmake.util.commands install <mode> <src> <dest>
"""

from __future__ import annotations

import os
import shutil
import stat
import sys
from pathlib import Path


def install(src: str, dest: str, mode: int) -> None:
    """Copy a file and set its permissions.

    An existing destination is replaced, even if it is read-only. A
    partially written destination is removed if the copy fails.
    """
    dest_path = Path(dest)
    if dest_path.exists():
        os.chmod(dest_path, stat.S_IREAD | stat.S_IWRITE)
        dest_path.unlink()
    try:
        shutil.copyfile(src, dest_path)
        os.chmod(dest_path, mode)
    except OSError:
        dest_path.unlink(missing_ok=True)
        raise


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        print(
            "Usage: python -m dmake.util.commands <command> [args...]",
            file=sys.stderr,
        )
        print("Commands: install", file=sys.stderr)
        return 1

    cmd = argv[0]

    if cmd == "install":
        if len(argv) != 4:
            print(
                "Usage: python -m dmake.util.commands install <mode> <src> <dest>",
                file=sys.stderr,
            )
            return 1
        try:
            mode = int(argv[1], 8)
        except ValueError:
            print(f"Invalid mode: {argv[1]}", file=sys.stderr)
            return 1
        try:
            install(argv[2], argv[3], mode)
        except OSError as e:
            print(f"install: {e}", file=sys.stderr)
            return 1
        return 0

    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
