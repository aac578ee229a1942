# SPDX-License-Identifier: MIT
"""Source file discovery and module kind inference.

Sources are found by globbing, either with patterns from a .dmake file
or with a fixed list of patterns per language family. File names that
are qualified for another platform (``thing_windows.c`` on linux) are
ignored.

Whether a module is an executable is decided by looking for a main()
function. This is a textual heuristic, not a parser: it can be fooled
by macros or unusual formatting, in both directions.
"""

from __future__ import annotations

import glob as _glob
import logging
import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path

from dmake.configure.platform import get_platform, other_platforms_pattern
from dmake.core.descriptor import Language, OutputType
from dmake.core.errors import DmakeFilesystemError

logger = logging.getLogger(__name__)

# Glob patterns per language, tried in this order. The first family
# with any match wins.
LANGUAGE_PATTERNS: tuple[tuple[Language, tuple[str, ...]], ...] = (
    (Language.CXX, ("*.cpp", "*.cc", "*.cxx", "*.c++")),
    (Language.C, ("*.c",)),
    (Language.OBJC, ("*.m",)),
    (Language.OBJCXX, ("*.mm",)),
)


@lru_cache(maxsize=1)
def _other_platforms() -> re.Pattern[str]:
    return other_platforms_pattern(get_platform().os)


def is_other_platform_file(name: str) -> bool:
    """True if name is qualified for a platform other than the host."""
    return _other_platforms().search(name) is not None


def glob(pattern: str, directory: Path | str = ".") -> list[str]:
    """Expand a glob pattern relative to directory.

    Returns:
        Sorted matches, relative to directory, without other-platform files.
    """
    try:
        matches = sorted(_glob.glob(pattern, root_dir=directory))
    except OSError as e:
        raise DmakeFilesystemError("glob", pattern, e) from e
    names = []
    for name in matches:
        if is_other_platform_file(name):
            logger.debug("glob ignoring %r", name)
            continue
        names.append(name)
    return names


def expand_globs(
    patterns: str | Iterable[str], directory: Path | str = "."
) -> list[str]:
    """Expand whitespace separated glob patterns and union the matches.

    A pattern matching nothing is not an error; the caller decides what
    an empty result means.
    """
    if isinstance(patterns, str):
        patterns = patterns.split()
    names: list[str] = []
    for pattern in patterns:
        for name in glob(pattern, directory):
            if name not in names:
                names.append(name)
    return names


def source_files(
    directory: Path | str = ".",
    language: Language = Language.UNKNOWN,
) -> tuple[list[str], Language]:
    """Find the source files in a directory using the default patterns.

    Args:
        directory: Directory to search.
        language: Language forced by the user; replaces the detected one.

    Returns:
        Tuple of (files, language). Files is empty and language UNKNOWN
        if nothing was found.
    """
    for lang, patterns in LANGUAGE_PATTERNS:
        for pattern in patterns:
            files = glob(pattern, directory)
            if files:
                if language is not Language.UNKNOWN:
                    lang = language
                return files, lang
    return [], Language.UNKNOWN


class MainFunctionDetector:
    """Decides whether a source file defines main().

    Matches lines such as::

        int main()
        int main(void)
        int main(int argc, char **argv)
        main(

    Subclass and override defines_main() to use something stricter.
    """

    MAIN_FUNCTION = re.compile(r"^[ \t]*(func|int)?[ \t]*main[ \t]*\((void|int|)")

    def defines_main(self, path: Path | str) -> bool:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                return any(self.MAIN_FUNCTION.match(line) for line in f)
        except OSError as e:
            logger.warning("%s: %s", path, e.strerror or e)
            return False

    def find_main(
        self, files: Sequence[str], directory: Path | str = "."
    ) -> str | None:
        """Return the first file that defines main(), or None."""
        directory = Path(directory)
        for name in files:
            if self.defines_main(directory / name):
                return name
        return None


def determine_output_type(
    files: Sequence[str],
    directory: Path | str = ".",
    *,
    dll: bool = False,
    plugin: bool = False,
    detector: MainFunctionDetector | None = None,
) -> OutputType:
    """Infer the module kind from its sources.

    A module with a main() is an executable. Anything else is a library:
    dynamic if dll is set, a plugin if plugin is set, static otherwise.
    """
    if detector is None:
        detector = MainFunctionDetector()
    main_file = detector.find_main(files, directory)
    if main_file is not None:
        output_type = OutputType.EXE
        logger.debug("main() found in %s", main_file)
    elif dll:
        output_type = OutputType.DLL
    elif plugin:
        output_type = OutputType.PLUGIN
    else:
        output_type = OutputType.LIB
    logger.debug("module type %s", output_type)
    return output_type
