"""
Pass-through argument handling.

Everything on the mvnmin command line that isn't an mvnmin option goes
to Maven. click handles mvnmin's long options; the single-letter flags
(``-d``, ``-p``, ``-f``) and ``--diff[=range]`` are picked out here so
that click never tries to split Maven's ``-Dprop=value`` style
arguments into short options.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Flags that take the next argument as their value
_FLAGS_WITH_VALUE = frozenset({"-pl", "--projects", "-rf", "--resume-from"})
_STANDALONE_FLAGS = frozenset({"--all", "--nbi", "-p", "-d", "--dry-run", "--version"})
_DIFF_FLAG = "--diff"
_FILE_FLAGS = frozenset({"-f", "--file"})

FILE_OPTION_UNSUPPORTED = "The options '-f' and '--file' are not supported by mvnmin, exiting."


@dataclass
class ShortFlags:
    """mvnmin flags found among the pass-through arguments."""

    dry_run: bool = False
    print_modules: bool = False
    diff: str | None = None
    file_option: bool = False


def _is_diff_flag(arg: str) -> bool:
    return arg == _DIFF_FLAG or arg.startswith(_DIFF_FLAG + "=")


def scan_flags(args: Sequence[str]) -> ShortFlags:
    """Find ``-d``, ``-p``, ``-f/--file`` and ``--diff[=range]`` in ``args``.

    ``diff`` is ``""`` for a bare ``--diff`` and the given range for
    ``--diff=range``.
    """
    flags = ShortFlags()
    for arg in args:
        if arg == "-d":
            flags.dry_run = True
        elif arg == "-p":
            flags.print_modules = True
        elif arg in _FILE_FLAGS or arg.startswith("--file="):
            flags.file_option = True
        elif _is_diff_flag(arg):
            _, _, value = arg.partition("=")
            flags.diff = value
    return flags


def filter_maven_args(args: Sequence[str]) -> list[str]:
    """Strip mvnmin's own flags (and their values) from ``args``.

    mvnmin computes ``--projects`` and ``-rf`` for each reactor itself,
    so the user's values never reach Maven verbatim.
    """
    result: list[str] = []
    skip_value = False
    for arg in args:
        if skip_value:
            skip_value = False
            continue
        if arg in _FLAGS_WITH_VALUE:
            skip_value = True
            continue
        name, sep, _ = arg.partition("=")
        if sep and name in _FLAGS_WITH_VALUE:
            continue
        if arg in _STANDALONE_FLAGS or _is_diff_flag(arg):
            continue
        result.append(arg)
    return result
