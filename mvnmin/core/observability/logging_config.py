"""
Logging configuration for the mvnmin command.

Diagnostics go to stderr; stdout is reserved for Maven's output and the
``-p`` module list. Level precedence:
    --log-level  >  MVNMIN_LOG_LEVEL  >  DEBUG=true  >  WARNING

MVNMIN_LOG_FILE additionally captures everything at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV_VAR = "MVNMIN_LOG_LEVEL"
LOG_FILE_ENV_VAR = "MVNMIN_LOG_FILE"
LEGACY_DEBUG_ENV_VAR = "DEBUG"

DETAILED_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"

# (format, datefmt) per console level, most verbose first
_CONSOLE_FORMATS = (
    (logging.DEBUG, DETAILED_FORMAT, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_QUIET_FORMAT = "mvnmin: %(message)s"


def resolve_log_level(cli_level: str | None, environ: Mapping[str, str]) -> str:
    """Pick the effective level name from the flag and environment."""
    if cli_level:
        return cli_level
    if environ.get(LOG_LEVEL_ENV_VAR):
        return environ[LOG_LEVEL_ENV_VAR]
    if environ.get(LEGACY_DEBUG_ENV_VAR, "").lower() == "true":
        return "DEBUG"
    return "WARNING"


def console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_QUIET_FORMAT)


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Replace the root logger's handlers with mvnmin's.

    Unknown level names fall back to WARNING.
    """
    numeric_level = logging.getLevelName(level.upper()) if level else logging.WARNING
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(console_formatter(numeric_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)

    logging.raiseExceptions = False
