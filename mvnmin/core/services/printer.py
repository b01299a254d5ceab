"""
Reactor printer — one human-readable line per reactor.

    RUN  1 Commerce Manager : mvn install -f cm/pom.xml --projects ...
    SKIP 0 Main reactor     : mvn install -f pom.xml
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import click

from mvnmin.core.models.reactor import Reactor

logger = logging.getLogger(__name__)

_ACTION_COLORS = {"RUN": "green", "SKIP": "yellow"}


class ReactorPrinter:
    """Prints reactor summaries through ``out`` (default: ``click.echo``)."""

    def __init__(self, max_name_length: int = 0, out: Callable[[str], None] = click.echo):
        self.max_name_length = max_name_length
        self.out = out

    def format_summary(self, reactor: Reactor, command: object) -> str:
        action = "RUN" if reactor.should_build else "SKIP"
        return "%-4.4s %s %-*s : %s" % (
            action,
            reactor.number,
            self.max_name_length,
            self._trim(reactor.name),
            command,
        )

    def command_summary(self, reactor: Reactor, command: object) -> None:
        """Print what would run (or be skipped) for ``reactor``."""
        logger.debug("%s", command)
        line = self.format_summary(reactor, command)
        action = line[:4].rstrip()
        self.out(click.style(line[:4], fg=_ACTION_COLORS[action], bold=True) + line[4:])

    def failed_to_execute(self, command: str) -> None:
        self.out(
            f"Failed to execute '{command}', either it couldn't be found, "
            "or it isn't executable."
        )

    def newline(self) -> None:
        self.out("")

    def _trim(self, name: str) -> str:
        if self.max_name_length <= 0:
            return name
        return name[: self.max_name_length]
