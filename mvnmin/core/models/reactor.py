"""
Reactor model — one build group as mvnmin needs to understand it.

A reactor has static configuration (which pom to build, which module
patterns it owns, how Maven must be invoked for it) and per-run state:
the modules it claimed and whether it has been told to skip.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from mvnmin.core.models.config import ReactorDefinition


def matches_any(patterns: Iterable[str], module: str) -> bool:
    """Whether a module id fully matches one of ``patterns``."""
    return any(re.fullmatch(pattern, module) for pattern in patterns)


@dataclass
class Reactor:
    """A build group. Number 0 is the primary (catch-all) reactor."""

    number: int
    name: str
    pom: str
    patterns: tuple[str, ...] = ()
    single_thread: bool = False
    extra_params: str = ""
    skip_if: str = ""

    # ── Per-run state ────────────────────────────────────────────
    active_modules: set[str] = field(default_factory=set)
    skip: bool = False

    @classmethod
    def from_definition(cls, number: int, definition: ReactorDefinition) -> Reactor:
        return cls(
            number=number,
            name=definition.name or definition.pom or "",
            pom=definition.pom or "pom.xml",
            patterns=tuple(definition.patterns),
            single_thread=bool(definition.single_thread),
            extra_params=definition.extra_params or "",
            skip_if=definition.skip_if or "",
        )

    @property
    def is_primary(self) -> bool:
        return self.number == 0

    @property
    def has_active_modules(self) -> bool:
        return bool(self.active_modules)

    @property
    def should_build(self) -> bool:
        """True if this reactor has active modules and isn't skipped."""
        return not self.skip and self.has_active_modules

    def belongs(self, module: str) -> bool:
        """Whether a module id fully matches one of this reactor's patterns."""
        return matches_any(self.patterns, module)

    def apply_skip_condition(self, args: Iterable[str]) -> bool:
        """Skip this reactor if any build argument matches ``skip_if``.

        Handles profile toggles such as ``-P!cm``. Returns the skip flag.
        """
        if self.skip_if and any(re.fullmatch(self.skip_if, arg) for arg in args):
            self.skip = True
        return self.skip

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "name": self.name,
            "pom": self.pom,
            "patterns": list(self.patterns),
            "single_thread": self.single_thread,
            "extra_params": self.extra_params,
            "skip_if": self.skip_if,
            "active_modules": sorted(self.active_modules),
            "skip": self.skip,
        }
