"""
Module requests — a set of raw project tokens split into enabled/disabled.

A token prefixed with ``!`` or ``-`` disables the project it names.
Disabling always wins: a project requested both ways ends up disabled.
"""

from __future__ import annotations

from collections.abc import Iterable

_DISABLE_PREFIXES = ("!", "-")


class ModuleRequests:
    """Enabled and disabled module identifiers from one activation source."""

    __slots__ = ("_enabled", "_disabled")

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        enabled: set[str] = set()
        disabled: set[str] = set()
        for raw in tokens:
            token = raw.strip()
            if not token:
                continue
            if token.startswith(_DISABLE_PREFIXES):
                name = token[1:].strip()
                if name:
                    disabled.add(name)
            else:
                enabled.add(token)

        self._enabled = frozenset(enabled - disabled)
        self._disabled = frozenset(disabled)

    @classmethod
    def from_csv(cls, value: str) -> ModuleRequests:
        """Parse a ``-pl`` style comma-separated list."""
        return cls(value.split(","))

    @classmethod
    def from_lines(cls, text: str) -> ModuleRequests:
        """Parse newline-separated identifiers (e.g. piped on stdin)."""
        return cls(text.splitlines())

    @property
    def enabled(self) -> frozenset[str]:
        return self._enabled

    @property
    def disabled(self) -> frozenset[str]:
        return self._disabled

    def __bool__(self) -> bool:
        return bool(self._enabled or self._disabled)

    def __repr__(self) -> str:
        return (
            f"ModuleRequests(enabled={sorted(self._enabled)!r}, "
            f"disabled={sorted(self._disabled)!r})"
        )
