"""
Adapter base — the contracts between the engine and external tools.

The engine never talks to git, the filesystem or the build tool
directly. It asks a ``ProjectRepository`` which projects changed and
hands a composed ``Invocation`` to a ``ProcessRunner``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from mvnmin.core.engine.command import Invocation


class ProjectLocatorError(Exception):
    """Raised when changed files cannot be mapped to projects.

    Covers a failing git command and an unparseable pom.xml.
    """


class ProjectRepository(ABC):
    """Source of changed paths and the projects that own them.

    All paths are relative to the repository root.
    """

    @abstractmethod
    def find_dirty_files(self) -> set[str]:
        """Files with uncommitted changes (staged, unstaged or untracked)."""

    @abstractmethod
    def diff_range(self, commit_range: str) -> set[str]:
        """Files changed in a ``git diff`` style range (``a..b``)."""

    @abstractmethod
    def find_all_pom_files(self, max_depth: int) -> set[str]:
        """Every pom.xml at most ``max_depth`` levels down."""

    @abstractmethod
    def resolve_project_ids(self, paths: Iterable[str]) -> set[str]:
        """Map paths to the ``groupId:artifactId`` of their nearest pom.

        Paths with no enclosing pom contribute nothing.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class ProcessRunner(ABC):
    """Runs build tool invocations."""

    @abstractmethod
    def execute(self, invocation: Invocation) -> int:
        """Run the invocation to completion and return its exit code.

        MUST never raise: a command that cannot be started is reported
        and yields a non-zero exit code.
        """
