"""
Mock adapters — in-memory test doubles for the repository and runner.

Let the use case and CLI be exercised without git, a Maven tree on disk,
or a Maven installation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath

from mvnmin.adapters.base import ProcessRunner, ProjectLocatorError, ProjectRepository
from mvnmin.core.engine.command import Invocation
from mvnmin.core.models.pom import POM_FILE


class InMemoryProjectRepository(ProjectRepository):
    """A fake Maven tree.

    Args:
        projects: Project directory (``""`` for the root) → project id.
        dirty_files: Paths ``find_dirty_files`` reports.
        ranges: Commit range → paths ``diff_range`` reports.
        failure: If set, every git-backed call raises ProjectLocatorError.
    """

    def __init__(
        self,
        projects: Mapping[str, str] | None = None,
        dirty_files: Iterable[str] = (),
        ranges: Mapping[str, Iterable[str]] | None = None,
        failure: str | None = None,
    ):
        self.projects = {self._normalize(d): pid for d, pid in (projects or {}).items()}
        self.dirty_files = set(dirty_files)
        self.ranges = {k: set(v) for k, v in (ranges or {}).items()}
        self.failure = failure
        self.calls: list[str] = []

    def find_dirty_files(self) -> set[str]:
        self._record("find_dirty_files")
        return set(self.dirty_files)

    def diff_range(self, commit_range: str) -> set[str]:
        self._record(f"diff_range:{commit_range}")
        return set(self.ranges.get(commit_range, set()))

    def find_all_pom_files(self, max_depth: int) -> set[str]:
        self.calls.append(f"find_all_pom_files:{max_depth}")
        results = set()
        for directory in self.projects:
            pom = PurePosixPath(directory, POM_FILE) if directory else PurePosixPath(POM_FILE)
            if len(pom.parts) <= max_depth:
                results.add(pom.as_posix())
        return results

    def resolve_project_ids(self, paths: Iterable[str]) -> set[str]:
        results = set()
        for path in paths:
            project_id = self._owner(path)
            if project_id is not None:
                results.add(project_id)
        return results

    def _owner(self, path: str) -> str | None:
        current = PurePosixPath(self._normalize(path))
        while True:
            key = current.as_posix() if current.parts else ""
            if key in self.projects:
                return self.projects[key]
            if not current.parts:
                return None
            current = current.parent

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if self.failure:
            raise ProjectLocatorError(self.failure)

    @staticmethod
    def _normalize(path: str) -> str:
        path = path.strip().strip("/")
        return "" if path in ("", ".") else PurePosixPath(path).as_posix()


class MockProcessRunner(ProcessRunner):
    """Records invocations instead of running them.

    Args:
        exit_codes: Exit codes returned in call order. Once exhausted,
            ``default_exit_code`` is returned.
        default_exit_code: Exit code when no scripted code remains.
    """

    def __init__(self, exit_codes: Iterable[int] = (), default_exit_code: int = 0):
        self._exit_codes = list(exit_codes)
        self._default = default_exit_code
        self._call_log: list[Invocation] = []

    @property
    def call_log(self) -> list[Invocation]:
        """Every invocation this runner has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def execute(self, invocation: Invocation) -> int:
        self._call_log.append(invocation)
        if self._exit_codes:
            return self._exit_codes.pop(0)
        return self._default
