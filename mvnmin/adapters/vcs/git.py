"""
Git project repository — changed files from git, projects from pom.xml.

Uses the git CLI for change detection and walks the working tree to find
the pom.xml that owns each changed path.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from mvnmin.adapters.base import ProjectLocatorError, ProjectRepository
from mvnmin.core.models.pom import POM_FILE, PomError, PomProject

logger = logging.getLogger(__name__)

# "XY path" in porcelain output
_STATUS_PREFIX_LENGTH = 3
_RENAME_SEPARATOR = " -> "
_SKIPPED_DIRS = {"target", ".git"}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of unusual file names."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    raw = path[1:-1].encode("utf-8").decode("unicode_escape")
    # unicode_escape yields one char per octal-escaped byte
    return raw.encode("latin-1").decode("utf-8", errors="replace")


def parse_status_line(line: str) -> str | None:
    """Extract the current path from one ``git status --porcelain`` line."""
    if len(line) <= _STATUS_PREFIX_LENGTH:
        return None
    path = line[_STATUS_PREFIX_LENGTH:]
    if _RENAME_SEPARATOR in path:
        path = path.split(_RENAME_SEPARATOR, 1)[1]
    return unquote_path(path.strip())


class GitProjectRepository(ProjectRepository):
    """ProjectRepository backed by a git working tree.

    Args:
        root: Root of the Maven tree (default: cwd). It may sit below the
            git top-level; changed paths are reported relative to it and
            paths outside it are dropped.
        timeout: Seconds to wait for each git command.
    """

    def __init__(self, root: Path | None = None, timeout: int = 60):
        self.root = (root or Path.cwd()).resolve()
        self.timeout = timeout
        self._ids: dict[Path, str] = {}
        self._toplevel: Path | None = None

    @staticmethod
    def is_available() -> bool:
        return shutil.which("git") is not None

    # ── Changed files ───────────────────────────────────────────

    def find_dirty_files(self) -> set[str]:
        output = self._git(["status", "--porcelain"])
        results = set()
        for line in output.splitlines():
            path = parse_status_line(line)
            if path:
                results.add(path)
        results = self._rebase(results)
        logger.debug("git status: %d changed paths", len(results))
        return results

    def diff_range(self, commit_range: str) -> set[str]:
        output = self._git(["diff", "--name-only", commit_range])
        return self._rebase(line.strip() for line in output.splitlines() if line.strip())

    def find_all_pom_files(self, max_depth: int) -> set[str]:
        results = set()
        for dirpath, dirnames, filenames in os.walk(self.root):
            rel_dir = Path(dirpath).relative_to(self.root)
            depth = len(rel_dir.parts)
            # Prune in place so os.walk doesn't descend
            dirnames[:] = [
                d for d in dirnames if d not in _SKIPPED_DIRS and depth + 2 <= max_depth
            ]
            if POM_FILE in filenames and depth + 1 <= max_depth:
                results.add((rel_dir / POM_FILE).as_posix())
        return results

    # ── Project resolution ──────────────────────────────────────

    def resolve_project_ids(self, paths: Iterable[str]) -> set[str]:
        results = set()
        for path in paths:
            pom = self.find_pom(path)
            if pom is None:
                logger.debug("No pom.xml owns %s", path)
                continue
            results.add(self._project_id(pom))
        logger.debug("found %d projects", len(results))
        return results

    def find_pom(self, path: str) -> Path | None:
        """Nearest pom.xml at or above ``path``, never above the root."""
        current = (self.root / path).resolve()
        while True:
            candidate = current / POM_FILE
            if candidate.is_file():
                return candidate
            if current == self.root or self.root not in current.parents:
                return None
            current = current.parent

    def _project_id(self, pom: Path) -> str:
        if pom not in self._ids:
            try:
                self._ids[pom] = PomProject.from_file(pom).project_id
            except PomError as e:
                raise ProjectLocatorError(str(e)) from e
        return self._ids[pom]

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str]) -> str:
        """Run a git command in the root and return stdout."""
        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ProjectLocatorError("git is not installed or not on the PATH") from e
        except subprocess.TimeoutExpired as e:
            raise ProjectLocatorError(f"git {args[0]} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise ProjectLocatorError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout

    def _rebase(self, paths: Iterable[str]) -> set[str]:
        """Turn git top-level relative paths into root-relative ones."""
        if self._toplevel is None:
            output = self._git(["rev-parse", "--show-toplevel"])
            self._toplevel = Path(output.strip()).resolve()

        results = set()
        for path in paths:
            absolute = self._toplevel / path
            if absolute != self.root and self.root not in absolute.parents:
                logger.debug("Ignoring %s: outside %s", path, self.root)
                continue
            results.add(absolute.relative_to(self.root).as_posix())
        return results
