"""
Change diff — turn "what changed" into module requests.

Collects changed paths from the sources the user asked for (working
tree, a commit range, every pom in the tree), then asks the project
repository which projects own them.
"""

from __future__ import annotations

import logging
import os

from mvnmin.adapters.base import ProjectRepository
from mvnmin.core.config.loader import CONFIG_FILE_NAMES
from mvnmin.core.models.requests import ModuleRequests

logger = logging.getLogger(__name__)

MAX_DEPTH_ENV_VAR = "MVNMIN_MAXDEPTHS"
DEFAULT_MAX_DEPTH = 6
DEFAULT_DIFF_BASE = "master"


def normalize_commit_range(value: str | None) -> str:
    """``--diff`` value to a ``git diff`` range.

    No value means ``master``; a bare commitish compares against the
    working tree (``master`` becomes ``master..``).
    """
    commit_range = (value or "").strip() or DEFAULT_DIFF_BASE
    if ".." not in commit_range:
        commit_range += ".."
    return commit_range


def max_depth_from_env(environ: dict[str, str] | None = None) -> int:
    """Depth limit for the ``--all`` pom walk."""
    env = os.environ if environ is None else environ
    raw = env.get(MAX_DEPTH_ENV_VAR)
    if raw is None:
        return DEFAULT_MAX_DEPTH
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Ignoring invalid %s=%r, using %d", MAX_DEPTH_ENV_VAR, raw, DEFAULT_MAX_DEPTH
        )
        return DEFAULT_MAX_DEPTH


class RepoDiff:
    """Builder for the set of changed paths.

    Usage:
        requests = (
            RepoDiff()
            .with_dirty_files()
            .with_commit_range("master..")
            .resolve(repository)
        )
    """

    def __init__(self) -> None:
        self.commit_range: str | None = None
        self.include_dirty_files = False
        self.include_all_projects = False
        self.max_depth = DEFAULT_MAX_DEPTH

    def with_dirty_files(self) -> RepoDiff:
        self.include_dirty_files = True
        return self

    def with_commit_range(self, commit_range: str) -> RepoDiff:
        self.commit_range = commit_range
        return self

    def with_all_projects(self, max_depth: int = DEFAULT_MAX_DEPTH) -> RepoDiff:
        self.include_all_projects = True
        self.max_depth = max_depth
        return self

    @property
    def has_sources(self) -> bool:
        return bool(self.commit_range or self.include_dirty_files or self.include_all_projects)

    def diff(self, repository: ProjectRepository) -> set[str]:
        """Union of changed paths from every enabled source."""
        files: set[str] = set()

        if self.commit_range:
            changed = repository.diff_range(self.commit_range)
            logger.debug("Changes in %s: %s", self.commit_range, sorted(changed))
            files |= changed

        if self.include_dirty_files:
            changed = repository.find_dirty_files()
            logger.debug("git status found these files are changed: %s", sorted(changed))
            files |= changed

        if self.include_all_projects:
            poms = repository.find_all_pom_files(self.max_depth)
            logger.debug("Adding all pom files (max depth %d): %d found", self.max_depth, len(poms))
            files |= poms

        config_changes = files & set(CONFIG_FILE_NAMES)
        if config_changes:
            logger.debug("Change detected in %s, ignoring", ", ".join(sorted(config_changes)))
            files -= config_changes

        return files

    def resolve(self, repository: ProjectRepository) -> ModuleRequests:
        """Module requests for every project owning a changed path."""
        if not self.has_sources:
            return ModuleRequests()
        project_ids = repository.resolve_project_ids(self.diff(repository))
        logger.debug("Projects activated from files (%d): %s", len(project_ids), sorted(project_ids))
        return ModuleRequests(project_ids)
