"""Adapters — bindings to git, the filesystem and the build tool.

Public re-exports for convenient access.
"""

from mvnmin.adapters.base import ProcessRunner, ProjectLocatorError, ProjectRepository
from mvnmin.adapters.mock import InMemoryProjectRepository, MockProcessRunner

__all__ = [
    "InMemoryProjectRepository",
    "MockProcessRunner",
    "ProcessRunner",
    "ProjectLocatorError",
    "ProjectRepository",
]
