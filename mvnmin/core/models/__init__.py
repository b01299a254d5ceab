"""
Domain models for mvnmin.

Re-exported here for convenient access:

    from mvnmin.core.models import MvnMinConfig, ModuleRequests, PomProject, Reactor
"""

from mvnmin.core.models.config import (
    BuildIfRule,
    MvnMinConfig,
    ReactorDefinition,
    merge_definitions,
)
from mvnmin.core.models.pom import PomError, PomProject
from mvnmin.core.models.reactor import Reactor
from mvnmin.core.models.requests import ModuleRequests

__all__ = [
    # config.py
    "BuildIfRule",
    "MvnMinConfig",
    "ReactorDefinition",
    "merge_definitions",
    # pom.py
    "PomError",
    "PomProject",
    # reactor.py
    "Reactor",
    # requests.py
    "ModuleRequests",
]
