"""
Reactor resolution — from module requests to an ordered list of reactors.

Flow:
    requests → activated set → build-if expansion → ignore filter
             → configured reactors claim (declaration order)
             → primary reactor claims the rest → [primary, *configured]

Claims are exclusive: a module claimed by one reactor is gone from the
pool, so earlier-declared reactors get first pick.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from mvnmin.core.engine.build_if import expand_build_ifs
from mvnmin.core.models.config import MvnMinConfig
from mvnmin.core.models.reactor import Reactor, matches_any
from mvnmin.core.models.requests import ModuleRequests

logger = logging.getLogger(__name__)


@dataclass
class ExtendedReactor:
    """All modules activated for this run and the reactors that build them."""

    modules: set[str] = field(default_factory=set)
    reactors: list[Reactor] = field(default_factory=list)

    @property
    def reactors_to_build(self) -> list[Reactor]:
        return [r for r in self.reactors if r.should_build]

    @property
    def max_name_length(self) -> int:
        return max((len(r.name) for r in self.reactors), default=0)

    def to_dict(self) -> dict:
        return {
            "modules": sorted(self.modules),
            "reactors": [r.to_dict() for r in self.reactors],
        }


def determine_modules_to_build(
    requests: Iterable[ModuleRequests],
    config: MvnMinConfig,
    build_if_enabled: bool = True,
) -> set[str]:
    """Merge module requests into the activated module set.

    Every source's disabled modules are removed after all enabled ones
    are added, so disabling always wins across sources. Ignored modules
    are removed last, after build-if expansion.
    """
    requests = list(requests)
    modules: set[str] = set()
    for request in requests:
        modules |= request.enabled
    for request in requests:
        modules -= request.disabled

    if build_if_enabled:
        modules = expand_build_ifs(modules, config.build_ifs)

    ignored = modules & set(config.ignored_modules)
    if ignored:
        logger.debug("Ignoring modules: %s", sorted(ignored))
    return modules - ignored


def claim(pool: Iterable[str], patterns: Sequence[str]) -> tuple[set[str], set[str]]:
    """Split ``pool`` into modules matching any pattern and the rest.

    Matching is full-string. Returns ``(claimed, remaining)``; the input
    is not modified.
    """
    claimed: set[str] = set()
    remaining: set[str] = set()
    for module in pool:
        if matches_any(patterns, module):
            claimed.add(module)
        else:
            remaining.add(module)
    return claimed, remaining


def build_reactors(config: MvnMinConfig) -> tuple[Reactor, list[Reactor]]:
    """Create fresh (unclaimed) reactors from configuration.

    Returns:
        ``(primary, configured)`` with configured reactors numbered from 1
        in declaration order.
    """
    configured = [
        Reactor.from_definition(number, definition)
        for number, definition in enumerate(config.sub_reactor_definitions(), start=1)
    ]
    primary = Reactor.from_definition(0, config.primary_definition())
    return primary, configured


def resolve_reactors(config: MvnMinConfig, modules: Iterable[str]) -> list[Reactor]:
    """Partition ``modules`` across the configured reactors.

    Returns:
        The primary reactor followed by the configured reactors. The
        primary is marked skip when it claimed nothing; configured
        reactors with no modules are kept and simply don't build.
    """
    primary, configured = build_reactors(config)

    pool = set(modules)
    for reactor in configured:
        reactor.active_modules, pool = claim(pool, reactor.patterns)

    primary.active_modules, pool = claim(pool, primary.patterns)
    if pool:
        # Only possible when the primary reactor's patterns aren't catch-all
        logger.warning("Modules not claimed by any reactor: %s", ", ".join(sorted(pool)))

    if not primary.has_active_modules:
        primary.skip = True

    reactors = [primary, *configured]
    for reactor in reactors:
        logger.debug("%s", reactor)
    return reactors


def build_extended_reactor(
    requests: Iterable[ModuleRequests],
    config: MvnMinConfig,
    build_if_enabled: bool = True,
) -> ExtendedReactor:
    """Resolve requests into the modules to build and their reactors."""
    modules = determine_modules_to_build(requests, config, build_if_enabled)
    logger.debug("modules to build: %s", sorted(modules))
    return ExtendedReactor(
        modules=modules,
        reactors=resolve_reactors(config, modules),
    )


def apply_skip_conditions(reactors: Iterable[Reactor], args: Sequence[str]) -> None:
    """Skip every reactor whose ``skip_if`` matches an incoming argument."""
    for reactor in reactors:
        if reactor.apply_skip_condition(args):
            logger.debug("Skipping %s: skip condition %r matched", reactor.name, reactor.skip_if)


def find_resume_reactor(reactors: Sequence[Reactor], resume_from: str) -> Reactor | None:
    """First reactor with an active module containing ``resume_from``.

    ``resume_from`` may be abbreviated (``:artifact``), hence the
    substring match.
    """
    for reactor in reactors:
        if any(resume_from in module for module in reactor.active_modules):
            return reactor
    return None


def apply_resume_point(reactors: Sequence[Reactor], resume_from: str | None) -> None:
    """Skip every reactor before the one containing the resume point.

    If no reactor contains it, every reactor is skipped.
    """
    if not resume_from:
        return

    target = find_resume_reactor(reactors, resume_from)
    for reactor in reactors:
        if reactor is target:
            return
        logger.debug("Skipping %s looking for resume-from module: %s", reactor.name, resume_from)
        reactor.skip = True
