"""
Build-if expansion — make sure dependent projects build too.

A build-if rule says "when a module matching this pattern builds, these
other modules must build as well". Rules can chain, so expansion runs
several passes over the growing set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from mvnmin.core.models.config import BuildIfRule

logger = logging.getLogger(__name__)

# Number of expansion passes. Chains of rules deeper than this are
# under-expanded.
BUILD_IF_PASSES = 4


def expand_build_ifs(
    modules: Iterable[str],
    rules: Sequence[BuildIfRule],
    passes: int = BUILD_IF_PASSES,
) -> set[str]:
    """Return ``modules`` plus every module pulled in by build-if rules.

    Args:
        modules: Currently activated module ids.
        rules: Declared build-if rules.
        passes: Number of expansion passes.

    Returns:
        A new set, always a superset of ``modules``.
    """
    result = set(modules)
    if not rules:
        return result

    added: set[str] = set()
    for _ in range(passes):
        added = set()
        for module in result:
            for rule in rules:
                if rule.matches(module):
                    added.update(rule.modules)
        added -= result
        if not added:
            break
        logger.debug("build-if added: %s", sorted(added))
        result |= added

    if added:
        logger.debug(
            "build-if expansion still growing after %d passes, chains may be incomplete",
            passes,
        )
    return result
