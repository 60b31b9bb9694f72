"""
Backend version set resolution and version-string queries.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from .core.types import VersionDescriptor, VersionSet
from .process import Executor

logger = logging.getLogger(__name__)


def resolve_version_set(descriptors: Iterable[VersionDescriptor]) -> VersionSet:
    """
    De-duplicate descriptors by provider handle, keeping the first occurrence's position.

    Pure; an empty input yields an empty set.
    """
    seen: Dict[str, VersionDescriptor] = {}
    for d in descriptors:
        if d.provider in seen:
            logger.debug("Dropping duplicate backend provider: %s", d.provider)
            continue
        seen[d.provider] = d
    return VersionSet(members=tuple(seen.values()))


def query_version(
    bin_dir: Path,
    executable: str,
    flag: str,
    env: Mapping[str, str],
    executor: Executor,
) -> str:
    """Return the version string printed by bin_dir/executable flag."""
    argv: List[str] = [str(bin_dir / executable), flag]
    return executor.capture(argv, env)
