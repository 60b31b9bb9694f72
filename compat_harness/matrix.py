"""
Compatibility loop: run the check runner over the version set, strictly in order,
one version at a time, stopping at the first failure.
"""
from __future__ import annotations

import logging
from typing import List, Protocol

from .core.types import LoopResult, RunOutcome, VersionDescriptor, VersionSet

logger = logging.getLogger(__name__)


class VersionRunner(Protocol):
    def run(self, descriptor: VersionDescriptor) -> RunOutcome: ...


def run_compatibility_loop(version_set: VersionSet, runner: VersionRunner) -> LoopResult:
    """
    Short-circuiting all-of over the version set.

    If the i-th version fails, exactly i runner invocations happen. Exceptions
    from the runner (e.g. LinkCollision) propagate unchanged.
    """
    outcomes: List[RunOutcome] = []
    for descriptor in version_set:
        outcome = runner.run(descriptor)
        outcomes.append(outcome)
        if not outcome.passed:
            logger.debug(
                "Stopping after %s failed at %s stage (exit %d)",
                descriptor.label, outcome.stage, outcome.exit_code,
            )
            break
    return LoopResult(outcomes=tuple(outcomes))
