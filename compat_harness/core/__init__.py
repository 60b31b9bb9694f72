"""
Stable facade: data contracts and exception types. No process or filesystem access.
Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import ConfigurationError, HarnessError, LinkCollision
from .types import (
    EXIT_CHECK_FAILED,
    EXIT_CONFIG_ERROR,
    EXIT_INTERNAL_ERROR,
    EXIT_LINT_FAILED,
    EXIT_OK,
    HarnessResult,
    LintResult,
    LoopResult,
    RunOutcome,
    VersionDescriptor,
    VersionSet,
)

# Do not add exports without updating __all__.
__all__ = [
    "EXIT_CHECK_FAILED",
    "EXIT_CONFIG_ERROR",
    "EXIT_INTERNAL_ERROR",
    "EXIT_LINT_FAILED",
    "EXIT_OK",
    "ConfigurationError",
    "HarnessError",
    "HarnessResult",
    "LinkCollision",
    "LintResult",
    "LoopResult",
    "RunOutcome",
    "VersionDescriptor",
    "VersionSet",
]
