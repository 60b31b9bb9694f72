"""
Top-level public API surface. Stable facades only.
Does not import cli.
"""

from __future__ import annotations

from . import core
from ._version import __version__
from .config import HarnessSettings, get_config, load_settings
from .link_slot import LinkSlot, temporary_link_slot
from .pipeline import run_harness, run_lint_only, run_release_wrapper
from .versions import resolve_version_set

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "HarnessSettings",
    "LinkSlot",
    "core",
    "get_config",
    "load_settings",
    "resolve_version_set",
    "run_harness",
    "run_lint_only",
    "run_release_wrapper",
    "temporary_link_slot",
]
