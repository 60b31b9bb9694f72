"""
Shared exception types for compat_harness.
Stable surface; extend only.
"""

from __future__ import annotations


class HarnessError(Exception):
    """Base exception for compat_harness; catch this for any package-raised error."""

    pass


class ConfigurationError(HarnessError):
    """Configuration is missing, malformed, or names no backend versions when at least one is required."""

    pass


class LinkCollision(HarnessError):
    """The link slot was occupied when it had to be empty. Internal invariant violation; never retried."""

    def __init__(self, path: str, target: str) -> None:
        self.path = path
        self.target = target
        super().__init__(f"Link slot {path} already exists; refusing to re-link it to {target}")


__all__ = ["ConfigurationError", "HarnessError", "LinkCollision"]
