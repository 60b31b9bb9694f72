"""
Process execution behind a small protocol so the runner, lint gate and doctor
can be driven by fakes in tests.

Commands are argv lists. No timeout: a hung child hangs the harness.
"""
from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence, runtime_checkable

from .core.errors import HarnessError

logger = logging.getLogger(__name__)


@runtime_checkable
class Executor(Protocol):
    """Runs commands under an explicit environment."""

    def run(self, argv: Sequence[str], env: Mapping[str, str], cwd: Optional[Path] = None) -> int:
        """Run argv to completion with output streamed; return its exit status."""
        ...

    def capture(self, argv: Sequence[str], env: Mapping[str, str]) -> str:
        """Run argv and return its stdout, stripped."""
        ...


def resolve_executable(name: str, env: Mapping[str, str]) -> str:
    """Resolve name against env's PATH so binaries prepended by the binder win."""
    found = shutil.which(name, path=env.get("PATH"))
    return found or name


class SubprocessExecutor:
    """Executor backed by subprocess.run."""

    def run(self, argv: Sequence[str], env: Mapping[str, str], cwd: Optional[Path] = None) -> int:
        if not argv:
            raise HarnessError("Empty command")
        cmd = [resolve_executable(argv[0], env)] + list(argv[1:])
        logger.debug("run: %s (cwd=%s)", cmd, cwd)
        try:
            proc = subprocess.run(cmd, env=dict(env), cwd=str(cwd) if cwd else None)
        except OSError as e:
            raise HarnessError(f"Could not start {' '.join(argv)}: {e}") from e
        return proc.returncode

    def capture(self, argv: Sequence[str], env: Mapping[str, str]) -> str:
        if not argv:
            raise HarnessError("Empty command")
        cmd = [resolve_executable(argv[0], env)] + list(argv[1:])
        logger.debug("capture: %s", cmd)
        try:
            proc = subprocess.run(cmd, env=dict(env), capture_output=True, text=True)
        except OSError as e:
            raise HarnessError(f"Could not start {' '.join(argv)}: {e}") from e
        if proc.returncode != 0:
            raise HarnessError(
                f"{' '.join(argv)} exited with {proc.returncode}: {(proc.stderr or '').strip()[:200]}"
            )
        return (proc.stdout or "").strip()
