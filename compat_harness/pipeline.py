"""
Harness pipeline: resolve versions -> compatibility loop -> lint gate.
Also the explicit lint-only phase and the release wrapper step.

Stages are strictly sequential; the lint gate is only reached when every
backend version passed, so a lint failure never masks a compatibility failure.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, TextIO

from .config import HarnessSettings
from .core.errors import ConfigurationError
from .core.types import HarnessResult, LintResult, LoopResult
from .lint import LintGate
from .link_slot import temporary_link_slot
from .matrix import run_compatibility_loop
from .process import Executor
from .runner import CheckRunner
from .versions import resolve_version_set
from .wrapper import write_wrapper

logger = logging.getLogger(__name__)


def run_harness(
    settings: HarnessSettings,
    executor: Optional[Executor] = None,
    *,
    lint: bool = True,
    base_env: Optional[Mapping[str, str]] = None,
    out: Optional[TextIO] = None,
) -> HarnessResult:
    """
    Run every configured backend version's checks, then the lint gate.

    Raises ConfigurationError when no versions are configured and
    settings.require_versions is set.
    """
    version_set = resolve_version_set(settings.versions)

    if len(version_set) == 0:
        if settings.require_versions:
            raise ConfigurationError(
                "No backend versions configured; set versions in config.yaml "
                "(or require_versions: false to allow an untested run)"
            )
        logger.warning("no backend versions configured; compatibility checks skipped")
        loop = LoopResult()
    else:
        with temporary_link_slot(settings.backend.slot_name) as slot:
            runner = CheckRunner(slot, settings, executor=executor, base_env=base_env, out=out)
            loop = run_compatibility_loop(version_set, runner)

    if not loop.passed or not lint:
        return HarnessResult(loop=loop)
    return HarnessResult(loop=loop, lint=run_lint_only(settings, executor, base_env=base_env))


def run_lint_only(
    settings: HarnessSettings,
    executor: Optional[Executor] = None,
    *,
    base_env: Optional[Mapping[str, str]] = None,
) -> LintResult:
    return LintGate(settings, executor=executor, base_env=base_env).run()


def run_release_wrapper(
    settings: HarnessSettings,
    program: Optional[Path] = None,
    default_backend: Optional[Path] = None,
) -> Path:
    """Wrap the installed program so it selects the release's default backend; return the wrapped original."""
    program = program or settings.release.program
    default_backend = default_backend or settings.release.default_backend
    if program is None:
        raise ConfigurationError("release.program is not configured")
    if default_backend is None:
        raise ConfigurationError("release.default_backend is not configured")
    # The launcher runs from any cwd.
    default_backend = Path(default_backend).expanduser().absolute()
    return write_wrapper(program, {settings.backend.variable: str(default_backend)})
