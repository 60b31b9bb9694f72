"""
Static lint gate. Runs once per harness run, after every backend version passed.

The configured command is expected to be strict (warnings are errors, all
targets including tests); any non-zero exit fails the build.
"""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from .config import HarnessSettings
from .core.errors import ConfigurationError
from .core.types import LintResult
from .process import Executor, SubprocessExecutor

logger = logging.getLogger(__name__)


class LintGate:
    def __init__(
        self,
        settings: HarnessSettings,
        executor: Optional[Executor] = None,
        base_env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.settings = settings
        self.executor = executor or SubprocessExecutor()
        self.base_env = base_env

    def run(self) -> LintResult:
        argv = self.settings.lint.argv
        if not argv:
            raise ConfigurationError("lint.command is not configured")
        env = dict(os.environ if self.base_env is None else self.base_env)
        env.update(self.settings.env)
        rc = self.executor.run(argv, env, self.settings.lint.cwd)
        logger.debug("lint %s exited with %d", argv, rc)
        return LintResult(passed=rc == 0, exit_code=rc)
