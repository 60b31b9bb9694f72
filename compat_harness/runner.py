"""
Per-version check runner.

One call: link the slot to the version's bin root, announce the version, run the
backend init commands, run the tool's self-check suite under the bound
environment, unlink. The link never outlives the call. The runner reports the
outcome and leaves continue/abort decisions to the compatibility loop.
"""
from __future__ import annotations

import logging
import sys
from typing import Mapping, Optional, TextIO

from .config import HarnessSettings
from .core.errors import ConfigurationError, HarnessError
from .core.types import STAGE_CHECK, STAGE_INIT, RunOutcome, VersionDescriptor
from .environment import bin_dir, bind_environment
from .link_slot import LinkSlot
from .process import Executor, SubprocessExecutor
from .versions import query_version

logger = logging.getLogger(__name__)


class CheckRunner:
    """
    Runs the self-check suite against one backend version at a time.

    Usage:
        with temporary_link_slot("nix") as slot:
            runner = CheckRunner(slot, settings)
            outcome = runner.run(descriptor)
    """

    def __init__(
        self,
        slot: LinkSlot,
        settings: HarnessSettings,
        executor: Optional[Executor] = None,
        base_env: Optional[Mapping[str, str]] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.slot = slot
        self.settings = settings
        self.executor = executor or SubprocessExecutor()
        self.base_env = base_env
        self.out = out
        if not settings.check.argv:
            raise ConfigurationError("check.command is not configured")

    def _announce(self, descriptor: VersionDescriptor, env: Mapping[str, str]) -> str:
        backend = self.settings.backend
        version = descriptor.label
        if backend.version_executable:
            try:
                version = query_version(
                    bin_dir(self.slot.path),
                    backend.version_executable,
                    backend.version_flag,
                    env,
                    self.executor,
                )
            except HarnessError as e:
                # Progress line only; the check run decides pass/fail.
                logger.warning("Could not query version of %s: %s", descriptor.label, e)
        print(f"Testing with {version}", file=self.out if self.out is not None else sys.stdout, flush=True)
        return version

    def run(self, descriptor: VersionDescriptor) -> RunOutcome:
        with self.slot.linked(descriptor.bin_root):
            env = bind_environment(self.slot.path, self.settings, self.base_env)
            version = self._announce(descriptor, env)

            for argv in self.settings.backend.init:
                rc = self.executor.run(argv, env, self.settings.check.cwd)
                if rc != 0:
                    logger.debug("init %s failed with %d for %s", argv, rc, descriptor.label)
                    return RunOutcome(
                        descriptor=descriptor,
                        passed=False,
                        exit_code=rc,
                        stage=STAGE_INIT,
                        version_string=version,
                    )

            rc = self.executor.run(self.settings.check.argv, env, self.settings.check.cwd)
            return RunOutcome(
                descriptor=descriptor,
                passed=rc == 0,
                exit_code=rc,
                stage=STAGE_CHECK,
                version_string=version,
            )
