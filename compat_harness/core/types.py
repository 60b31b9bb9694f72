"""
Data contracts shared by the resolver, runner, loop and gates.

Descriptors and outcomes are frozen dataclasses; nothing here touches the
filesystem or spawns processes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

# Harness exit codes (see `compat-harness --help`).
EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_LINT_FAILED = 2
EXIT_CONFIG_ERROR = 3
EXIT_INTERNAL_ERROR = 4

STAGE_INIT = "init"
STAGE_CHECK = "check"


@dataclass(frozen=True)
class VersionDescriptor:
    """
    One backend distribution.

    provider is the unique binary-provider handle used for de-duplication;
    bin_root is the distribution's binary root (executables under bin_root/bin).
    """

    provider: str
    bin_root: Path
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.provider


@dataclass(frozen=True)
class VersionSet:
    """Ordered backend versions, unique on provider, in first-occurrence order."""

    members: Tuple[VersionDescriptor, ...] = ()

    def __iter__(self) -> Iterator[VersionDescriptor]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __getitem__(self, index: int) -> VersionDescriptor:
        return self.members[index]

    @property
    def providers(self) -> List[str]:
        return [d.provider for d in self.members]


@dataclass(frozen=True)
class RunOutcome:
    """Result of one Check Runner invocation, attributed to exactly one version."""

    descriptor: VersionDescriptor
    passed: bool
    exit_code: int
    stage: str = STAGE_CHECK
    version_string: str = ""


@dataclass(frozen=True)
class LoopResult:
    """Outcomes of the compatibility loop in the order they ran."""

    outcomes: Tuple[RunOutcome, ...] = ()

    @property
    def passed(self) -> bool:
        return all(o.passed for o in self.outcomes)

    @property
    def failure(self) -> Optional[RunOutcome]:
        for o in self.outcomes:
            if not o.passed:
                return o
        return None

    @property
    def versions_tested(self) -> int:
        return len(self.outcomes)


@dataclass(frozen=True)
class LintResult:
    passed: bool
    exit_code: int


@dataclass(frozen=True)
class HarnessResult:
    """Overall result of a harness run. lint is None when the lint gate was not reached or skipped."""

    loop: LoopResult = field(default_factory=LoopResult)
    lint: Optional[LintResult] = None

    @property
    def passed(self) -> bool:
        if not self.loop.passed:
            return False
        return self.lint is None or self.lint.passed

    @property
    def exit_code(self) -> int:
        if not self.loop.passed:
            return EXIT_CHECK_FAILED
        if self.lint is not None and not self.lint.passed:
            return EXIT_LINT_FAILED
        return EXIT_OK
