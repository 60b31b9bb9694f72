"""
Fake backend trees and settings builders for tests. No real backend installs.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

from compat_harness.config import BackendSettings, CommandSettings, HarnessSettings, ReleaseSettings
from compat_harness.core.types import VersionDescriptor

VARIABLE = "FAKE_BACKEND_PACKAGE"
CHECK_CMD = ("run-checks", "--all")
LINT_CMD = ("run-lint", "--strict")
INIT_CMD = ("backend-init",)


def make_backend(root: Path, name: str, version: Optional[str] = None) -> VersionDescriptor:
    """Create <root>/<name>/bin with a POSIX `backend` script printing its version."""
    bin_root = root / name
    (bin_root / "bin").mkdir(parents=True, exist_ok=True)
    script = bin_root / "bin" / "backend"
    script.write_text(f"#!/bin/sh\necho 'backend ({name}) {version or name}'\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return VersionDescriptor(provider=name, bin_root=bin_root)


def make_settings(
    versions: Iterable[VersionDescriptor] = (),
    *,
    check: Sequence[str] = CHECK_CMD,
    lint: Sequence[str] = LINT_CMD,
    init: Sequence[Sequence[str]] = (),
    version_executable: Optional[str] = "backend",
    require_versions: bool = True,
    env: Optional[Dict[str, str]] = None,
    slot_name: str = "backend",
    cwd: Optional[Path] = None,
) -> HarnessSettings:
    return HarnessSettings(
        backend=BackendSettings(
            variable=VARIABLE,
            slot_name=slot_name,
            version_executable=version_executable,
            init=tuple(tuple(c) for c in init),
        ),
        versions=tuple(versions),
        require_versions=require_versions,
        check=CommandSettings(argv=tuple(check), cwd=cwd or Path(os.getcwd())),
        lint=CommandSettings(argv=tuple(lint), cwd=cwd or Path(os.getcwd())),
        env=dict(env or {}),
        release=ReleaseSettings(),
    )
