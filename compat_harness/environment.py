"""
Environment binding for one check run.

The selection variable always names the link slot, never a descriptor's install
path, so switching versions only re-points the symlink. The slot's bin directory
is prepended to PATH so backend helpers (including the init step) resolve to the
linked version before any system-wide install.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from .config import HarnessSettings

BoundEnvironment = Dict[str, str]


def bin_dir(root: Path) -> Path:
    return root / "bin"


def bind_environment(
    slot_path: Path,
    settings: HarnessSettings,
    base_env: Optional[Mapping[str, str]] = None,
) -> BoundEnvironment:
    """
    Return a fresh environment mapping for one Check Runner call.

    base_env defaults to os.environ and is never mutated.
    """
    env: BoundEnvironment = dict(os.environ if base_env is None else base_env)
    env.update(settings.env)
    search = str(bin_dir(slot_path))
    existing = env.get("PATH", "")
    env["PATH"] = search + os.pathsep + existing if existing else search
    env[settings.backend.variable] = str(slot_path)
    return env
