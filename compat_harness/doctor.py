"""
Preflight checks: configured backend versions exist and the check/lint commands resolve.
Run: compat-harness doctor  (or python -m compat_harness doctor)
Exit: 0 all OK, 3 configuration, 4 missing executables.
"""
from __future__ import annotations

import os
import shutil
from typing import Optional

from .config import HarnessSettings
from .core.types import EXIT_CONFIG_ERROR, EXIT_INTERNAL_ERROR, EXIT_OK
from .environment import bin_dir
from .versions import resolve_version_set


def check_versions(settings: HarnessSettings) -> bool:
    """Return True if at least one version is configured (when required) and every bin root exists."""
    version_set = resolve_version_set(settings.versions)
    if len(version_set) == 0:
        if settings.require_versions:
            print("[FAIL] no backend versions configured")
            print("  Fix: add entries under `versions:` in config.yaml or set COMPAT_HARNESS_VERSIONS")
            return False
        print("[WARN] no backend versions configured (require_versions: false)")
        return True
    ok = True
    for d in version_set:
        if not d.bin_root.is_dir():
            print(f"[FAIL] {d.label}: bin root not found: {d.bin_root}")
            ok = False
    if ok:
        print(f"[OK] versions  {len(version_set)} distinct backend(s)")
    return ok


def check_backend_binaries(settings: HarnessSettings) -> bool:
    """Return True if each version ships the configured version executable."""
    exe = settings.backend.version_executable
    if not exe:
        print("[INFO] backend.version_executable not set; progress lines use version labels")
        return True
    ok = True
    for d in resolve_version_set(settings.versions):
        path = bin_dir(d.bin_root) / exe
        if not (path.is_file() and os.access(path, os.X_OK)):
            print(f"[FAIL] {d.label}: missing executable {path}")
            ok = False
    if ok:
        print(f"[OK] backend binaries  {exe}")
    return ok


def check_commands_configured(settings: HarnessSettings) -> bool:
    ok = True
    for key, cmd in (("check", settings.check.argv), ("lint", settings.lint.argv)):
        if not cmd:
            print(f"[FAIL] {key}.command is not configured")
            ok = False
    return ok


def check_commands(settings: HarnessSettings, path: Optional[str] = None) -> bool:
    """Return True if the configured check and lint executables are on PATH."""
    ok = True
    for key, cmd in (("check", settings.check.argv), ("lint", settings.lint.argv)):
        if not cmd:
            continue
        if shutil.which(cmd[0], path=path) is None:
            print(f"[FAIL] {key}: executable not found: {cmd[0]}")
            ok = False
            continue
        print(f"[OK] {key}  {' '.join(cmd)}")
    return ok


def run_checks(settings: HarnessSettings, path: Optional[str] = None) -> int:
    """Run all checks; return 0 OK, 3 configuration, 4 executables."""
    print("compat-harness doctor")
    print("-" * 40)
    if not check_versions(settings) or not check_commands_configured(settings):
        return EXIT_CONFIG_ERROR
    binaries_ok = check_backend_binaries(settings)
    commands_ok = check_commands(settings, path=path)
    if not (binaries_ok and commands_ok):
        return EXIT_INTERNAL_ERROR
    print("-" * 40)
    print("All checks passed.")
    return EXIT_OK
