"""
Print the resolved backend version set.
Use: compat-harness versions [--config PATH] [--query]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from compat_harness.cli import add_config_argument, settings_from_args
from compat_harness.core.errors import HarnessError
from compat_harness.core.types import EXIT_CONFIG_ERROR, EXIT_OK
from compat_harness.environment import bin_dir, bind_environment
from compat_harness.process import SubprocessExecutor
from compat_harness.versions import query_version, resolve_version_set


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(
        prog="compat-harness versions", description="List backend versions in test order (duplicates removed)."
    )
    add_config_argument(ap)
    ap.add_argument("--query", action="store_true", help="Also print each backend's version string.")
    args = ap.parse_args(argv)
    settings = settings_from_args(args)
    if settings is None:
        return EXIT_CONFIG_ERROR

    version_set = resolve_version_set(settings.versions)
    if len(version_set) == 0:
        print("(no backend versions configured)")
        return EXIT_CONFIG_ERROR if settings.require_versions else EXIT_OK

    exe = settings.backend.version_executable
    executor = SubprocessExecutor()
    for i, d in enumerate(version_set, start=1):
        line = f"{i:>2}. {d.label:<24} {d.bin_root}"
        if args.query and exe:
            # Query through the real bin root; no link slot needed for a read-only query.
            env = bind_environment(d.bin_root, settings)
            try:
                line += f"  [{query_version(bin_dir(d.bin_root), exe, settings.backend.version_flag, env, executor)}]"
            except HarnessError as e:
                line += f"  [error: {e}]"
        print(line)
    return EXIT_OK
