"""
Install-time release wrapper: make the program default to one backend.
Use: compat-harness wrap [--config PATH] [--program PATH] [--default-backend PATH]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from compat_harness.cli import add_config_argument, settings_from_args
from compat_harness.core.errors import ConfigurationError, HarnessError
from compat_harness.core.types import EXIT_CONFIG_ERROR, EXIT_INTERNAL_ERROR, EXIT_OK
from compat_harness.pipeline import run_release_wrapper


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(
        prog="compat-harness wrap",
        description="Wrap the installed program so it uses the release's default backend.",
    )
    add_config_argument(ap)
    ap.add_argument("--program", default=None, help="Installed program (default: release.program)")
    ap.add_argument(
        "--default-backend",
        default=None,
        help="Backend bin root baked in as default (default: release.default_backend)",
    )
    args = ap.parse_args(argv)
    settings = settings_from_args(args)
    if settings is None:
        return EXIT_CONFIG_ERROR
    try:
        wrapped = run_release_wrapper(
            settings,
            program=Path(args.program) if args.program else None,
            default_backend=Path(args.default_backend) if args.default_backend else None,
        )
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except HarnessError as e:
        print(f"wrap failed: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    print(f"Wrapped program; original kept at {wrapped}")
    return EXIT_OK
