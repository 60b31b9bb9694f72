"""
Run the static lint gate on its own.
Use: compat-harness lint [--config PATH]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from compat_harness.cli import add_config_argument, settings_from_args
from compat_harness.core.errors import ConfigurationError, HarnessError
from compat_harness.core.types import EXIT_CONFIG_ERROR, EXIT_INTERNAL_ERROR, EXIT_LINT_FAILED, EXIT_OK
from compat_harness.pipeline import run_lint_only


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(prog="compat-harness lint", description="Run the strict lint gate.")
    add_config_argument(ap)
    args = ap.parse_args(argv)
    settings = settings_from_args(args)
    if settings is None:
        return EXIT_CONFIG_ERROR
    try:
        result = run_lint_only(settings)
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except HarnessError as e:
        print(f"harness error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    if not result.passed:
        print(f"FAIL: lint gate exited with {result.exit_code}", file=sys.stderr)
        return EXIT_LINT_FAILED
    print("Lint gate passed")
    return EXIT_OK
