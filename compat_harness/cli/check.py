"""
Run the tool's self-check suite once per backend version, then the lint gate.
Use: compat-harness check [--config PATH] [--no-lint]
Exit: 0 pass, 1 a backend version failed, 2 lint failed, 3 configuration, 4 internal.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from compat_harness.cli import add_config_argument, settings_from_args
from compat_harness.core.errors import ConfigurationError, HarnessError
from compat_harness.core.types import EXIT_CONFIG_ERROR, EXIT_INTERNAL_ERROR, HarnessResult
from compat_harness.pipeline import run_harness


def _report(result: HarnessResult) -> None:
    failure = result.loop.failure
    if failure is not None:
        print(
            f"FAIL: {failure.descriptor.label} ({failure.version_string or failure.descriptor.provider}) "
            f"{failure.stage} exited with {failure.exit_code}; "
            f"{result.loop.versions_tested} version(s) run, remaining versions skipped",
            file=sys.stderr,
        )
        return
    print(f"Compatibility checks passed for {result.loop.versions_tested} backend version(s)")
    if result.lint is None:
        return
    if result.lint.passed:
        print("Lint gate passed")
    else:
        print(f"FAIL: lint gate exited with {result.lint.exit_code}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(
        prog="compat-harness check",
        description="Run the self-check suite against every configured backend version, then lint.",
    )
    add_config_argument(ap)
    ap.add_argument(
        "--no-lint",
        action="store_true",
        help="Only run the compatibility loop (when lint runs as its own phase).",
    )
    args = ap.parse_args(argv)
    settings = settings_from_args(args)
    if settings is None:
        return EXIT_CONFIG_ERROR
    try:
        result = run_harness(settings, lint=not args.no_lint)
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except HarnessError as e:
        print(f"harness error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    _report(result)
    return result.exit_code
