"""
Preflight checks before a harness run.
Use: compat-harness doctor [--config PATH]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from compat_harness.cli import add_config_argument, settings_from_args
from compat_harness.core.types import EXIT_CONFIG_ERROR
from compat_harness.doctor import run_checks


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(prog="compat-harness doctor", description="Preflight checks.")
    add_config_argument(ap)
    args = ap.parse_args(argv)
    settings = settings_from_args(args)
    if settings is None:
        return EXIT_CONFIG_ERROR
    return run_checks(settings)
