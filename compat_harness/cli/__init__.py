"""
CLI subcommands. Each module exposes main(argv) -> int and is dispatched by cli.main.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from compat_harness.config import HarnessSettings, get_config, load_settings
from compat_harness.core.errors import ConfigurationError


def add_config_argument(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--config",
        default=None,
        help="Path to config YAML (default: $COMPAT_HARNESS_CONFIG or ./config.yaml)",
    )


def settings_from_args(args: argparse.Namespace) -> Optional[HarnessSettings]:
    """Load settings; print the error and return None on configuration problems."""
    try:
        return load_settings(get_config(args.config))
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return None
