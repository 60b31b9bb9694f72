"""
Top-level CLI dispatcher: compat-harness [-v] [--config PATH] <command> [args...].
All commands dispatch to package CLI modules.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from compat_harness import __version__

_EPILOG = """\
exit codes:
  0  every backend version passed and lint is clean
  1  a backend version's checks failed (remaining versions skipped)
  2  lint gate failed
  3  configuration error
  4  internal harness error
"""

_COMMANDS = {
    "check": "Run checks per backend version, then the lint gate",
    "lint": "Run the lint gate only",
    "versions": "List the resolved backend versions",
    "wrap": "Install the release wrapper with a default backend",
    "doctor": "Preflight checks",
}


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="compat-harness",
        description="Multi-version backend compatibility harness",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--config", default=None, help="config YAML passed to the command")
    subparsers = parser.add_subparsers(dest="command", help="command")
    for name, help_text in _COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if args.config:
        rest = ["--config", args.config] + rest

    cmd = args.command
    if cmd == "check":
        from compat_harness.cli import check as mod

        return mod.main(rest)
    if cmd == "lint":
        from compat_harness.cli import lint as mod

        return mod.main(rest)
    if cmd == "versions":
        from compat_harness.cli import versions as mod

        return mod.main(rest)
    if cmd == "wrap":
        from compat_harness.cli import wrap as mod

        return mod.main(rest)
    if cmd == "doctor":
        from compat_harness.cli import doctor as mod

        return mod.main(rest)

    parser.print_help()
    return 0
