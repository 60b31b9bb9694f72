"""Allow python -m compat_harness <command>."""
from __future__ import annotations

from compat_harness.cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
