"""
Release wrapper: replace an installed program with a shell script that launches it
with a default backend selected.

The original program is kept next to the script as .<name>-wrapped. Defaults
only apply when the variable is unset at launch, so an operator can still point
the program at another backend.
"""
from __future__ import annotations

import logging
import os
import re
import shlex
import stat
from pathlib import Path
from typing import Mapping

from ._version import __version__
from .core.errors import ConfigurationError, HarnessError

logger = logging.getLogger(__name__)

_VAR_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MARKER = "# Generated by compat-harness"


def wrapped_path(program: Path) -> Path:
    return program.parent / f".{program.name}-wrapped"


def render_wrapper(wrapped: Path, defaults: Mapping[str, str]) -> str:
    """Return the POSIX sh source of a wrapper around `wrapped`."""
    lines = [
        "#!/bin/sh",
        f"{_MARKER} {__version__}",
    ]
    for name, value in defaults.items():
        if not _VAR_NAME.match(name):
            raise ConfigurationError(f"Invalid environment variable name: {name!r}")
        lines.append(f'if [ -z "${{{name}+x}}" ]; then')
        lines.append(f"  {name}={shlex.quote(str(value))}")
        lines.append(f"  export {name}")
        lines.append("fi")
    lines.append(f'exec {shlex.quote(str(wrapped))} "$@"')
    return "\n".join(lines) + "\n"


def is_generated_wrapper(program: Path) -> bool:
    """True when `program` is a script written by write_wrapper."""
    try:
        with open(program, "rb") as f:
            head = f.read(256)
    except OSError:
        return False
    return _MARKER.encode("utf-8") in head


def write_wrapper(program: Path, defaults: Mapping[str, str]) -> Path:
    """
    Wrap `program` in place and return the path of the wrapped original.

    Re-wrapping our own script rewrites the script only. A program installed
    over an earlier wrapper replaces the previously wrapped original.
    """
    program = Path(program).absolute()
    wrapped = wrapped_path(program)
    if program.is_file() and not is_generated_wrapper(program):
        if wrapped.exists():
            logger.info("Replacing stale %s with newly installed %s", wrapped, program)
        os.replace(program, wrapped)
        logger.debug("Moved %s -> %s", program, wrapped)
    elif wrapped.exists():
        logger.debug("%s already wrapped; rewriting script", program)
    elif program.is_file():
        raise HarnessError(f"{program} is a wrapper but {wrapped} is missing")
    else:
        raise HarnessError(f"Program to wrap not found: {program}")

    program.write_text(render_wrapper(wrapped, defaults), encoding="utf-8")
    mode = wrapped.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
    os.chmod(program, stat.S_IMODE(mode) | stat.S_IRUSR)
    return wrapped
