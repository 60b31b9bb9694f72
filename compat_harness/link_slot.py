"""
LinkSlot: the single reusable path that points at the backend version under test.

At most one target exists at any time. linked() refuses an occupied slot with
LinkCollision and removes the link on every exit path.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .core.errors import HarnessError, LinkCollision

logger = logging.getLogger(__name__)


class LinkSlot:
    """A fixed path that is either absent or a symlink to one backend's bin root."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"LinkSlot({str(self.path)!r})"

    @property
    def occupied(self) -> bool:
        # lexists: a dangling symlink still occupies the slot
        return os.path.lexists(self.path)

    @property
    def target(self) -> Path | None:
        if not self.path.is_symlink():
            return None
        return Path(os.readlink(self.path))

    @contextmanager
    def linked(self, target: Path) -> Iterator[Path]:
        """Point the slot at target for the duration of the block."""
        target = Path(target).absolute()
        if self.occupied:
            raise LinkCollision(str(self.path), str(target))
        os.symlink(str(target), str(self.path), target_is_directory=True)
        logger.debug("Linked %s -> %s", self.path, target)
        try:
            yield self.path
        finally:
            self._release()

    def _release(self) -> None:
        if self.path.is_symlink():
            os.unlink(self.path)
            logger.debug("Unlinked %s", self.path)
        elif self.occupied:
            # Leave whatever replaced the link for the operator to inspect.
            raise HarnessError(f"Link slot {self.path} was replaced by a non-link; not removing it")
        else:
            logger.warning("Link slot %s vanished before release", self.path)


@contextmanager
def temporary_link_slot(name: str) -> Iterator[LinkSlot]:
    """Yield a LinkSlot named `name` inside a fresh temporary directory; remove the directory afterwards."""
    parent = tempfile.mkdtemp(prefix="compat-harness-")
    slot = LinkSlot(Path(parent) / name)
    try:
        yield slot
    finally:
        shutil.rmtree(parent, ignore_errors=True)
