"""Filesystem-backed contexts: one scratch directory per render attempt."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from mermend.context.models import ContextError, ContextHandle, new_context_id

logger = logging.getLogger(__name__)


class ScratchDirContextPool:
    """Creates an isolated directory per handle and removes it on release.

    When no root is given a private temp directory is created lazily and
    shared by all handles of this pool.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root else None
        self._live: dict[str, ContextHandle] = {}

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="mermend-"))
        return self._root

    def acquire(self) -> ContextHandle:
        context_id = new_context_id()
        directory = self.root / context_id
        directory.mkdir(parents=True, exist_ok=False)
        handle = ContextHandle(id=context_id, path=str(directory))
        self._live[context_id] = handle
        return handle

    def release(self, handle: ContextHandle) -> None:
        if self._live.pop(handle.id, None) is None:
            raise ContextError(handle.id, "not live (never acquired or already released)")
        if handle.path:
            try:
                shutil.rmtree(handle.path)
            except FileNotFoundError:
                logger.warning("Scratch directory already gone: %s", handle.path)

    def live_count(self) -> int:
        return len(self._live)
