"""Context manager interface and scoped acquisition."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

from mermend.context.models import ContextHandle

logger = logging.getLogger(__name__)


@runtime_checkable
class ContextManager(Protocol):
    """Allocates and destroys scratch targets for render attempts."""

    def acquire(self) -> ContextHandle: ...

    def release(self, handle: ContextHandle) -> None: ...

    def live_count(self) -> int: ...


@contextmanager
def scoped(manager: ContextManager) -> Iterator[ContextHandle]:
    """Acquire a context and release it exactly once, whatever happens in the block.

    Covers normal exit, exceptions and task cancellation alike. A failing
    ``release`` is logged rather than raised so it cannot replace the
    block's own result or exception. Errors from ``acquire`` propagate.
    """
    handle = manager.acquire()
    logger.debug("Acquired render context %s", handle.id)
    try:
        yield handle
    finally:
        try:
            manager.release(handle)
        except Exception:
            logger.exception("Failed to release render context %s", handle.id)
        else:
            logger.debug("Released render context %s", handle.id)
