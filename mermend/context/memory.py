"""In-memory context registry for hosts without a scratch surface."""

from __future__ import annotations

from mermend.context.models import ContextError, ContextHandle


class InMemoryContextRegistry:
    """Tracks live handles in a dict; nothing is allocated outside the process."""

    def __init__(self) -> None:
        self._live: dict[str, ContextHandle] = {}
        self.acquired_total = 0
        self.released_total = 0

    def acquire(self) -> ContextHandle:
        handle = ContextHandle()
        self._live[handle.id] = handle
        self.acquired_total += 1
        return handle

    def release(self, handle: ContextHandle) -> None:
        if self._live.pop(handle.id, None) is None:
            raise ContextError(handle.id, "not live (never acquired or already released)")
        self.released_total += 1

    def live_count(self) -> int:
        return len(self._live)

    def live_ids(self) -> set[str]:
        return set(self._live)
