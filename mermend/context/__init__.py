"""Ephemeral render contexts — scratch targets with guaranteed release."""

from mermend.config.models import RenderSettings
from mermend.context.base import ContextManager, scoped
from mermend.context.memory import InMemoryContextRegistry
from mermend.context.models import ContextError, ContextHandle
from mermend.context.scratch_dir import ScratchDirContextPool


def create_context_manager(settings: RenderSettings) -> ContextManager:
    """Build the context backend named by settings.scratch."""
    if settings.scratch == "memory":
        return InMemoryContextRegistry()
    if settings.scratch == "filesystem":
        return ScratchDirContextPool(settings.scratch_dir)
    raise ValueError(
        f"Unsupported scratch backend: {settings.scratch!r}. Supported: memory, filesystem"
    )


__all__ = [
    "ContextError",
    "ContextHandle",
    "ContextManager",
    "InMemoryContextRegistry",
    "ScratchDirContextPool",
    "create_context_manager",
    "scoped",
]
