"""Abstract render engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mermend.config.models import EngineConfig
from mermend.context.models import ContextHandle


class RenderEngine(ABC):
    """Opaque, fallible diagram renderer.

    Adapters turn a diagram source into SVG markup inside the scratch
    target named by ``handle``, raising RenderError on any failure.
    Configuration is fixed at construction so several engines with
    different settings can coexist.
    """

    name = "engine"

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    @abstractmethod
    async def render(self, handle: ContextHandle, source: str) -> str:
        """Render ``source`` and return the SVG document as text."""
        ...
