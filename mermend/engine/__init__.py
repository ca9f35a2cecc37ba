"""Render engine adapters."""

from mermend.config.models import EngineConfig
from mermend.engine.base import RenderEngine
from mermend.engine.kroki import KrokiEngine
from mermend.engine.mmdc import MermaidCLIEngine
from mermend.engine.models import RenderError

_ENGINE_MAP: dict[str, type[RenderEngine]] = {
    "mmdc": MermaidCLIEngine,
    "kroki": KrokiEngine,
}


def create_engine(config: EngineConfig) -> RenderEngine:
    """Create a render engine from config.provider."""
    cls = _ENGINE_MAP.get(config.provider)
    if cls is None:
        raise ValueError(
            f"Unsupported render engine: {config.provider!r}. "
            f"Supported: {', '.join(_ENGINE_MAP)}"
        )
    return cls(config)


__all__ = [
    "EngineConfig",
    "KrokiEngine",
    "MermaidCLIEngine",
    "RenderEngine",
    "RenderError",
    "create_engine",
]
