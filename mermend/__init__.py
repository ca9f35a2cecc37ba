"""Resilient diagram rendering: source repair plus tiered fallback."""

from mermend.config import MermendConfig, load_config
from mermend.context import create_context_manager
from mermend.engine import RenderEngine, RenderError, create_engine
from mermend.export import export_svg
from mermend.normalizer import normalize
from mermend.render import (
    ErrorKind,
    RenderController,
    RenderOutcome,
    RenderStatus,
    ResultProjector,
)


def build_controller(config: MermendConfig, engine: RenderEngine | None = None) -> RenderController:
    """Wire engine, context backend and settings from a loaded config."""
    return RenderController(
        engine or create_engine(config.engine),
        create_context_manager(config.render),
        config.render,
    )


__all__ = [
    "ErrorKind",
    "MermendConfig",
    "RenderController",
    "RenderEngine",
    "RenderError",
    "RenderOutcome",
    "RenderStatus",
    "ResultProjector",
    "build_controller",
    "export_svg",
    "load_config",
    "normalize",
]
