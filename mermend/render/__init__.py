"""Tiered render controller and result projection."""

from mermend.render.controller import (
    ERROR_DIAGRAM,
    PRIMING_DIAGRAM,
    RenderController,
    build_placeholder,
    classify_error,
)
from mermend.render.models import (
    ErrorKind,
    PublishedOutcome,
    RenderAttempt,
    RenderOutcome,
    RenderStatus,
    RenderTier,
)
from mermend.render.projector import ResultProjector

__all__ = [
    "ERROR_DIAGRAM",
    "ErrorKind",
    "PRIMING_DIAGRAM",
    "PublishedOutcome",
    "RenderAttempt",
    "RenderController",
    "RenderOutcome",
    "RenderStatus",
    "RenderTier",
    "ResultProjector",
    "build_placeholder",
    "classify_error",
]
