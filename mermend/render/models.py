"""Pydantic models for render requests and their outcomes."""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


class RenderTier(IntEnum):
    """Escalation level of a render attempt."""

    primary = 1
    simplified = 2
    static_error = 3


class RenderStatus(str, Enum):
    success = "success"
    degraded = "degraded"
    failed = "failed"


class ErrorKind(str, Enum):
    """Classification of the primary attempt's failure."""

    syntax_error = "syntax_error"
    undefined_reference = "undefined_reference"
    generic_render_error = "generic_render_error"
    engine_unavailable = "engine_unavailable"


class RenderAttempt(BaseModel):
    """Record of one engine invocation within a request."""

    model_config = ConfigDict(frozen=True)

    tier: RenderTier
    source_used: str
    artifact: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.artifact is not None


class RenderOutcome(BaseModel):
    """Final, immutable result of a render request."""

    model_config = ConfigDict(frozen=True)

    status: RenderStatus
    artifact: str | None = None
    message: str | None = None
    classification: ErrorKind | None = None
    attempts: tuple[RenderAttempt, ...] = Field(default_factory=tuple)

    @property
    def has_artifact(self) -> bool:
        return self.artifact is not None


class PublishedOutcome(BaseModel):
    """An outcome tagged with the request that produced it."""

    model_config = ConfigDict(frozen=True)

    request_id: int = Field(ge=1)
    outcome: RenderOutcome
