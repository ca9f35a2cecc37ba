"""Pydantic models for ephemeral render contexts."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def new_context_id() -> str:
    return f"mermend-{uuid.uuid4().hex[:12]}"


class ContextError(Exception):
    """Raised when a context is released twice or was never acquired."""

    def __init__(self, context_id: str, reason: str) -> None:
        self.context_id = context_id
        self.reason = reason
        super().__init__(f"context {context_id}: {reason}")


class ContextHandle(BaseModel):
    """Identifies one scratch render target owned by a single attempt."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_context_id, min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    path: str | None = None
