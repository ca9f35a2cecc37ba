"""Tiered render controller with guaranteed fallback and context cleanup."""

from __future__ import annotations

import logging

from mermend.config.models import RenderSettings
from mermend.context.base import ContextManager, scoped
from mermend.context.models import ContextHandle
from mermend.engine.base import RenderEngine
from mermend.engine.models import RenderError
from mermend.normalizer import normalize
from mermend.render.models import (
    ErrorKind,
    RenderAttempt,
    RenderOutcome,
    RenderStatus,
    RenderTier,
)

logger = logging.getLogger(__name__)

PRIMING_DIAGRAM = "graph TD\n    A[Start] --> B[End]"
ERROR_DIAGRAM = "graph TD\n    A[Error] --> B[Could Not Render]\n    B --> C[Please Try Again]"
GENERIC_SUBJECT = "Topic"

SIMPLIFIED_MESSAGE = (
    "Could not render the requested diagram. Showing a simplified version instead."
)
SYNTAX_ERROR_MESSAGE = "Syntax error in diagram code. Please check for proper syntax."
UNDEFINED_REFERENCE_MESSAGE = "Error: Diagram references undefined elements."
GENERIC_FAILURE_MESSAGE = "Failed to render diagram. The diagram code might be invalid."
ENGINE_UNAVAILABLE_MESSAGE = "The diagram engine is unavailable."

_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.syntax_error: SYNTAX_ERROR_MESSAGE,
    ErrorKind.undefined_reference: UNDEFINED_REFERENCE_MESSAGE,
    ErrorKind.generic_render_error: GENERIC_FAILURE_MESSAGE,
    ErrorKind.engine_unavailable: ENGINE_UNAVAILABLE_MESSAGE,
}


def build_placeholder(source: str, topic_keywords: list[str]) -> str:
    """Deterministic three-node diagram labelled with the first topic found in source."""
    subject = next((kw for kw in topic_keywords if kw and kw in source), GENERIC_SUBJECT)
    return f"graph TD\n    A[{subject}] --> B[Process]\n    B --> C[Result]"


def classify_error(detail: str | None, settings: RenderSettings) -> ErrorKind:
    """Map a primary-attempt failure detail onto an ErrorKind by substring."""
    detail = detail or ""
    if settings.syntax_error_marker and settings.syntax_error_marker in detail:
        return ErrorKind.syntax_error
    if settings.undefined_reference_marker and settings.undefined_reference_marker in detail:
        return ErrorKind.undefined_reference
    return ErrorKind.generic_render_error


def message_for(kind: ErrorKind) -> str:
    return _MESSAGES[kind]


class RenderController:
    """Runs one render request through up to three escalating attempts.

    Tier 1 renders the normalized source. Tier 2 renders a simplified
    placeholder and reports the result as degraded. Tier 3 renders a static
    error diagram. Only tier 1's failure is classified. An optional canary
    render precedes tier 1 in the same context; if it fails the engine is
    treated as unavailable and no further attempts are made.

    Every context acquired for an attempt is released before ``render``
    returns. Engine failures and context failures become failed attempts
    and never escape as exceptions; only cancellation propagates.
    """

    def __init__(
        self,
        engine: RenderEngine,
        contexts: ContextManager,
        settings: RenderSettings | None = None,
    ) -> None:
        self._engine = engine
        self._contexts = contexts
        self._settings = settings or RenderSettings()

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    async def render(self, source: str | None) -> RenderOutcome:
        normalized = normalize(source)
        attempts: list[RenderAttempt] = []

        primary = await self._run_tier(
            RenderTier.primary, normalized, prime=self._settings.prime_engine
        )
        if primary is None:
            return RenderOutcome(
                status=RenderStatus.failed,
                message=ENGINE_UNAVAILABLE_MESSAGE,
                classification=ErrorKind.engine_unavailable,
            )
        attempts.append(primary)
        if primary.succeeded:
            return RenderOutcome(
                status=RenderStatus.success,
                artifact=primary.artifact,
                attempts=tuple(attempts),
            )

        placeholder = build_placeholder(normalized, self._settings.topic_keywords)
        simplified = await self._run_tier(RenderTier.simplified, placeholder)
        attempts.append(simplified)
        if simplified.succeeded:
            return RenderOutcome(
                status=RenderStatus.degraded,
                artifact=simplified.artifact,
                message=SIMPLIFIED_MESSAGE,
                attempts=tuple(attempts),
            )

        kind = classify_error(primary.error, self._settings)
        static = await self._run_tier(RenderTier.static_error, ERROR_DIAGRAM)
        attempts.append(static)
        if static.succeeded:
            return RenderOutcome(
                status=RenderStatus.failed,
                artifact=static.artifact,
                message=message_for(kind),
                classification=kind,
                attempts=tuple(attempts),
            )

        logger.error("All render tiers failed (%s): %s", kind.value, primary.error)
        return RenderOutcome(
            status=RenderStatus.failed,
            message=GENERIC_FAILURE_MESSAGE,
            classification=kind,
            attempts=tuple(attempts),
        )

    async def _run_tier(
        self, tier: RenderTier, source: str, prime: bool = False
    ) -> RenderAttempt | None:
        """Run one tier inside its own context.

        Returns None only when ``prime`` is set and the canary render fails.
        A context that cannot be acquired counts as a failed attempt.
        """
        try:
            with scoped(self._contexts) as handle:
                if prime:
                    _, canary_error = await self._invoke(handle, PRIMING_DIAGRAM)
                    if canary_error is not None:
                        logger.error("Priming render failed, engine unavailable: %s", canary_error)
                        return None
                return await self._attempt(handle, tier, source)
        except Exception as e:
            logger.error("Tier %d could not get a render context: %s", int(tier), e)
            return RenderAttempt(
                tier=tier,
                source_used=source,
                error=f"render context unavailable: {str(e) or type(e).__name__}",
            )

    async def _attempt(
        self, handle: ContextHandle, tier: RenderTier, source: str
    ) -> RenderAttempt:
        artifact, error = await self._invoke(handle, source)
        if error is not None:
            logger.warning("Tier %d render failed in %s: %s", int(tier), handle.id, error)
        return RenderAttempt(tier=tier, source_used=source, artifact=artifact, error=error)

    async def _invoke(
        self, handle: ContextHandle, source: str
    ) -> tuple[str | None, str | None]:
        """Call the engine once, returning (artifact, None) or (None, detail)."""
        try:
            return await self._engine.render(handle, source), None
        except RenderError as e:
            return None, e.detail
        except Exception as e:
            logger.debug("Engine raised %s", type(e).__name__, exc_info=True)
            return None, str(e) or type(e).__name__
