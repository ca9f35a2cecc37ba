"""Shared test fixtures for mermend."""

from __future__ import annotations

import asyncio
import logging

import pytest

from mermend.config.models import EngineConfig, MermendConfig, RenderSettings
from mermend.context.memory import InMemoryContextRegistry
from mermend.context.models import ContextHandle
from mermend.engine.base import RenderEngine
from mermend.engine.models import RenderError

SVG_OK = "<svg>ok</svg>"


class ScriptedEngine(RenderEngine):
    """Returns (or raises) the scripted responses in call order.

    Once the script runs out every call succeeds with SVG_OK. Records the
    handle id and source of each call, plus how many contexts were live.
    """

    name = "scripted"

    def __init__(self, responses=None, contexts: InMemoryContextRegistry | None = None) -> None:
        super().__init__(EngineConfig())
        self._responses = list(responses or [])
        self._contexts = contexts
        self.calls: list[tuple[str, str]] = []
        self.live_during_calls: list[int] = []

    async def render(self, handle: ContextHandle, source: str) -> str:
        self.calls.append((handle.id, source))
        if self._contexts is not None:
            self.live_during_calls.append(self._contexts.live_count())
        response = self._responses.pop(0) if self._responses else SVG_OK
        if isinstance(response, BaseException):
            raise response
        return response


class GatedEngine(RenderEngine):
    """Blocks each render until the test releases the gate for that source."""

    name = "gated"

    def __init__(self) -> None:
        super().__init__(EngineConfig())
        self.gates: dict[str, asyncio.Event] = {}
        self.started: dict[str, asyncio.Event] = {}

    def gate(self, source: str) -> asyncio.Event:
        return self.gates.setdefault(source, asyncio.Event())

    def started_event(self, source: str) -> asyncio.Event:
        return self.started.setdefault(source, asyncio.Event())

    async def render(self, handle: ContextHandle, source: str) -> str:
        self.started_event(source).set()
        await self.gate(source).wait()
        return f"<svg>{source}</svg>"


def failing(detail: str = "Parse error on line 2") -> RenderError:
    return RenderError(detail, engine="scripted")


@pytest.fixture
def registry():
    return InMemoryContextRegistry()


@pytest.fixture
def settings():
    return RenderSettings()


@pytest.fixture
def unprimed_settings():
    return RenderSettings(prime_engine=False)


@pytest.fixture
def sample_config():
    return MermendConfig()


@pytest.fixture(autouse=True)
def _restore_mermend_logger():
    """CLI invocations reconfigure the package logger; undo that between tests."""
    logger = logging.getLogger("mermend")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("MERMEND_CONFIG", raising=False)
