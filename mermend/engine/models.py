"""Error type shared by render engine adapters."""

from __future__ import annotations


class RenderError(Exception):
    """A render call failed; ``detail`` carries the engine's own message."""

    def __init__(self, detail: str, engine: str = "unknown", cause: Exception | None = None) -> None:
        self.detail = detail
        self.engine = engine
        super().__init__(f"{engine} render failed: {detail}")
        if cause is not None:
            self.__cause__ = cause
