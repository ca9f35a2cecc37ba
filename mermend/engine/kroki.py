"""Kroki adapter rendering through the HTTP API via httpx."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from mermend.config.models import EngineConfig
from mermend.context.models import ContextHandle
from mermend.engine.base import RenderEngine
from mermend.engine.models import RenderError

logger = logging.getLogger(__name__)


def _validate_base_url(url: str) -> str:
    """Reject non-http(s) schemes and header injection in the base URL."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Kroki base_url must be http(s), got {parsed.scheme!r}")
    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in base_url")
    return url


class KrokiEngine(RenderEngine):
    """POSTs the source to ``<kroki_url>/mermaid/svg``.

    Kroki is stateless so the handle only tags the request in logs.
    """

    name = "kroki"

    def __init__(self, config: EngineConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(config)
        self._base_url = _validate_base_url(config.kroki_url.rstrip("/"))
        self._client = client

    async def render(self, handle: ContextHandle, source: str) -> str:
        payload = {
            "diagram_source": source,
            "diagram_options": {"theme": self.config.theme},
        }
        try:
            if self._client is not None:
                resp = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text.strip() or str(e)
            raise RenderError(detail, self.name, e) from e
        except httpx.HTTPError as e:
            raise RenderError(f"request failed: {e}", self.name, e) from e

        svg = resp.text
        if "<svg" not in svg:
            raise RenderError("response did not contain an SVG document", self.name)
        logger.debug("kroki rendered context %s", handle.id)
        return svg

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            f"{self._base_url}/mermaid/svg",
            json=payload,
            timeout=self.config.timeout,
        )
