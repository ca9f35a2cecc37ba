"""mermaid-cli (mmdc) adapter running the renderer as a subprocess."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import tempfile
from pathlib import Path

from mermend.config.models import EngineConfig
from mermend.context.models import ContextHandle
from mermend.engine.base import RenderEngine
from mermend.engine.models import RenderError

logger = logging.getLogger(__name__)


class MermaidCLIEngine(RenderEngine):
    """Renders through ``mmdc -i in.mmd -o out.svg -c config.json``.

    Files are written into the handle's scratch directory when it has one,
    otherwise into a throwaway temp directory.
    """

    name = "mmdc"

    def __init__(self, config: EngineConfig) -> None:
        super().__init__(config)
        self._executable = config.mmdc_path

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    async def render(self, handle: ContextHandle, source: str) -> str:
        if handle.path:
            return await self._render_in(Path(handle.path), handle.id, source)
        with tempfile.TemporaryDirectory(prefix=f"{handle.id}-") as tmp_dir:
            return await self._render_in(Path(tmp_dir), handle.id, source)

    async def _render_in(self, workdir: Path, stem: str, source: str) -> str:
        input_path = workdir / f"{stem}.mmd"
        output_path = workdir / f"{stem}.svg"
        config_path = workdir / f"{stem}.config.json"
        input_path.write_text(source, encoding="utf-8")
        config_path.write_text(json.dumps(self.config.mermaid_config()), encoding="utf-8")

        cmd = [
            self._executable,
            "-i", str(input_path),
            "-o", str(output_path),
            "-c", str(config_path),
        ]
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RenderError(f"cannot start {self._executable}: {e}", self.name, e) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.config.timeout)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise RenderError(
                f"timed out after {self.config.timeout:g}s", self.name, e
            ) from e

        if proc.returncode != 0:
            detail = (stderr or stdout).decode("utf-8", errors="replace").strip()
            raise RenderError(detail or f"exit status {proc.returncode}", self.name)
        if not output_path.is_file():
            raise RenderError("mmdc did not produce output", self.name)

        logger.debug("mmdc rendered %s (%d bytes of source)", output_path.name, len(source))
        return output_path.read_text(encoding="utf-8")
