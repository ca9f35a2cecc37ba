"""SVG export for rendered diagrams."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from mermend.render.models import RenderOutcome

logger = logging.getLogger(__name__)


def export_filename(now: datetime | None = None) -> str:
    """``diagram-<epoch-milliseconds>.svg``."""
    now = now or datetime.now(UTC)
    return f"diagram-{int(now.timestamp() * 1000)}.svg"


def export_svg(
    result: RenderOutcome | str | None,
    directory: str | Path,
    now: datetime | None = None,
) -> Path | None:
    """Write the artifact to a timestamped file. No-op when there is no artifact."""
    artifact = result.artifact if isinstance(result, RenderOutcome) else result
    if not artifact:
        return None

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(now)
    path.write_text(artifact, encoding="utf-8")
    logger.info("Exported diagram to %s", path)
    return path
