"""CLI entry point for mermend."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.panel import Panel
from rich.syntax import Syntax

from mermend import build_controller
from mermend.config import MermendConfig, load_config
from mermend.config.loader import DEFAULT_CONFIG_TEMPLATE
from mermend.export import export_svg
from mermend.logging_setup import configure_logging
from mermend.normalizer import normalize
from mermend.render import PublishedOutcome, RenderOutcome, RenderStatus, ResultProjector
from mermend.watch import DiagramWatcher

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mermend",
    help="Render diagram sources to SVG, repairing and falling back when they break.",
)

config_app = typer.Typer(help="Manage mermend configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MermendConfig | None = None

_STATUS_STYLE = {
    RenderStatus.success: "green",
    RenderStatus.degraded: "yellow",
    RenderStatus.failed: "red",
}


def _get_config() -> MermendConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mermend.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(code=2)
    configure_logging(_config.log_level, _config.log_format)


def _read_source(path: Path) -> str:
    if not path.is_file():
        rprint(f"[red]File not found:[/red] {path}")
        raise typer.Exit(code=2)
    return path.read_text(encoding="utf-8")


def _report(outcome: RenderOutcome, out_dir: Path) -> Path | None:
    """Print the outcome panel and export its artifact, if any."""
    style = _STATUS_STYLE[outcome.status]
    lines = [f"[bold {style}]{outcome.status.value}[/bold {style}]"]
    if outcome.message:
        lines.append(outcome.message)
    if outcome.classification:
        lines.append(f"[dim]Classification:[/dim] {outcome.classification.value}")
    lines.append(f"[dim]Attempts:[/dim]       {len(outcome.attempts)}")

    exported = export_svg(outcome, out_dir)
    lines.append(f"[dim]Output:[/dim]         {exported or 'none'}")
    rprint(Panel("\n".join(lines), title="Render", border_style=style))
    return exported


@app.command("normalize")
def normalize_cmd(
    path: Annotated[Path, typer.Argument(help="Diagram source file")],
) -> None:
    """Print the repaired source without rendering it."""
    rprint(Syntax(normalize(_read_source(path)), "text", line_numbers=False))


@app.command()
def render(
    path: Annotated[Path, typer.Argument(help="Diagram source file")],
    out: Annotated[
        Path | None, typer.Option("--out", "-o", help="Directory for the exported SVG")
    ] = None,
) -> None:
    """Render a diagram source once and export the resulting SVG."""
    cfg = _get_config()
    source = _read_source(path)
    out_dir = out or Path(cfg.export.output_dir)

    try:
        controller = build_controller(cfg)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(code=2)

    outcome = asyncio.run(controller.render(source))
    _report(outcome, out_dir)
    if outcome.status == RenderStatus.failed:
        raise typer.Exit(code=1)


def _log_submit_failure(future: concurrent.futures.Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Watch render failed: %s", exc, exc_info=exc)


async def _watch(path: Path, out_dir: Path, cfg: MermendConfig) -> None:
    loop = asyncio.get_running_loop()
    controller = build_controller(cfg)

    def on_publish(published: PublishedOutcome) -> None:
        logger.info("Request %d finished", published.request_id)
        _report(published.outcome, out_dir)

    projector = ResultProjector(on_publish=on_publish)

    def on_change(target: Path) -> None:
        try:
            source = target.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read %s: %s", target, e)
            return
        future = asyncio.run_coroutine_threadsafe(projector.submit(controller, source), loop)
        future.add_done_callback(_log_submit_failure)

    watcher = DiagramWatcher(path, on_change, debounce_seconds=cfg.watch.debounce_seconds)
    watcher.start()
    try:
        await projector.submit(controller, path.read_text(encoding="utf-8"))
        while True:
            await asyncio.sleep(3600)
    finally:
        watcher.stop()


@app.command()
def watch(
    path: Annotated[Path, typer.Argument(help="Diagram source file")],
    out: Annotated[
        Path | None, typer.Option("--out", "-o", help="Directory for exported SVGs")
    ] = None,
) -> None:
    """Re-render whenever the source changes; only the newest result is exported."""
    cfg = _get_config()
    _read_source(path)
    out_dir = out or Path(cfg.export.output_dir)
    rprint(f"[bold]Watching[/bold] {path} (Ctrl+C to stop)")
    try:
        asyncio.run(_watch(path, out_dir, cfg))
    except KeyboardInterrupt:
        rprint("[dim]Stopped.[/dim]")


@config_app.command("init")
def config_init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing file")] = False,
) -> None:
    """Write a default mermend.yaml to the current directory."""
    target = Path("mermend.yaml")
    if target.exists() and not force:
        rprint("[yellow]mermend.yaml already exists. Use --force to overwrite.[/yellow]")
        raise typer.Exit(code=1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created {target}[/green]")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration as YAML."""
    cfg = _get_config()
    rendered = yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False)
    rprint(Syntax(rendered, "yaml"))


if __name__ == "__main__":
    app()
