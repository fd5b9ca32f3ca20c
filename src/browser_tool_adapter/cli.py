"""Command line interface for browser-tool-adapter."""

from __future__ import annotations

import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import AdapterConfig, load_config
from .diagnostics import configure_logging
from .factory import build_handlers
from .registry import ToolRegistry
from .server import build_server, run_stdio

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Browser Tool Adapter entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("browser-tool-adapter"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def tools() -> None:
    """Show the tools advertised to clients."""

    table = Table(title="Available tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required")
    for tool in ToolRegistry().list():
        required = ", ".join(tool.input_schema.get("required", []))
        table.add_row(tool.name, tool.description, required or "-")
    Console().print(table)


@app.command()
def serve(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    debug: Annotated[
        Optional[bool],
        typer.Option("--debug/--no-debug", help="Mirror every log line to stderr."),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Directory for the daily log file."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", help="Model identifier used by the engine."),
    ] = None,
    llm_provider: Annotated[
        Optional[str],
        typer.Option("--llm-provider", help="LLM provider to use."),
    ] = None,
) -> None:
    """Serve the browser tools over MCP on stdio."""

    overrides: dict[str, Any] = {}
    if debug is not None:
        overrides["debug"] = debug
    if log_dir is not None:
        overrides["log_dir"] = str(log_dir)
    if headless is not None or model is not None:
        overrides.setdefault("engine", {})
        if headless is not None:
            overrides["engine"]["headless"] = headless
        if model is not None:
            overrides["engine"]["model_name"] = model
    if llm_provider:
        overrides["llm"] = {"provider": llm_provider}

    try:
        config = load_config(config_path, env_file=env_file, **overrides)
    except Exception as exc:
        LOGGER.error("Configuration error: %s", exc)
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    log_path = configure_logging(config.log_dir, debug=config.debug, name=config.server_name)
    LOGGER.info("Logging to %s", log_path)

    try:
        asyncio.run(_serve(config))
    except Exception as exc:
        LOGGER.error("Server error: %s", exc)
        typer.echo(f"Server error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


async def _serve(config: AdapterConfig) -> None:
    handlers, manager = build_handlers(config)
    server = build_server(handlers, name=config.server_name)
    try:
        await run_stdio(server)
    finally:
        await manager.shutdown()


if __name__ == "__main__":
    app()
