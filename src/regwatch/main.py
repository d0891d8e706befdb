from __future__ import annotations

import json
import logging

import typer
import uvicorn

from regwatch.config import settings
from regwatch.timeline.service import build_timeline_service

cli = typer.Typer(help="Regwatch CLI (regulatory milestone timeline feed)")


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"Regwatch {settings.app.version}")


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload for local development"),
) -> None:
    """Run the Regwatch API server."""
    uvicorn.run(
        "regwatch.api.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir="src",
    )


@cli.command()
def show(
    compact: bool = typer.Option(False, help="Print JSON on a single line"),
) -> None:
    """Load the timeline once and print it as JSON."""
    logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
    result = build_timeline_service(settings.feeds).load_timeline()
    typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=None if compact else 2))
    if result.using_fallback:
        typer.echo(f"Using fallback data: {result.error}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
