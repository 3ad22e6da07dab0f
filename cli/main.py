"""Home Access Center API CLI: entry-point for all operator commands.

Usage:
    hac --help

Command groups:
    serve     run the HTTP API under uvicorn
    page      run the extraction engine over saved or live portal pages
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from hacapi.config import settings

from cli.commands.page import page_app

app = typer.Typer(
    name="hac",
    help="Home Access Center API CLI.",
    no_args_is_help=True,
)
app.add_typer(page_app, name="page")


@app.callback()
def main(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="DEBUG, INFO, WARNING or ERROR."
    ),
) -> None:
    """Configure logging for every sub-command."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address."),
    port: Optional[int] = typer.Option(None, help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Serve the REST API."""
    import uvicorn

    host = host or settings.host
    port = port or settings.port
    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run(
        "hacapi.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
