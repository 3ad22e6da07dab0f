"""Page commands: run the extraction engine over saved or live portal pages."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from hacapi.config import settings
from hacapi.errors import HACError
from hacapi.scraper import extractor
from hacapi.scraper.auth import login
from hacapi.scraper.fetcher import fetch_assignments_for_six_weeks, fetch_page
from hacapi.scraper.models import PageType

page_app = typer.Typer(help="Extract data from portal pages.", no_args_is_help=True)

# kind -> (page it is read from, extractor, takes the ``short`` flag)
KINDS: dict[str, tuple[PageType, Callable[..., Any], bool]] = {
    "name": (PageType.NAME, extractor.extract_name, False),
    "info": (PageType.INFO, extractor.extract_info, False),
    "classes": (PageType.ASSIGNMENTS, extractor.extract_classes, True),
    "averages": (PageType.ASSIGNMENTS, extractor.extract_averages, True),
    "assignments": (PageType.ASSIGNMENTS, extractor.extract_assignments, True),
    "weightings": (PageType.ASSIGNMENTS, extractor.extract_weightings, True),
    "gradebook": (PageType.ASSIGNMENTS, extractor.extract_gradebook, True),
    "reportcard": (PageType.REPORT_CARD, extractor.extract_report_cards, False),
    "ipr": (PageType.PROGRESS, extractor.extract_progress, False),
    "transcript": (PageType.TRANSCRIPT, extractor.extract_transcript, False),
    "rank": (PageType.TRANSCRIPT, extractor.extract_rank, False),
}


def _resolve(kind: str) -> tuple[PageType, Callable[..., Any], bool]:
    try:
        return KINDS[kind]
    except KeyError:
        typer.echo(f"❌ Unknown kind {kind!r}. Use one of: {', '.join(KINDS)}")
        raise typer.Exit(code=2)


def _emit(kind: str, html: str, short: bool) -> None:
    _, extract, takes_short = _resolve(kind)
    result = extract(html, short) if takes_short else extract(html)
    typer.echo(json.dumps(result, indent=2))
    if result is None:
        raise typer.Exit(code=1)


@page_app.command("parse")
def page_parse(
    kind: str = typer.Argument(..., help="What to extract (name, info, gradebook, ...)."),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML page."),
    short: bool = typer.Option(False, "--short", help="Shorten class names."),
) -> None:
    """Run an extractor over a saved HTML page and print the JSON result."""
    _resolve(kind)
    html = path.read_text(encoding="utf-8", errors="replace")
    _emit(kind, html, short)


@page_app.command("fetch")
def page_fetch(
    kind: str = typer.Argument(..., help="What to extract (name, info, gradebook, ...)."),
    user: str = typer.Option(..., "--user", help="Portal username."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    link: Optional[str] = typer.Option(None, "--link", help="Portal base URL."),
    short: bool = typer.Option(False, "--short", help="Shorten class names."),
    six_weeks: Optional[str] = typer.Option(
        None, "--six-weeks", help="Grading period for assignment pages."
    ),
) -> None:
    """Log in, fetch the page behind KIND and print the JSON result."""
    page_type, _, _ = _resolve(kind)
    base_url = link or settings.default_base_url

    try:
        client = login(user, password, base_url)
    except HACError as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)

    try:
        if page_type is PageType.ASSIGNMENTS and six_weeks:
            page = fetch_assignments_for_six_weeks(client, base_url, six_weeks)
        else:
            page = fetch_page(client, base_url, page_type)
    except HACError as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    finally:
        client.close()

    _emit(kind, page.html, short)
