"""Retrieve portal pages with an authenticated client."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from hacapi.errors import FetchError
from hacapi.scraper.models import PageType, RawPage

logger = logging.getLogger(__name__)

# ASP.NET state fields echoed back when changing the assignments view.
_STATE_FIELDS = ("__VIEWSTATE", "__VIEWSTATEGENERATOR", "__EVENTVALIDATION")


def page_url(base_url: str, page_type: PageType) -> str:
    return base_url.rstrip("/") + page_type.path


def fetch_page(client: httpx.Client, base_url: str, page_type: PageType) -> RawPage:
    """GET the page for *page_type*.

    Raises:
        FetchError: Transport failure, a closed client or a 4xx/5xx
            response.
    """
    url = page_url(base_url, page_type)
    try:
        response = client.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, RuntimeError) as exc:
        # httpx raises RuntimeError once the client is closed
        raise FetchError(f"Failed to fetch {page_type.value} page: {exc}") from exc
    logger.debug("Fetched %s (%d bytes)", url, len(response.text))
    return RawPage(page_type=page_type, html=response.text)


def format_six_weeks_param(value: str, today: Optional[date] = None) -> str:
    """Translate a grading-period number to the portal's ``<n>-<year>`` form.

    The school year is the calendar year in which it ends: from July on it is
    next year.  ``ALL`` or anything that is not a period number selects all
    periods.
    """
    if value.strip().upper() == "ALL":
        return "ALL"
    try:
        week = int(value)
    except ValueError:
        return "ALL"
    if week < 0:
        return "ALL"

    today = today or date.today()
    year = today.year + 1 if today.month >= 7 else today.year
    return f"{week}-{year}"


def _six_weeks_form(html: str, period: str) -> dict[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    form = {}
    for name in _STATE_FIELDS:
        el = soup.select_one(f"input[name='{name}']")
        form[name] = (el.get("value") or "") if el is not None else ""
    form.update(
        {
            "__EVENTTARGET": "ctl00$plnMain$btnRefreshView",
            "__EVENTARGUMENT": "",
            "__LASTFOCUS": "",
            "ctl00$plnMain$ddlReportCardRuns": period,
            "ctl00$plnMain$ddlClasses": "ALL",
            "ctl00$plnMain$ddlCompetencies": "ALL",
            "ctl00$plnMain$ddlOrderBy": "Class",
        }
    )
    return form


def fetch_assignments_for_six_weeks(
    client: httpx.Client, base_url: str, six_weeks: str
) -> RawPage:
    """Fetch the assignments page re-rendered for one grading period."""
    current = fetch_page(client, base_url, PageType.ASSIGNMENTS)
    period = format_six_weeks_param(six_weeks)
    url = page_url(base_url, PageType.ASSIGNMENTS)
    try:
        response = client.post(url, data=_six_weeks_form(current.html, period))
        response.raise_for_status()
    except (httpx.HTTPError, RuntimeError) as exc:
        raise FetchError(f"Failed to post assignments request: {exc}") from exc
    logger.debug("Fetched assignments for period %s", period)
    return RawPage(page_type=PageType.ASSIGNMENTS, html=response.text)
