"""Student data endpoints.

Every route logs in to the portal with the ``user`` / ``pass`` query
parameters (``link`` selects the district portal), fetches one page and
returns what the extraction engine made of it.

Routes
------
GET /api/name          {"name": ...}
GET /api/info          registration fields
GET /api/classes       class names                  (short)
GET /api/averages      class → average              (short, six_weeks)
GET /api/assignments   class → assignment rows      (short, six_weeks)
GET /api/weightings    class → category rows        (short, six_weeks)
GET /api/gradebook     class → combined record      (short, six_weeks)
GET /api/reportcard    report-card rows
GET /api/ipr           interim progress rows
GET /api/transcript    semesters + GPA summary
GET /api/rank          GPA summary only
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from hacapi.config import settings
from hacapi.errors import FetchError, InvalidCredentialsError, LoginError
from hacapi.portal import get_page
from hacapi.scraper import extractor
from hacapi.scraper.models import PageType

router = APIRouter()

User = Annotated[str, Query(description="Portal username.")]
Password = Annotated[str, Query(alias="pass", description="Portal password.")]
Link = Annotated[
    Optional[str],
    Query(description="Portal base URL; defaults to the configured district."),
]
Short = Annotated[
    bool, Query(description="Strip course codes and noise words from class names.")
]
SixWeeks = Annotated[Optional[str], Query(description="Grading period number, or ALL.")]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _html(
    request: Request,
    user: str,
    password: str,
    link: Optional[str],
    page_type: PageType,
    six_weeks: Optional[str] = None,
) -> str:
    """Fetch *page_type* through the shared cache, mapping failures to HTTP errors."""
    base_url = link or settings.default_base_url
    try:
        page = get_page(
            request.app.state.cache, user, password, base_url, page_type, six_weeks
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except (LoginError, FetchError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return page.html


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/name")
def get_name(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> dict[str, str]:
    html = _html(request, user, password, link, PageType.NAME)
    name = extractor.extract_name(html)
    if name is None:
        raise HTTPException(status_code=500, detail="Failed to parse name")
    return {"name": name}


@router.get("/info")
def get_info(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> dict[str, str]:
    html = _html(request, user, password, link, PageType.INFO)
    info = extractor.extract_info(html)
    if info is None:
        raise HTTPException(status_code=500, detail="Failed to parse student info")
    return info


@router.get("/classes")
def get_classes(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
    short: Short = False,
) -> list[str]:
    html = _html(request, user, password, link, PageType.ASSIGNMENTS)
    return extractor.extract_classes(html, short)


@router.get("/averages")
def get_averages(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
    short: Short = False,
    six_weeks: SixWeeks = None,
) -> dict[str, str]:
    html = _html(request, user, password, link, PageType.ASSIGNMENTS, six_weeks)
    return extractor.extract_averages(html, short)


@router.get("/assignments")
def get_assignments(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
    short: Short = False,
    six_weeks: SixWeeks = None,
) -> dict[str, list[list[str]]]:
    html = _html(request, user, password, link, PageType.ASSIGNMENTS, six_weeks)
    return extractor.extract_assignments(html, short)


@router.get("/weightings")
def get_weightings(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
    short: Short = False,
    six_weeks: SixWeeks = None,
) -> dict[str, list[list[str]]]:
    html = _html(request, user, password, link, PageType.ASSIGNMENTS, six_weeks)
    return extractor.extract_weightings(html, short)


@router.get("/gradebook")
def get_gradebook(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
    short: Short = False,
    six_weeks: SixWeeks = None,
) -> dict[str, Any]:
    html = _html(request, user, password, link, PageType.ASSIGNMENTS, six_weeks)
    return extractor.extract_gradebook(html, short)


@router.get("/reportcard")
def get_report_card(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> list[list[str]]:
    html = _html(request, user, password, link, PageType.REPORT_CARD)
    return extractor.extract_report_cards(html)


@router.get("/ipr")
def get_progress_report(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> list[list[str]]:
    html = _html(request, user, password, link, PageType.PROGRESS)
    return extractor.extract_progress(html)


@router.get("/transcript")
def get_transcript(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> dict[str, Any]:
    html = _html(request, user, password, link, PageType.TRANSCRIPT)
    return extractor.extract_transcript(html)


@router.get("/rank")
def get_rank(
    request: Request,
    user: User,
    password: Password,
    link: Link = None,
) -> dict[str, Any]:
    html = _html(request, user, password, link, PageType.TRANSCRIPT)
    return extractor.extract_rank(html)
