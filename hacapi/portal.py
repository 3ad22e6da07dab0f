"""Cached access to portal pages for one student session.

Glues :mod:`hacapi.scraper.auth`, :mod:`hacapi.scraper.fetcher` and
:class:`hacapi.cache.SessionCache` together: the HTTP layer asks for a page
and gets back its HTML, logging in or re-fetching only when the cache has
nothing fresh.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import httpx

from hacapi.cache import SessionCache
from hacapi.scraper.auth import login
from hacapi.scraper.fetcher import fetch_assignments_for_six_weeks, fetch_page
from hacapi.scraper.models import PageType, RawPage

logger = logging.getLogger(__name__)


@contextmanager
def client_session(
    cache: SessionCache, username: str, password: str, base_url: str
) -> Iterator[httpx.Client]:
    """Yield a logged-in client, reusing the cached session when fresh.

    The client is leased for the duration of the block, so expiry or
    replacement by a concurrent login does not close it mid-request.
    """
    client = cache.acquire_client(username, password, base_url)
    if client is None:
        client = login(username, password, base_url)
        cache.lease(client)
        cache.set_client(username, password, base_url, client)
    try:
        yield client
    finally:
        cache.release(client)


def get_page(
    cache: SessionCache,
    username: str,
    password: str,
    base_url: str,
    page_type: PageType,
    six_weeks: Optional[str] = None,
) -> RawPage:
    """Return *page_type* for the session, from the cache when fresh.

    ``six_weeks`` only applies to the assignments page; ``None`` fetches the
    default (current period) view.
    """
    cache.clear_expired()
    params = six_weeks or ""
    html = cache.get_page(username, password, base_url, page_type.value, params)
    if html is not None:
        logger.debug("Page cache hit: %s %s", page_type.value, params)
        return RawPage(page_type=page_type, html=html)

    with client_session(cache, username, password, base_url) as client:
        if page_type is PageType.ASSIGNMENTS and six_weeks:
            page = fetch_assignments_for_six_weeks(client, base_url, six_weeks)
        else:
            page = fetch_page(client, base_url, page_type)
    cache.set_page(username, password, base_url, page_type.value, params, page.html)
    return page
