"""Tests for the session / page TTL cache and the cached portal access."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest
import respx

from hacapi.cache import SessionCache
from hacapi.errors import LoginError
from hacapi.portal import client_session, get_page
from hacapi.scraper.fetcher import fetch_page, page_url
from hacapi.scraper.models import PageType, RawPage

BASE = "https://hac.example.org"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> SessionCache:
    return SessionCache(client_ttl=300, page_ttl=60, clock=clock)


class TestClientEntries:
    def test_hit_before_expiry(self, cache: SessionCache, clock: FakeClock) -> None:
        client = MagicMock()
        cache.set_client("s1", "pw", BASE, client)
        clock.now += 299
        assert cache.get_client("s1", "pw", BASE) is client

    def test_miss_after_expiry(self, cache: SessionCache, clock: FakeClock) -> None:
        cache.set_client("s1", "pw", BASE, MagicMock())
        clock.now += 300
        assert cache.get_client("s1", "pw", BASE) is None

    def test_different_password_misses(self, cache: SessionCache) -> None:
        cache.set_client("s1", "pw", BASE, MagicMock())
        assert cache.get_client("s1", "other", BASE) is None

    def test_different_portal_misses(self, cache: SessionCache) -> None:
        cache.set_client("s1", "pw", BASE, MagicMock())
        assert cache.get_client("s1", "pw", "https://other.example.org") is None

    def test_replacing_closes_previous_client(self, cache: SessionCache) -> None:
        old, new = MagicMock(), MagicMock()
        cache.set_client("s1", "pw", BASE, old)
        cache.set_client("s1", "pw", BASE, new)
        old.close.assert_called_once()
        new.close.assert_not_called()

    def test_replaced_client_in_use_is_closed_on_release(self, cache: SessionCache) -> None:
        old, new = MagicMock(), MagicMock()
        cache.set_client("s1", "pw", BASE, old)
        assert cache.acquire_client("s1", "pw", BASE) is old
        cache.set_client("s1", "pw", BASE, new)
        old.close.assert_not_called()
        cache.release(old)
        old.close.assert_called_once()

    def test_acquire_misses_after_expiry(self, cache: SessionCache, clock: FakeClock) -> None:
        cache.set_client("s1", "pw", BASE, MagicMock())
        clock.now += 300
        assert cache.acquire_client("s1", "pw", BASE) is None

    def test_release_of_live_client_keeps_it_open(self, cache: SessionCache) -> None:
        client = MagicMock()
        cache.set_client("s1", "pw", BASE, client)
        cache.acquire_client("s1", "pw", BASE)
        cache.acquire_client("s1", "pw", BASE)
        cache.release(client)
        cache.release(client)
        client.close.assert_not_called()
        assert cache.get_client("s1", "pw", BASE) is client


class TestPageEntries:
    def test_hit_and_expiry(self, cache: SessionCache, clock: FakeClock) -> None:
        cache.set_page("s1", "pw", BASE, "transcript", "", "<html/>")
        assert cache.get_page("s1", "pw", BASE, "transcript") == "<html/>"
        clock.now += 60
        assert cache.get_page("s1", "pw", BASE, "transcript") is None

    def test_params_are_part_of_key(self, cache: SessionCache) -> None:
        cache.set_page("s1", "pw", BASE, "assignments", "3", "period 3")
        assert cache.get_page("s1", "pw", BASE, "assignments", "") is None
        assert cache.get_page("s1", "pw", BASE, "assignments", "3") == "period 3"

    def test_pages_are_per_credentials(self, cache: SessionCache) -> None:
        cache.set_page("s1", "pw", BASE, "info", "", "secret")
        assert cache.get_page("s1", "guess", BASE, "info") is None


class TestHousekeeping:
    def test_clear_expired(self, cache: SessionCache, clock: FakeClock) -> None:
        stale, fresh = MagicMock(), MagicMock()
        cache.set_client("old", "pw", BASE, stale)
        cache.set_page("old", "pw", BASE, "info", "", "x")
        clock.now += 200
        cache.set_client("new", "pw", BASE, fresh)
        clock.now += 150

        assert cache.clear_expired() == 2
        stale.close.assert_called_once()
        fresh.close.assert_not_called()
        assert cache.get_client("new", "pw", BASE) is fresh

    def test_clear_expired_defers_close_of_leased_client(
        self, cache: SessionCache, clock: FakeClock
    ) -> None:
        client = MagicMock()
        cache.set_client("s1", "pw", BASE, client)
        cache.acquire_client("s1", "pw", BASE)
        clock.now += 300

        assert cache.clear_expired() == 1
        client.close.assert_not_called()
        assert cache.get_client("s1", "pw", BASE) is None
        cache.release(client)
        client.close.assert_called_once()

    def test_clear_expired_on_empty_cache(self, cache: SessionCache) -> None:
        assert cache.clear_expired() == 0

    def test_close_closes_everything(self, cache: SessionCache) -> None:
        a, b = MagicMock(), MagicMock()
        cache.set_client("a", "pw", BASE, a)
        cache.set_client("b", "pw", BASE, b)
        cache.set_page("a", "pw", BASE, "info", "", "x")
        cache.close()
        a.close.assert_called_once()
        b.close.assert_called_once()
        assert cache.get_page("a", "pw", BASE, "info") is None

    def test_close_includes_retired_clients(self, cache: SessionCache, clock: FakeClock) -> None:
        client = MagicMock()
        cache.set_client("s1", "pw", BASE, client)
        cache.acquire_client("s1", "pw", BASE)
        clock.now += 300
        cache.clear_expired()
        cache.close()
        client.close.assert_called_once()


class TestPortal:
    def test_logs_in_once_per_session(self, cache: SessionCache) -> None:
        client = MagicMock()
        with patch("hacapi.portal.login", return_value=client) as mock_login:
            with client_session(cache, "s1", "pw", BASE) as first:
                assert first is client
            with client_session(cache, "s1", "pw", BASE) as second:
                assert second is client
        mock_login.assert_called_once_with("s1", "pw", BASE)

    def test_page_is_fetched_once_while_fresh(self, cache: SessionCache, clock: FakeClock) -> None:
        client = MagicMock()
        page = RawPage(page_type=PageType.TRANSCRIPT, html="<html>t</html>")
        with patch("hacapi.portal.login", return_value=client), patch(
            "hacapi.portal.fetch_page", return_value=page
        ) as mock_fetch:
            first = get_page(cache, "s1", "pw", BASE, PageType.TRANSCRIPT)
            second = get_page(cache, "s1", "pw", BASE, PageType.TRANSCRIPT)
            clock.now += 61
            get_page(cache, "s1", "pw", BASE, PageType.TRANSCRIPT)

        assert first == second == page
        assert mock_fetch.call_count == 2
        mock_fetch.assert_called_with(client, BASE, PageType.TRANSCRIPT)

    def test_six_weeks_uses_snapshot_fetch(self, cache: SessionCache) -> None:
        page = RawPage(page_type=PageType.ASSIGNMENTS, html="<html>p2</html>")
        with patch("hacapi.portal.login", return_value=MagicMock()), patch(
            "hacapi.portal.fetch_page"
        ) as mock_fetch, patch(
            "hacapi.portal.fetch_assignments_for_six_weeks", return_value=page
        ) as mock_snapshot:
            result = get_page(cache, "s1", "pw", BASE, PageType.ASSIGNMENTS, "2")

        assert result == page
        mock_fetch.assert_not_called()
        assert mock_snapshot.call_args.args[1:] == (BASE, "2")

    def test_failed_login_caches_nothing(self, cache: SessionCache) -> None:
        with patch("hacapi.portal.login", side_effect=LoginError("down")):
            with pytest.raises(LoginError):
                get_page(cache, "s1", "pw", BASE, PageType.TRANSCRIPT)
        assert cache.get_client("s1", "pw", BASE) is None

    def test_session_expiring_mid_request_stays_open(
        self, cache: SessionCache, clock: FakeClock
    ) -> None:
        client = httpx.Client()
        url = page_url(BASE, PageType.TRANSCRIPT)

        def expire_then_fetch(*args):
            # a concurrent request purges the session while this one holds it
            clock.now += 301
            cache.clear_expired()
            return fetch_page(*args)

        with respx.mock:
            respx.get(url).mock(return_value=httpx.Response(200, text="<html>t</html>"))
            with patch("hacapi.portal.login", return_value=client), patch(
                "hacapi.portal.fetch_page", side_effect=expire_then_fetch
            ):
                page = get_page(cache, "s1", "pw", BASE, PageType.TRANSCRIPT)

        assert page.html == "<html>t</html>"
        assert client.is_closed
