"""Time-to-live cache for portal sessions and page bodies.

Sessions are keyed by ``(username, password digest, base URL)`` so a cached
session is only reused for the same credentials.  Pages are keyed by the
session key plus ``(page, params)``.  Expired entries behave as misses and
are purged by :meth:`SessionCache.clear_expired`.

A client handed out by :meth:`SessionCache.acquire_client` (or registered
with :meth:`SessionCache.lease`) stays open until it is released, even if
its entry expires or is replaced meanwhile.  Retired clients with no
outstanding lease are closed straight away.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: object
    expires_at: float


def _client_key(username: str, password: str, base_url: str) -> tuple[str, str, str]:
    digest = hashlib.sha256(password.encode("utf-8")).hexdigest()
    return (username, digest, base_url)


class SessionCache:
    """Thread-safe cache shared by all requests of one application."""

    def __init__(
        self,
        client_ttl: float,
        page_ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clients: dict[tuple[str, str, str], _Entry] = {}
        self._pages: dict[tuple[str, ...], _Entry] = {}
        self._leases: dict[httpx.Client, int] = {}
        self._retired: set[httpx.Client] = set()
        self._client_ttl = client_ttl
        self._page_ttl = page_ttl
        self._clock = clock
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def get_client(self, username: str, password: str, base_url: str) -> Optional[httpx.Client]:
        key = _client_key(username, password, base_url)
        with self._lock:
            entry = self._clients.get(key)
            if entry is not None and self._clock() < entry.expires_at:
                return entry.value  # type: ignore[return-value]
        return None

    def acquire_client(
        self, username: str, password: str, base_url: str
    ) -> Optional[httpx.Client]:
        """Like :meth:`get_client`, but also lease the client on a hit."""
        key = _client_key(username, password, base_url)
        with self._lock:
            entry = self._clients.get(key)
            if entry is None or self._clock() >= entry.expires_at:
                return None
            client = entry.value
            self._leases[client] = self._leases.get(client, 0) + 1  # type: ignore[index]
        return client  # type: ignore[return-value]

    def set_client(
        self, username: str, password: str, base_url: str, client: httpx.Client
    ) -> None:
        key = _client_key(username, password, base_url)
        with self._lock:
            previous = self._clients.get(key)
            self._clients[key] = _Entry(client, self._clock() + self._client_ttl)
            closing = []
            if previous is not None and previous.value is not client:
                closing = self._retire([previous.value])
        self._close_all(closing)

    def lease(self, client: httpx.Client) -> None:
        """Mark *client* as in use until a matching :meth:`release`."""
        with self._lock:
            self._leases[client] = self._leases.get(client, 0) + 1

    def release(self, client: httpx.Client) -> None:
        """Drop one lease; close *client* if it was retired and is now idle."""
        with self._lock:
            count = self._leases.get(client, 0) - 1
            if count > 0:
                self._leases[client] = count
                return
            self._leases.pop(client, None)
            if client not in self._retired:
                return
            self._retired.discard(client)
        client.close()

    def _retire(self, clients: list) -> list:
        """Return the clients that can be closed now; defer the leased ones.

        Must be called with the lock held.
        """
        idle = []
        for client in clients:
            if self._leases.get(client):
                self._retired.add(client)
            else:
                idle.append(client)
        return idle

    @staticmethod
    def _close_all(clients: list) -> None:
        for client in clients:
            client.close()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def get_page(
        self, username: str, password: str, base_url: str, page: str, params: str = ""
    ) -> Optional[str]:
        key = _client_key(username, password, base_url) + (page, params)
        with self._lock:
            entry = self._pages.get(key)
            if entry is not None and self._clock() < entry.expires_at:
                return entry.value  # type: ignore[return-value]
        return None

    def set_page(
        self,
        username: str,
        password: str,
        base_url: str,
        page: str,
        params: str,
        html: str,
    ) -> None:
        key = _client_key(username, password, base_url) + (page, params)
        with self._lock:
            self._pages[key] = _Entry(html, self._clock() + self._page_ttl)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------
    def clear_expired(self) -> int:
        """Drop expired entries, closing evicted clients nobody is using.

        Returns the number of entries removed.
        """
        now = self._clock()
        with self._lock:
            stale_clients = [k for k, e in self._clients.items() if now >= e.expires_at]
            idle = self._retire([self._clients.pop(k).value for k in stale_clients])
            stale_pages = [k for k, e in self._pages.items() if now >= e.expires_at]
            for k in stale_pages:
                del self._pages[k]
        self._close_all(idle)
        removed = len(stale_clients) + len(stale_pages)
        if removed:
            logger.debug("Cache purge removed %d entries", removed)
        return removed

    def close(self) -> None:
        """Close every cached or retired client and empty the cache."""
        with self._lock:
            clients = [e.value for e in self._clients.values()]
            clients.extend(c for c in self._retired if c not in clients)
            self._clients.clear()
            self._pages.clear()
            self._retired.clear()
            self._leases.clear()
        self._close_all(clients)
