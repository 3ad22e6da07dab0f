"""Portal session acquisition.

:func:`login` returns an ``httpx.Client`` whose cookie jar holds an
authenticated Home Access Center session.  The caller owns the client and
must close it.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from hacapi.config import settings
from hacapi.errors import InvalidCredentialsError, LoginError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/HomeAccess/Account/LogOn"

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; hacapi/1.0)",
}


def _verification_token(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    el = soup.select_one("input[name='__RequestVerificationToken']")
    if el is None:
        return None
    return el.get("value")


def _login_form(token: str, username: str, password: str) -> dict[str, str]:
    return {
        "__RequestVerificationToken": token,
        "SCKTY00328510CustomEnabled": "True",
        "SCKTY00436568CustomEnabled": "True",
        "Database": "10",
        "VerificationOption": "UsernamePassword",
        "LogOnDetails.UserName": username,
        "tempUN": "",
        "tempPW": "",
        "LogOnDetails.Password": password,
    }


def new_client() -> httpx.Client:
    """Return a cookie-persisting client configured for the portal."""
    return httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def login(username: str, password: str, base_url: str) -> httpx.Client:
    """Log in to the portal at *base_url* and return the session client.

    Raises:
        InvalidCredentialsError: The portal sent us back to the log-on page.
        LoginError: The log-on page could not be loaded or had no
            anti-forgery token.
    """
    login_url = base_url.rstrip("/") + LOGIN_PATH
    client = new_client()
    try:
        try:
            page = client.get(login_url)
            page.raise_for_status()
        except httpx.HTTPError as exc:
            raise LoginError(f"Failed to GET login page: {exc}") from exc

        token = _verification_token(page.text)
        if token is None:
            raise LoginError("No __RequestVerificationToken found")

        try:
            response = client.post(login_url, data=_login_form(token, username, password))
        except httpx.HTTPError as exc:
            raise LoginError(f"Failed to POST login: {exc}") from exc

        if "LogOn" in str(response.url):
            logger.warning("Login rejected for %s at %s", username, base_url)
            raise InvalidCredentialsError()
    except BaseException:
        client.close()
        raise

    logger.info("Logged in %s at %s", username, base_url)
    return client
