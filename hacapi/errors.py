"""Exceptions raised by the portal collaborators (login, page fetching).

The extraction engine itself never raises for missing or malformed markup;
these only cover talking to the upstream site.
"""

from __future__ import annotations


class HACError(Exception):
    """Base class for every error raised while talking to the portal."""


class LoginError(HACError):
    """The portal session could not be established."""


class InvalidCredentialsError(LoginError):
    """The portal rejected the username / password pair."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class FetchError(HACError):
    """A portal page could not be retrieved."""
