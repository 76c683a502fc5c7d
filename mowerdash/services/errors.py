"""Error types raised by the token and mower services.

Routers translate these into HTTP responses; the services only classify.
"""

from __future__ import annotations

from typing import Optional


class MowerdashError(Exception):
    """Base class for every error raised by the service layer."""


class RemoteError(MowerdashError):
    """A failure reported by (or on the way to) the remote service."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"{message} (HTTP {self.status_code})"


class AuthExchangeError(RemoteError):
    """The token endpoint rejected an authorization code or refresh token."""


class AuthorizationExpired(RemoteError):
    """A protected call was answered with 401."""


class OperationError(RemoteError):
    """Any other remote failure: transport, timeout, 4xx/5xx, bad payload."""


class ReauthenticationRequired(MowerdashError):
    """The session holds no usable tokens; the user has to sign in again."""


class ClientStateError(MowerdashError):
    """The session is missing state a request depends on (no bound mower)."""


__all__ = [
    "AuthExchangeError",
    "AuthorizationExpired",
    "ClientStateError",
    "MowerdashError",
    "OperationError",
    "ReauthenticationRequired",
    "RemoteError",
]
