"""OAuth2 token lifecycle for Automower Connect sessions.

The manager exchanges authorization codes, refreshes rotating token pairs and
wraps protected API calls so that an expired access token is recovered with
at most one refresh and one retry per call.

Refresh tokens are single use: the token endpoint invalidates the old one the
moment it issues a new pair. Refreshes are therefore serialised per session,
and a caller that loses the race reuses the winner's record instead of
spending the (already rotated) refresh token a second time.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Hashable, TypeVar
from urllib.parse import urlencode

import httpx

from ..core.time import utcnow
from .errors import (
    AuthExchangeError,
    AuthorizationExpired,
    OperationError,
    ReauthenticationRequired,
)

if TYPE_CHECKING:
    from .store import TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")
Operation = Callable[[str], Awaitable[T]]


@dataclass(frozen=True)
class Credential:
    """OAuth client credentials, loaded once at startup."""

    client_id: str
    client_secret: str

    def basic_auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.client_id, self.client_secret)


@dataclass(frozen=True)
class TokenRecord:
    """An access/refresh token pair as issued by the token endpoint."""

    access_token: str
    refresh_token: str
    expires_in: int = 0
    token_type: str = "Bearer"
    acquired_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenRecord":
        """Build a record from a token endpoint JSON body.

        Raises ``ValueError`` when either token is missing or empty.
        """

        if not isinstance(payload, dict):
            raise ValueError("token response is not a JSON object")
        access_token = payload.get("access_token")
        refresh_token = payload.get("refresh_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("token response has no access_token")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise ValueError("token response has no refresh_token")
        try:
            expires_in = int(payload.get("expires_in") or 0)
        except (TypeError, ValueError):
            expires_in = 0
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=expires_in,
            token_type=str(payload.get("token_type") or "Bearer"),
        )


class TokenManager:
    """Acquires, refreshes and re-applies tokens around remote calls."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        credential: Credential,
        *,
        token_url: str,
        authorize_url: str,
        redirect_uri: str,
        scope: str = "",
    ) -> None:
        self._http = http
        self._credential = credential
        self._token_url = token_url
        self._authorize_url = authorize_url
        self._redirect_uri = redirect_uri
        self._scope = scope
        # A lock lives only while some request holds or awaits it.
        self._locks: "weakref.WeakValueDictionary[Hashable, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def authorize_url(self, state: str) -> str:
        """URL the browser is sent to for user consent."""

        params = {
            "client_id": self._credential.client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "state": state,
        }
        if self._scope:
            params["scope"] = self._scope
        return f"{self._authorize_url}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> TokenRecord:
        return await self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
            }
        )

    async def refresh(self, refresh_token: str) -> TokenRecord:
        return await self._request_token(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )

    async def call_authorized(self, store: "TokenStore", operation: Operation[T]) -> T:
        """Run ``operation`` with the session's access token.

        A 401 triggers one refresh and exactly one retry. A second 401 is
        raised to the caller as ``AuthorizationExpired``; a failed refresh
        clears the store and raises ``ReauthenticationRequired``. A token
        endpoint that cannot be reached raises ``OperationError`` and leaves
        the store as it was. Any other error propagates untouched and never
        causes a refresh.
        """

        record = store.load()
        if record is None:
            raise ReauthenticationRequired("No tokens in session")

        try:
            return await operation(record.access_token)
        except AuthorizationExpired:
            logger.info("Access token rejected for session %s, refreshing", store.key)

        record = await self._refreshed(store, stale=record)
        return await operation(record.access_token)

    def forget(self, key: Hashable) -> None:
        """Drop the refresh lock of a session that has been signed out."""

        self._locks.pop(key, None)

    async def _refreshed(self, store: "TokenStore", stale: TokenRecord) -> TokenRecord:
        async with self._lock_for(store.key):
            current = store.load()
            if current is None:
                raise ReauthenticationRequired("Session was signed out during refresh")
            if current.access_token != stale.access_token:
                # Another request already rotated the pair.
                return current

            try:
                record = await self.refresh(current.refresh_token)
            except AuthExchangeError as exc:
                logger.warning("Refresh failed for session %s: %s", store.key, exc)
                store.clear()
                raise ReauthenticationRequired("Refresh token was rejected") from exc

            store.replace(record)
            return record

    def _lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def _request_token(self, form: Dict[str, str]) -> TokenRecord:
        grant = form["grant_type"]
        try:
            response = await self._http.post(
                self._token_url,
                data=form,
                auth=self._credential.basic_auth(),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Token request (%s) failed: %s", grant, exc)
            raise OperationError(f"Token request failed: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Token endpoint rejected %s grant with HTTP %s",
                grant,
                response.status_code,
            )
            raise AuthExchangeError(
                "Token endpoint rejected the grant",
                response.status_code,
                response.text,
            )

        try:
            record = TokenRecord.from_payload(response.json())
        except ValueError as exc:
            raise AuthExchangeError(
                f"Malformed token response: {exc}",
                response.status_code,
                response.text,
            ) from exc

        logger.info("Token endpoint granted %s", grant)
        return record


__all__ = ["Credential", "Operation", "TokenManager", "TokenRecord"]
