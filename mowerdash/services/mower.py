"""Authorized mower operations used by the dashboard routes."""

from __future__ import annotations

from typing import List, Optional

from .amc import AutomowerClient, Mower, MowerAction
from .errors import ClientStateError
from .store import TokenStore
from .tokens import TokenManager


class MowerService:
    def __init__(self, tokens: TokenManager, client: AutomowerClient) -> None:
        self._tokens = tokens
        self._client = client

    async def status(self, store: TokenStore) -> Optional[Mower]:
        """First mower on the account, or ``None`` if there are none.

        The mower's id is remembered in the session for later actions.
        """

        mowers: List[Mower] = await self._tokens.call_authorized(
            store, self._client.list_mowers
        )
        if not mowers:
            return None
        mower = mowers[0]
        store.bind_mower(mower.id)
        return mower

    async def start(self, store: TokenStore, duration_minutes: int) -> None:
        await self._send(store, MowerAction.start(duration_minutes))

    async def park(
        self, store: TokenStore, duration_minutes: Optional[int] = None
    ) -> None:
        await self._send(store, MowerAction.park(duration_minutes))

    async def _send(self, store: TokenStore, action: MowerAction) -> None:
        mower_id = store.mower_id
        if not mower_id:
            raise ClientStateError("No mower bound to this session")

        async def operation(access_token: str) -> None:
            await self._client.send_action(access_token, mower_id, action)

        await self._tokens.call_authorized(store, operation)


__all__ = ["MowerService"]
