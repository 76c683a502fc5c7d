"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import get_session
from ..services import MowerService, TokenManager, TokenStore

SESSION_KEY = "mower_session_id"
STATE_KEY = "oauth_state"


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


def get_mower_service(request: Request) -> MowerService:
    return request.app.state.mower_service


def current_store(
    request: Request, session: Session = Depends(get_session)
) -> Optional[TokenStore]:
    """Token store of the signed-in session, or ``None``."""

    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        return None
    store = TokenStore(session, int(session_id))
    if store.load() is None:
        request.session.pop(SESSION_KEY, None)
        return None
    return store


def sign_out(
    request: Request, store: Optional[TokenStore], tokens: TokenManager
) -> None:
    """Forget everything the session knows about the user."""

    if store is not None:
        store.clear()
        tokens.forget(store.key)
    request.session.pop(SESSION_KEY, None)


__all__ = [
    "SESSION_KEY",
    "STATE_KEY",
    "current_store",
    "get_mower_service",
    "get_token_manager",
    "sign_out",
]
