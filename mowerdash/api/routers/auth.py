"""Automower Connect sign-in routes."""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlmodel import Session

from ...core import get_session
from ...services import AuthExchangeError, OperationError, TokenManager, TokenStore
from ..dependencies import (
    SESSION_KEY,
    STATE_KEY,
    current_store,
    get_token_manager,
    sign_out,
)
from ..pages import error_page, landing_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/", response_class=HTMLResponse)
def index() -> str:
    return landing_page()


@router.get("/login")
def login(request: Request, tokens: TokenManager = Depends(get_token_manager)):
    """Send the browser to the Automower Connect consent screen."""

    state = secrets.token_urlsafe(16)
    request.session[STATE_KEY] = state
    return RedirectResponse(tokens.authorize_url(state))


@router.get("/callback")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    session: Session = Depends(get_session),
    tokens: TokenManager = Depends(get_token_manager),
):
    """Handle the OAuth redirect and start a signed-in session."""

    expected_state = request.session.pop(STATE_KEY, None)
    if error:
        raise HTTPException(400, detail=f"Authorization failed: {error}")
    if not code:
        raise HTTPException(400, detail="Missing code")
    if not expected_state or not secrets.compare_digest(state or "", expected_state):
        raise HTTPException(400, detail="Invalid state")

    try:
        record = await tokens.exchange_authorization_code(code)
    except (AuthExchangeError, OperationError) as exc:
        logger.warning("Authorization code exchange failed: %s", exc)
        return HTMLResponse(error_page("Token exchange failed", exc), status_code=502)

    store = current_store(request, session)
    if store is not None:
        store.replace(record)
    else:
        store = TokenStore.create(session, record)
        request.session[SESSION_KEY] = store.key
    logger.info("Session %s signed in", store.key)
    return RedirectResponse("/dashboard", status_code=303)


@router.post("/logout")
def logout(
    request: Request,
    session: Session = Depends(get_session),
    tokens: TokenManager = Depends(get_token_manager),
):
    sign_out(request, current_store(request, session), tokens)
    return RedirectResponse("/", status_code=303)


__all__ = ["router"]
