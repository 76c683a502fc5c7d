"""Mower dashboard and control routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...core import START_DURATION_MINUTES
from ...services import (
    AuthorizationExpired,
    ClientStateError,
    MowerService,
    OperationError,
    ReauthenticationRequired,
    TokenManager,
    TokenStore,
)
from ..dependencies import current_store, get_mower_service, get_token_manager, sign_out
from ..pages import dashboard_page, error_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["mower"])

# Raised when the user has to go through the consent screen again.
_SIGNED_OUT = (ReauthenticationRequired, AuthorizationExpired, ClientStateError)


def _back_to_login(
    request: Request, store: Optional[TokenStore], tokens: TokenManager
) -> RedirectResponse:
    sign_out(request, store, tokens)
    return RedirectResponse("/", status_code=303)


@router.get("/dashboard")
async def dashboard(
    request: Request,
    store: Optional[TokenStore] = Depends(current_store),
    mowers: MowerService = Depends(get_mower_service),
    tokens: TokenManager = Depends(get_token_manager),
):
    if store is None:
        return RedirectResponse("/", status_code=303)
    try:
        mower = await mowers.status(store)
    except _SIGNED_OUT as exc:
        logger.info("Dashboard needs a new sign-in: %s", exc)
        return _back_to_login(request, store, tokens)
    except OperationError as exc:
        return HTMLResponse(
            error_page("Error fetching mower data", exc), status_code=502
        )
    return HTMLResponse(dashboard_page(mower, START_DURATION_MINUTES))


@router.post("/start")
async def start(
    request: Request,
    duration: int = Query(START_DURATION_MINUTES, ge=1, le=1440),
    store: Optional[TokenStore] = Depends(current_store),
    mowers: MowerService = Depends(get_mower_service),
    tokens: TokenManager = Depends(get_token_manager),
):
    if store is None:
        return RedirectResponse("/", status_code=303)
    try:
        await mowers.start(store, duration)
    except _SIGNED_OUT as exc:
        logger.info("Start needs a new sign-in: %s", exc)
        return _back_to_login(request, store, tokens)
    except OperationError as exc:
        return HTMLResponse(error_page("Error starting mower", exc), status_code=502)
    return RedirectResponse("/dashboard", status_code=303)


@router.post("/park")
async def park(
    request: Request,
    duration: Optional[int] = Query(None, ge=1, le=1440),
    store: Optional[TokenStore] = Depends(current_store),
    mowers: MowerService = Depends(get_mower_service),
    tokens: TokenManager = Depends(get_token_manager),
):
    if store is None:
        return RedirectResponse("/", status_code=303)
    try:
        await mowers.park(store, duration)
    except _SIGNED_OUT as exc:
        logger.info("Park needs a new sign-in: %s", exc)
        return _back_to_login(request, store, tokens)
    except OperationError as exc:
        return HTMLResponse(error_page("Error parking mower", exc), status_code=502)
    return RedirectResponse("/dashboard", status_code=303)


@router.get("/api/mower")
async def mower_status(
    request: Request,
    store: Optional[TokenStore] = Depends(current_store),
    mowers: MowerService = Depends(get_mower_service),
    tokens: TokenManager = Depends(get_token_manager),
) -> Dict[str, Any]:
    """JSON view of the first mower on the account."""

    if store is None:
        raise HTTPException(401, "Not connected")
    try:
        mower = await mowers.status(store)
    except _SIGNED_OUT:
        sign_out(request, store, tokens)
        raise HTTPException(401, "Not connected")
    except OperationError as exc:
        raise HTTPException(
            502,
            detail={
                "message": str(exc),
                "status_code": exc.status_code,
                "body": exc.body,
            },
        ) from exc
    return {"mower": mower.to_dict() if mower else None}


__all__ = ["router"]
