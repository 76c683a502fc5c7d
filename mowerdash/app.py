"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from sqlmodel import SQLModel
from starlette.middleware.sessions import SessionMiddleware

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    AMC_API_BASE,
    AMC_PAYLOAD_ENVELOPE,
    AUTHORIZE_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    HTTP_TIMEOUT_SECONDS,
    OAUTH_SCOPE,
    REDIRECT_URI,
    SECRET_KEY,
    TOKEN_URL,
    engine,
)
from .services import AutomowerClient, Credential, MowerService, TokenManager


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DB_RESET:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)

    transport = getattr(app.state, "http_transport", None)
    async with httpx.AsyncClient(
        timeout=HTTP_TIMEOUT_SECONDS, transport=transport
    ) as http:
        tokens = TokenManager(
            http,
            Credential(CLIENT_ID, CLIENT_SECRET),
            token_url=TOKEN_URL,
            authorize_url=AUTHORIZE_URL,
            redirect_uri=REDIRECT_URI,
            scope=OAUTH_SCOPE,
        )
        client = AutomowerClient(
            http,
            api_base=AMC_API_BASE,
            api_key=CLIENT_ID,
            envelope=AMC_PAYLOAD_ENVELOPE,
        )
        app.state.token_manager = tokens
        app.state.mower_service = MowerService(tokens, client)
        yield


def create_app(transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Build the app; ``transport`` replaces the network for outbound calls."""

    app = FastAPI(title="Automower Connect Dashboard", version="0.1.0", lifespan=lifespan)
    app.state.http_transport = transport

    app.add_middleware(
        SessionMiddleware,
        secret_key=SECRET_KEY,
        session_cookie="sid",
        https_only=COOKIE_SECURE,
        same_site=COOKIE_SAMESITE,
        domain=COOKIE_DOMAIN,
    )

    register_routes(app)
    return app


app = create_app()
