"""Core configuration and infrastructure helpers."""

from .config import (
    AMC_API_BASE,
    AMC_PAYLOAD_ENVELOPE,
    AUTHORIZE_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    HOST,
    HTTP_TIMEOUT_SECONDS,
    LOG_LEVEL,
    OAUTH_SCOPE,
    PORT,
    REDIRECT_URI,
    SECRET_KEY,
    START_DURATION_MINUTES,
    TOKEN_URL,
)
from .database import engine, get_session
from .time import utcnow

__all__ = [
    "AMC_API_BASE",
    "AMC_PAYLOAD_ENVELOPE",
    "AUTHORIZE_URL",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DB_RESET",
    "HOST",
    "HTTP_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "OAUTH_SCOPE",
    "PORT",
    "REDIRECT_URI",
    "SECRET_KEY",
    "START_DURATION_MINUTES",
    "TOKEN_URL",
    "engine",
    "get_session",
    "utcnow",
]
