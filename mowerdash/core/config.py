"""Application settings and environment helpers."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


# Automower Connect OAuth configuration --------------------------------------
CLIENT_ID = _require_env("CLIENT_ID")
CLIENT_SECRET = _require_env("CLIENT_SECRET")
REDIRECT_URI = _require_env("REDIRECT_URI")
OAUTH_SCOPE = os.getenv("OAUTH_SCOPE", "")

AUTHORIZE_URL = os.getenv(
    "AUTHORIZE_URL",
    "https://api.authentication.husqvarnagroup.dev/v1/oauth2/authorize",
)
TOKEN_URL = os.getenv(
    "TOKEN_URL", "https://api.authentication.husqvarnagroup.dev/v1/oauth2/token"
)


# Automower Connect device API -----------------------------------------------
AMC_API_BASE = os.getenv("AMC_API_BASE", "https://api.amc.husqvarnagroup.dev/v1")

# "jsonapi" expects {"data": [...]}, "bare" expects a top-level array.
AMC_PAYLOAD_ENVELOPE = os.getenv("AMC_PAYLOAD_ENVELOPE", "jsonapi").strip().lower()
if AMC_PAYLOAD_ENVELOPE not in {"jsonapi", "bare"}:
    raise RuntimeError("AMC_PAYLOAD_ENVELOPE must be 'jsonapi' or 'bare'")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "20"))
START_DURATION_MINUTES = _env_int("START_DURATION_MINUTES", 30)


# Application security -------------------------------------------------------
SECRET_KEY = _require_env("SECRET_KEY")

COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")


# Runtime behaviour ----------------------------------------------------------
HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 3000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "")
DB_RESET = _env_bool("DB_RESET", False)


__all__ = [
    "AMC_API_BASE",
    "AMC_PAYLOAD_ENVELOPE",
    "AUTHORIZE_URL",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
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
]
