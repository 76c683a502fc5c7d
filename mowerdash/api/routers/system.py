"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import AMC_API_BASE, AMC_PAYLOAD_ENVELOPE, CLIENT_ID, REDIRECT_URI

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/debug-config")
def debug_config() -> Dict[str, Any]:
    """Report the OAuth and device API configuration (no secrets)."""

    return {
        "client_id": CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
        "api_base": AMC_API_BASE,
        "payload_envelope": AMC_PAYLOAD_ENVELOPE,
    }


__all__ = ["router"]
