"""HTTP layer: routers, request dependencies and pages."""

from __future__ import annotations

from fastapi import FastAPI

from .routers import ALL_ROUTERS


def register_routes(app: FastAPI) -> None:
    """Attach the sign-in, dashboard and system routers to the given app."""

    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["ALL_ROUTERS", "register_routes"]
