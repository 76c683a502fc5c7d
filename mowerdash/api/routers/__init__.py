"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .mower import router as mower_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    mower_router,
)

__all__ = ["ALL_ROUTERS"]
