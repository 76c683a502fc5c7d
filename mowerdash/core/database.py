"""Database configuration and session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from .config import DATABASE_URL

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DATA_DIR = _PROJECT_ROOT / "data"


def _database_url() -> str:
    if DATABASE_URL:
        return DATABASE_URL
    _DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{_DATA_DIR / 'app.db'}"


def _engine_options(url: str) -> Dict[str, Any]:
    if not url.startswith("sqlite"):
        return {}
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    # In-memory SQLite lives and dies with a single connection.
    if url in {"sqlite://", "sqlite:///:memory:"}:
        options["poolclass"] = StaticPool
    return options


_DB_URL = _database_url()
engine = create_engine(_DB_URL, **_engine_options(_DB_URL))


def get_session() -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""

    with Session(engine) as session:
        yield session


__all__ = ["engine", "get_session"]
