"""Database model for a signed-in Automower Connect session."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class MowerSession(SQLModel, table=True):
    """Tokens and mower binding for one browser session."""

    __tablename__ = "mower_session"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    access_token: str
    refresh_token: str
    expires_in: int = 0
    token_type: str = "Bearer"
    acquired_at: datetime = ORMField(default_factory=utcnow)
    mower_id: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["MowerSession"]
