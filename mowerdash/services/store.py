"""Session-scoped token storage."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from ..models import MowerSession
from .errors import ReauthenticationRequired
from .tokens import TokenRecord


class TokenStore:
    """Token record and mower binding for one session.

    Every read goes back to the database so that a request waiting on a
    refresh sees the pair another request just stored.
    """

    def __init__(self, db: Session, session_id: int) -> None:
        self._db = db
        self._session_id = session_id

    @classmethod
    def create(cls, db: Session, record: TokenRecord) -> "TokenStore":
        row = MowerSession(
            access_token=record.access_token,
            refresh_token=record.refresh_token,
            expires_in=record.expires_in,
            token_type=record.token_type,
            acquired_at=record.acquired_at,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return cls(db, row.id)

    @property
    def key(self) -> int:
        return self._session_id

    def load(self) -> Optional[TokenRecord]:
        row = self._row()
        if row is None:
            return None
        return TokenRecord(
            access_token=row.access_token,
            refresh_token=row.refresh_token,
            expires_in=row.expires_in,
            token_type=row.token_type,
            acquired_at=row.acquired_at,
        )

    def replace(self, record: TokenRecord) -> None:
        """Swap in a new token pair; both tokens are written in one commit."""

        row = self._require_row()
        row.access_token = record.access_token
        row.refresh_token = record.refresh_token
        row.expires_in = record.expires_in
        row.token_type = record.token_type
        row.acquired_at = record.acquired_at
        self._db.add(row)
        self._db.commit()

    @property
    def mower_id(self) -> Optional[str]:
        row = self._row()
        return row.mower_id if row else None

    def bind_mower(self, mower_id: str) -> None:
        row = self._require_row()
        if row.mower_id == mower_id:
            return
        row.mower_id = mower_id
        self._db.add(row)
        self._db.commit()

    def clear(self) -> None:
        row = self._row()
        if row is None:
            return
        self._db.delete(row)
        self._db.commit()

    def _row(self) -> Optional[MowerSession]:
        return self._db.get(MowerSession, self._session_id, populate_existing=True)

    def _require_row(self) -> MowerSession:
        row = self._row()
        if row is None:
            raise ReauthenticationRequired("Session no longer exists")
        return row


__all__ = ["TokenStore"]
