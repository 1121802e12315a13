from __future__ import annotations

from typing import List, Optional, Sequence

from drawengine.types import PrizeType, WinnerRecord

from ..db import session_scope
from ..models import WinnerEntry


class WinnerRepository:
    """SQLAlchemy-backed store for the draw ledger."""

    def load(self) -> Sequence[WinnerRecord]:
        with session_scope() as session:
            rows = session.query(WinnerEntry).order_by(WinnerEntry.id.asc()).all()
            return [row.to_record() for row in rows]

    def save(self, records: Sequence[WinnerRecord]) -> None:
        with session_scope() as session:
            session.add_all([WinnerEntry.from_record(record) for record in records])

    def list_winners(
        self, limit: Optional[int] = None, prize_type: Optional[PrizeType] = None
    ) -> List[WinnerRecord]:
        """Newest first, optionally filtered by prize type."""
        with session_scope() as session:
            query = session.query(WinnerEntry)
            if prize_type is not None:
                query = query.filter(WinnerEntry.prize_type == prize_type.value)
            query = query.order_by(WinnerEntry.id.desc())
            if limit:
                query = query.limit(limit)
            return [row.to_record() for row in query.all()]
