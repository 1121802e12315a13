from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

from drawengine.types import Entrant, PrizeType, WinnerRecord

Base = declarative_base()


class WinnerEntry(Base):
    __tablename__ = "winners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entrant_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    submission_date = Column(Date, nullable=True)
    prize_type = Column(String(16), nullable=False, index=True)
    draw_date = Column(Date, nullable=False)
    is_backup = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)

    @classmethod
    def from_record(cls, record: WinnerRecord) -> "WinnerEntry":
        entrant = record.entrant
        return cls(
            entrant_id=entrant.id,
            name=entrant.name,
            phone=entrant.phone,
            email=entrant.email,
            submission_date=entrant.submission_date,
            prize_type=record.prize_type.value,
            draw_date=record.draw_date,
            is_backup=record.is_backup,
        )

    def to_record(self) -> WinnerRecord:
        entrant = Entrant(
            id=self.entrant_id,
            name=self.name,
            phone=self.phone or "",
            email=self.email or "",
            submission_date=self.submission_date,
        )
        return WinnerRecord(
            entrant=entrant,
            prize_type=PrizeType(self.prize_type),
            draw_date=self.draw_date,
            is_backup=bool(self.is_backup),
        )
