from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from drawengine.types import Entrant, PrizeType, SessionSnapshot, WinnerRecord


class PrizeTypeRequest(BaseModel):
    prize_type: PrizeType = Field(..., description="monthly, bonus or top4.")

    @field_validator("prize_type", mode="before")
    @classmethod
    def normalize_prize_type(cls, value):
        return PrizeType.parse(value)


class WinnersQuery(BaseModel):
    limit: Optional[int] = Field(None, ge=1, le=1000)
    prize_type: Optional[PrizeType] = None

    @field_validator("prize_type", mode="before")
    @classmethod
    def normalize_prize_type(cls, value):
        if value in (None, ""):
            return None
        return PrizeType.parse(value)


class EntrantResponse(BaseModel):
    id: int
    name: str
    phone: str = ""
    email: str = ""
    submission_date: Optional[dt.date] = None

    @classmethod
    def from_entrant(cls, entrant: Entrant) -> "EntrantResponse":
        return cls(
            id=entrant.id,
            name=entrant.name,
            phone=entrant.phone,
            email=entrant.email,
            submission_date=entrant.submission_date,
        )


class SessionStateResponse(BaseModel):
    prize_type: str
    status: str
    phase: str
    spinning: bool
    display_index: int
    display_entrant: Optional[EntrantResponse] = None
    current_winners: List[EntrantResponse] = []
    main_winners: List[EntrantResponse] = []
    eligible_count: int
    excluded_count: int
    total_entrants: int
    ledger_size: int

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionStateResponse":
        return cls(
            prize_type=snapshot.prize_type.value,
            status=snapshot.status.value,
            phase=snapshot.phase.value,
            spinning=snapshot.spinning,
            display_index=snapshot.display_index,
            display_entrant=(
                EntrantResponse.from_entrant(snapshot.display_entrant)
                if snapshot.display_entrant
                else None
            ),
            current_winners=[EntrantResponse.from_entrant(e) for e in snapshot.current_winners],
            main_winners=[EntrantResponse.from_entrant(e) for e in snapshot.main_winners],
            eligible_count=snapshot.eligible_count,
            excluded_count=snapshot.excluded_count,
            total_entrants=snapshot.total_entrants,
            ledger_size=snapshot.ledger_size,
        )


class CommandResponse(BaseModel):
    accepted: bool
    state: SessionStateResponse


class WinnerResponse(BaseModel):
    entrant: EntrantResponse
    prize_type: str
    draw_date: dt.date
    is_backup: bool = False

    @classmethod
    def from_record(cls, record: WinnerRecord) -> "WinnerResponse":
        return cls(
            entrant=EntrantResponse.from_entrant(record.entrant),
            prize_type=record.prize_type.value,
            draw_date=record.draw_date,
            is_backup=record.is_backup,
        )
