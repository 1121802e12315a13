from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class PrizeType(str, Enum):
    MONTHLY = "monthly"
    BONUS = "bonus"
    TOP4 = "top4"

    @classmethod
    def parse(cls, value: Union["PrizeType", str]) -> "PrizeType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown prize type {value!r}; expected one of: {allowed}") from exc


class DrawPhase(str, Enum):
    MAIN = "main"
    BACKUP = "backup"
    COMPLETE = "complete"


class SessionStatus(str, Enum):
    IDLE = "idle"
    SPINNING = "spinning"
    SELECTING = "selecting"
    AWAITING_BACKUP = "awaiting-next-stage"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Entrant:
    """A single submission in the fixed entrant pool."""

    id: int
    name: str
    phone: str = ""
    email: str = ""
    submission_date: Optional[dt.date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "submission_date": self.submission_date.isoformat() if self.submission_date else None,
        }


@dataclass(frozen=True)
class WinnerRecord:
    """Ledger entry written once a draw commits."""

    entrant: Entrant
    prize_type: PrizeType
    draw_date: dt.date
    is_backup: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entrant": self.entrant.to_dict(),
            "prize_type": self.prize_type.value,
            "draw_date": self.draw_date.isoformat(),
            "is_backup": self.is_backup,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a renderer needs to draw the current session."""

    prize_type: PrizeType
    status: SessionStatus
    phase: DrawPhase
    display_index: int
    display_entrant: Optional[Entrant]
    current_winners: Tuple[Entrant, ...] = ()
    main_winners: Tuple[Entrant, ...] = ()
    eligible_count: int = 0
    excluded_count: int = 0
    total_entrants: int = 0
    ledger_size: int = 0
    spinning: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "spinning", self.status is SessionStatus.SPINNING)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prize_type": self.prize_type.value,
            "status": self.status.value,
            "phase": self.phase.value,
            "spinning": self.spinning,
            "display_index": self.display_index,
            "display_entrant": self.display_entrant.to_dict() if self.display_entrant else None,
            "current_winners": [entrant.to_dict() for entrant in self.current_winners],
            "main_winners": [entrant.to_dict() for entrant in self.main_winners],
            "eligible_count": self.eligible_count,
            "excluded_count": self.excluded_count,
            "total_entrants": self.total_entrants,
            "ledger_size": self.ledger_size,
        }
