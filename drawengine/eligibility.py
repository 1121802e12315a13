from __future__ import annotations

from typing import FrozenSet, Iterable, List, Sequence, Set

from .types import DrawPhase, Entrant, PrizeType, WinnerRecord

MONTHLY_MAIN_WINNERS = 10
MONTHLY_BACKUP_WINNERS = 10
TOP4_WINNERS = 4
BONUS_WINNERS = 1


class EligibilityStore:
    """Entrant ids barred from further monthly draws.

    Ids only ever enter the set once they were committed as monthly winners
    (main or backup). There is no removal API; the set lives as long as the
    process does.
    """

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: Set[int] = set(ids)

    @classmethod
    def from_records(cls, records: Iterable[WinnerRecord]) -> "EligibilityStore":
        return cls(
            record.entrant.id for record in records if record.prize_type is PrizeType.MONTHLY
        )

    def exclude(self, ids: Iterable[int]) -> None:
        self._ids.update(ids)

    @property
    def ids(self) -> FrozenSet[int]:
        return frozenset(self._ids)

    def __contains__(self, entrant_id: object) -> bool:
        return entrant_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)


def eligible_pool(
    entrants: Sequence[Entrant], prize_type: PrizeType, store: EligibilityStore
) -> List[Entrant]:
    """Entrants that may be drawn for ``prize_type``, in pool order."""
    if prize_type is PrizeType.MONTHLY:
        return [entrant for entrant in entrants if entrant.id not in store]
    return list(entrants)


def winner_count(prize_type: PrizeType, phase: DrawPhase) -> int:
    if prize_type is PrizeType.MONTHLY:
        if phase is DrawPhase.BACKUP:
            return MONTHLY_BACKUP_WINNERS
        return MONTHLY_MAIN_WINNERS
    if prize_type is PrizeType.TOP4:
        return TOP4_WINNERS
    return BONUS_WINNERS
