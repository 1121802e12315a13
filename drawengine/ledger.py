from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Set, Tuple

from .types import PrizeType, WinnerRecord


class LedgerStore(Protocol):
    """Persistence collaborator for the ledger; the engine owns no format."""

    def load(self) -> Sequence[WinnerRecord]:
        ...

    def save(self, records: Sequence[WinnerRecord]) -> None:
        ...


class Ledger:
    """Append-only history of every committed winner, in commit order."""

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._logger = logger or logging.getLogger("luckydraw.ledger")
        self._records: List[WinnerRecord] = list(store.load()) if store is not None else []
        if self._records:
            self._logger.info("Restored %s winner records from store.", len(self._records))

    def append(self, records: Iterable[WinnerRecord]) -> int:
        batch = tuple(records)
        if not batch:
            return 0
        # Store first so a failed save leaves the in-memory history untouched.
        if self._store is not None:
            self._store.save(batch)
        self._records.extend(batch)
        self._logger.info("Ledger +%s records (total=%s)", len(batch), len(self._records))
        return len(batch)

    def recent(self, limit: int = 12) -> List[WinnerRecord]:
        """Newest records first."""
        if limit <= 0:
            return []
        return list(reversed(self._records[-limit:]))

    def for_prize(self, prize_type: PrizeType) -> List[WinnerRecord]:
        return [record for record in self._records if record.prize_type is prize_type]

    def monthly_winner_ids(self) -> Set[int]:
        return {record.entrant.id for record in self.for_prize(PrizeType.MONTHLY)}

    @property
    def records(self) -> Tuple[WinnerRecord, ...]:
        return tuple(self._records)

    def __iter__(self) -> Iterator[WinnerRecord]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)
