from __future__ import annotations

import datetime as dt
from typing import List, Optional, Sequence

from drawengine.pacer import TickCallback
from drawengine.types import Entrant, WinnerRecord


class ManualPacer:
    """Pacer driven explicitly by the test instead of a timer."""

    def __init__(self) -> None:
        self._on_tick: Optional[TickCallback] = None
        self.starts = 0
        self.cancels = 0

    @property
    def active(self) -> bool:
        return self._on_tick is not None

    def start(self, on_tick: TickCallback) -> None:
        self._on_tick = on_tick
        self.starts += 1

    def cancel(self) -> None:
        if self._on_tick is not None:
            self.cancels += 1
            self._on_tick = None

    async def wait(self) -> None:
        return None

    def fire(self) -> bool:
        callback = self._on_tick
        if callback is None:
            return False
        keep_going = callback()
        if not keep_going and self._on_tick is callback:
            self._on_tick = None
        return keep_going


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingStore:
    def __init__(self, initial: Sequence[WinnerRecord] = (), fail: bool = False) -> None:
        self.saved: List[WinnerRecord] = list(initial)
        self.fail = fail
        self.batches = 0

    def load(self) -> Sequence[WinnerRecord]:
        return list(self.saved)

    def save(self, records: Sequence[WinnerRecord]) -> None:
        if self.fail:
            raise RuntimeError("store unavailable")
        self.batches += 1
        self.saved.extend(records)


FIXED_DAY = dt.date(2024, 2, 1)


def make_entrants(count: int, start: int = 1) -> List[Entrant]:
    return [
        Entrant(
            id=entrant_id,
            name=f"Entrant {entrant_id}",
            phone=f"+6010000{entrant_id:04d}",
            email=f"entrant{entrant_id}@example.com",
            submission_date=dt.date(2024, 1, 1),
        )
        for entrant_id in range(start, start + count)
    ]
