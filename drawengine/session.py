"""Draw session state machine.

One ``DrawSession`` owns a fixed entrant pool and moves through
``idle -> spinning -> selecting -> (awaiting-next-stage | complete)``.
Monthly draws run in two operator-triggered stages (main, then backup);
bonus and top4 draws settle after a single spin and may be re-run freely.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .config import EngineSettings
from .eligibility import EligibilityStore, eligible_pool, winner_count
from .ledger import Ledger
from .pacer import AsyncioPacer, Pacer
from .selector import RandomSource, build_random_source, roll_spin_duration, select_winners
from .types import (
    DrawPhase,
    Entrant,
    PrizeType,
    SessionSnapshot,
    SessionStatus,
    WinnerRecord,
)

Listener = Callable[[SessionSnapshot], None]


@dataclass(frozen=True)
class _Spin:
    pool: Tuple[Entrant, ...]
    duration_ms: float
    started_at: float
    resume_status: SessionStatus


class DrawSession:
    def __init__(
        self,
        entrants: Iterable[Entrant],
        *,
        ledger: Optional[Ledger] = None,
        eligibility: Optional[EligibilityStore] = None,
        rng: Optional[RandomSource] = None,
        pacer: Optional[Pacer] = None,
        settings: Optional[EngineSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], dt.date] = dt.date.today,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._entrants: Tuple[Entrant, ...] = tuple(entrants)
        self._settings = settings or EngineSettings()
        self._ledger = ledger if ledger is not None else Ledger()
        self._eligibility = (
            eligibility if eligibility is not None else EligibilityStore.from_records(self._ledger)
        )
        self._rng = rng or build_random_source(self._settings.random_seed)
        self._pacer = pacer or AsyncioPacer(self._settings.tick_interval_ms)
        self._clock = clock
        self._today = today
        self._logger = logger or logging.getLogger("luckydraw.session")
        self._listeners: List[Listener] = []

        self._prize_type = PrizeType.MONTHLY
        self._status = SessionStatus.IDLE
        self._phase = DrawPhase.MAIN
        self._spin: Optional[_Spin] = None
        self._display_index = 0
        self._current_winners: List[Entrant] = []
        self._main_winners: List[Entrant] = []

    @property
    def entrants(self) -> Tuple[Entrant, ...]:
        return self._entrants

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def eligibility(self) -> EligibilityStore:
        return self._eligibility

    @property
    def prize_type(self) -> PrizeType:
        return self._prize_type

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def phase(self) -> DrawPhase:
        return self._phase

    @property
    def current_winners(self) -> Tuple[Entrant, ...]:
        return tuple(self._current_winners)

    @property
    def main_winners(self) -> Tuple[Entrant, ...]:
        return tuple(self._main_winners)

    def eligible_pool(self) -> List[Entrant]:
        return eligible_pool(self._entrants, self._prize_type, self._eligibility)

    # Operator commands

    def start(self) -> bool:
        if self._status in (SessionStatus.SPINNING, SessionStatus.SELECTING):
            return self._ignore("start", "a draw is already spinning")
        if self._status is SessionStatus.COMPLETE and self._prize_type is PrizeType.MONTHLY:
            return self._ignore("start", "monthly draw is complete; reset before drawing again")

        pool = self.eligible_pool()
        if not pool:
            return self._ignore("start", f"no eligible entrants for {self._prize_type.value}")

        spin = _Spin(
            pool=tuple(pool),
            duration_ms=roll_spin_duration(
                self._rng, self._settings.spin_min_ms, self._settings.spin_max_ms
            ),
            started_at=self._clock(),
            resume_status=self._status,
        )
        self._pacer.start(self.tick)
        self._spin = spin
        self._display_index = 0
        self._status = SessionStatus.SPINNING
        self._logger.info(
            "Spinning %s/%s over %s entrants for %.0fms",
            self._prize_type.value,
            self._phase.value,
            len(spin.pool),
            spin.duration_ms,
        )
        self._notify()
        return True

    def stop(self) -> bool:
        spin = self._spin
        if self._status is not SessionStatus.SPINNING or spin is None:
            return self._ignore("stop", "no draw is spinning")
        self._pacer.cancel()
        self._spin = None
        self._status = spin.resume_status
        self._logger.info("Spin stopped by operator; no winners selected.")
        self._notify()
        return True

    def reset(self) -> bool:
        self._pacer.cancel()
        self._spin = None
        self._current_winners = []
        self._main_winners = []
        self._display_index = 0
        self._phase = DrawPhase.MAIN
        self._status = SessionStatus.IDLE
        self._logger.info("Session reset (ledger=%s, excluded=%s)", len(self._ledger), len(self._eligibility))
        self._notify()
        return True

    def set_prize_type(self, value: Union[PrizeType, str]) -> bool:
        prize_type = PrizeType.parse(value)
        if prize_type is self._prize_type:
            return True
        if not self._is_fresh():
            return self._ignore(
                "set_prize_type",
                f"{self._prize_type.value} session in progress; reset before switching to {prize_type.value}",
            )
        self._prize_type = prize_type
        self._display_index = 0
        self._logger.info("Prize type set to %s", prize_type.value)
        self._notify()
        return True

    # Pacer callback

    def tick(self) -> bool:
        """Advance the display; settle the draw once the spin time is up."""
        spin = self._spin
        if self._status is not SessionStatus.SPINNING or spin is None:
            return False
        self._display_index = (self._display_index + 1) % len(spin.pool)
        elapsed_ms = (self._clock() - spin.started_at) * 1000.0
        if elapsed_ms >= spin.duration_ms:
            self._settle(spin)
            return False
        self._notify()
        return True

    async def wait_settled(self) -> None:
        await self._pacer.wait()

    # Rendering

    def snapshot(self) -> SessionSnapshot:
        eligible = self.eligible_pool()
        shown: Sequence[Entrant] = self._spin.pool if self._spin is not None else eligible
        display_entrant = shown[self._display_index] if self._display_index < len(shown) else None
        return SessionSnapshot(
            prize_type=self._prize_type,
            status=self._status,
            phase=self._phase,
            display_index=self._display_index,
            display_entrant=display_entrant,
            current_winners=tuple(self._current_winners),
            main_winners=tuple(self._main_winners),
            eligible_count=len(eligible),
            excluded_count=len(self._eligibility),
            total_entrants=len(self._entrants),
            ledger_size=len(self._ledger),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Internals

    def _is_fresh(self) -> bool:
        return (
            self._status is SessionStatus.IDLE
            and self._phase is DrawPhase.MAIN
            and not self._current_winners
        )

    def _settle(self, spin: _Spin) -> None:
        self._status = SessionStatus.SELECTING
        # Cancel before committing so no tick can observe a half-settled draw.
        self._pacer.cancel()
        self._spin = None

        count = winner_count(self._prize_type, self._phase)
        already_chosen = {entrant.id for entrant in self._current_winners}
        new_winners = select_winners(spin.pool, already_chosen, count, self._rng)

        if self._prize_type is PrizeType.MONTHLY and self._phase is DrawPhase.MAIN:
            self._main_winners = list(new_winners)
            self._current_winners = list(new_winners)
            self._phase = DrawPhase.BACKUP
            self._status = SessionStatus.AWAITING_BACKUP
            self._logger.info(
                "Monthly main stage drew %s of %s winners; awaiting backup draw.",
                len(new_winners),
                count,
            )
        else:
            self._current_winners.extend(new_winners)
            self._phase = DrawPhase.COMPLETE
            self._status = SessionStatus.COMPLETE
            self._logger.info(
                "%s draw drew %s of %s winners.", self._prize_type.value, len(new_winners), count
            )
            self._commit(new_winners)
        self._notify()

    def _build_records(self, new_winners: Sequence[Entrant]) -> List[WinnerRecord]:
        draw_date = self._today()
        if self._prize_type is PrizeType.MONTHLY:
            return [
                WinnerRecord(entrant, PrizeType.MONTHLY, draw_date, is_backup=False)
                for entrant in self._main_winners
            ] + [
                WinnerRecord(entrant, PrizeType.MONTHLY, draw_date, is_backup=True)
                for entrant in new_winners
            ]
        return [
            WinnerRecord(entrant, self._prize_type, draw_date, is_backup=False)
            for entrant in new_winners
        ]

    def _commit(self, new_winners: Sequence[Entrant]) -> None:
        # The session has already settled; a failed write leaves it complete.
        try:
            records = self._build_records(new_winners)
            self._ledger.append(records)
        except Exception as exc:
            self._logger.exception("Failed to record %s winners: %s", len(new_winners), exc)
            return

        if self._prize_type is PrizeType.MONTHLY:
            self._eligibility.exclude(record.entrant.id for record in records)
            self._logger.info("%s entrants now excluded from monthly draws.", len(self._eligibility))

    def _ignore(self, command: str, reason: str) -> bool:
        self._logger.info("Ignoring %s: %s", command, reason)
        return False

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as exc:
                self._logger.exception("Session listener failed: %s", exc)
