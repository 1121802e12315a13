import asyncio
import random
import unittest

from drawengine.config import EngineSettings
from drawengine.entrants import SAMPLE_ENTRANTS
from drawengine.pacer import AsyncioPacer
from drawengine.session import DrawSession
from drawengine.types import PrizeType, SessionStatus


class AsyncioPacerTests(unittest.TestCase):
    def test_ticks_until_callback_returns_false(self) -> None:
        ticks = []

        def on_tick() -> bool:
            ticks.append(len(ticks))
            return len(ticks) < 3

        async def scenario() -> bool:
            pacer = AsyncioPacer(interval_ms=1)
            pacer.start(on_tick)
            self.assertTrue(pacer.active)
            await asyncio.wait_for(pacer.wait(), timeout=2)
            return pacer.active

        still_active = asyncio.run(scenario())
        self.assertEqual(ticks, [0, 1, 2])
        self.assertFalse(still_active)

    def test_cancel_is_idempotent_and_stops_ticks(self) -> None:
        ticks = []

        async def scenario() -> None:
            pacer = AsyncioPacer(interval_ms=5)
            pacer.start(lambda: ticks.append(1) or True)
            await asyncio.sleep(0.03)
            pacer.cancel()
            pacer.cancel()
            delivered = len(ticks)
            await asyncio.sleep(0.03)
            self.assertEqual(len(ticks), delivered)
            self.assertFalse(pacer.active)
            await pacer.wait()

        asyncio.run(scenario())
        self.assertGreater(len(ticks), 0)

    def test_restart_drops_previous_generation(self) -> None:
        first, second = [], []

        async def scenario() -> None:
            pacer = AsyncioPacer(interval_ms=2)
            pacer.start(lambda: first.append(1) or True)
            await asyncio.sleep(0.01)
            pacer.start(lambda: second.append(1) or len(second) < 2)
            frozen = len(first)
            await asyncio.wait_for(pacer.wait(), timeout=2)
            self.assertEqual(len(first), frozen)

        asyncio.run(scenario())
        self.assertEqual(len(second), 2)

    def test_failing_tick_stops_pacer(self) -> None:
        def on_tick() -> bool:
            raise RuntimeError("boom")

        async def scenario() -> bool:
            pacer = AsyncioPacer(interval_ms=1)
            pacer.start(on_tick)
            await asyncio.wait_for(pacer.wait(), timeout=2)
            return pacer.active

        with self.assertLogs("luckydraw.pacer", level="ERROR"):
            self.assertFalse(asyncio.run(scenario()))

    def test_rejects_non_positive_interval(self) -> None:
        with self.assertRaises(ValueError):
            AsyncioPacer(interval_ms=0)


class SessionWithAsyncioPacerTests(unittest.TestCase):
    def _settings(self) -> EngineSettings:
        return EngineSettings(spin_min_ms=20, spin_max_ms=40, tick_interval_ms=2)

    def test_spin_settles_on_its_own(self) -> None:
        async def scenario() -> DrawSession:
            session = DrawSession(SAMPLE_ENTRANTS, rng=random.Random(3), settings=self._settings())
            session.set_prize_type(PrizeType.TOP4)
            self.assertTrue(session.start())
            await asyncio.wait_for(session.wait_settled(), timeout=2)
            return session

        session = asyncio.run(scenario())
        self.assertEqual(session.status, SessionStatus.COMPLETE)
        self.assertEqual(len(session.ledger), 4)

    def test_stop_before_duration_commits_nothing(self) -> None:
        async def scenario() -> DrawSession:
            settings = EngineSettings(spin_min_ms=5000, spin_max_ms=6000, tick_interval_ms=2)
            session = DrawSession(SAMPLE_ENTRANTS, rng=random.Random(3), settings=settings)
            session.start()
            await asyncio.sleep(0.02)
            self.assertTrue(session.stop())
            await asyncio.wait_for(session.wait_settled(), timeout=2)
            await asyncio.sleep(0.02)
            return session

        session = asyncio.run(scenario())
        self.assertEqual(session.status, SessionStatus.IDLE)
        self.assertEqual(len(session.ledger), 0)
        self.assertEqual(session.current_winners, ())


if __name__ == "__main__":
    unittest.main()
