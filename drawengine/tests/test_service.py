import asyncio
import io
import random
import unittest

from drawengine.config import EngineSettings
from drawengine.entrants import SAMPLE_ENTRANTS
from drawengine.ledger import Ledger
from drawengine.service import format_ledger, format_snapshot, parse_args, run_draw
from drawengine.session import DrawSession
from drawengine.tests.fakes import make_entrants
from drawengine.types import PrizeType, SessionStatus


def _fast_session(entrants) -> DrawSession:
    settings = EngineSettings(spin_min_ms=5, spin_max_ms=10, tick_interval_ms=1)
    return DrawSession(entrants, ledger=Ledger(), rng=random.Random(21), settings=settings)


class RunDrawTests(unittest.TestCase):
    def test_monthly_runs_main_and_backup(self) -> None:
        session = _fast_session(make_entrants(25))
        snapshot = asyncio.run(asyncio.wait_for(run_draw(session, PrizeType.MONTHLY), timeout=5))

        self.assertEqual(snapshot.status, SessionStatus.COMPLETE)
        self.assertEqual(len(snapshot.main_winners), 10)
        self.assertEqual(len(snapshot.current_winners), 20)
        self.assertEqual(sum(1 for r in session.ledger if r.is_backup), 10)

        text = format_snapshot(snapshot)
        self.assertEqual(text.count("(main)"), 10)
        self.assertEqual(text.count("(backup)"), 10)

    def test_bonus_draw_and_ledger_listing(self) -> None:
        session = _fast_session(SAMPLE_ENTRANTS)
        snapshot = asyncio.run(asyncio.wait_for(run_draw(session, PrizeType.BONUS), timeout=5))
        self.assertEqual(len(snapshot.current_winners), 1)

        out = io.StringIO()
        format_ledger(session, 12, out)
        self.assertIn("BONUS", out.getvalue())
        self.assertNotIn("(Backup)", out.getvalue())

    def test_locked_prize_type_is_reported(self) -> None:
        session = _fast_session(make_entrants(25))
        asyncio.run(asyncio.wait_for(run_draw(session, PrizeType.TOP4), timeout=5))
        with self.assertRaises(RuntimeError):
            asyncio.run(run_draw(session, PrizeType.MONTHLY))

    def test_empty_pool_message(self) -> None:
        session = _fast_session([])
        self.assertIn("No Eligible Participants", format_snapshot(session.snapshot()))

    def test_parse_args(self) -> None:
        args = parse_args(["--draw", "top4", "--seed", "3", "--entrants", "entries.json"])
        self.assertEqual(args.draw, "top4")
        self.assertEqual(args.seed, 3)
        self.assertEqual(args.entrants, "entries.json")
        self.assertFalse(args.verbose)


if __name__ == "__main__":
    unittest.main()
