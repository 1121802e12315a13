from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Set, TextIO

from .config import EngineSettings, load_config
from .entrants import build_entrant_source
from .ledger import Ledger
from .session import DrawSession
from .types import DrawPhase, PrizeType, SessionSnapshot, SessionStatus

HELP_TEXT = "commands: start | stop | reset | prize <monthly|bonus|top4> | status | ledger | quit"


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def build_session(settings: EngineSettings, logger: Optional[logging.Logger] = None) -> DrawSession:
    entrants = build_entrant_source(settings.entrants).load_entrants()
    return DrawSession(entrants, ledger=Ledger(), settings=settings, logger=logger)


def format_snapshot(snapshot: SessionSnapshot) -> str:
    lines = [
        f"{snapshot.prize_type.value} | {snapshot.status.value} | phase={snapshot.phase.value} | "
        f"eligible={snapshot.eligible_count}/{snapshot.total_entrants} | excluded={snapshot.excluded_count}"
    ]
    main_ids = {entrant.id for entrant in snapshot.main_winners}
    for entrant in snapshot.current_winners:
        tag = ""
        if snapshot.prize_type is PrizeType.MONTHLY:
            tag = " (main)" if entrant.id in main_ids else " (backup)"
        lines.append(f"  #{entrant.id} {entrant.name} {entrant.phone}{tag}")
    if not snapshot.current_winners and snapshot.status is not SessionStatus.SPINNING:
        lines.append("  no winners yet" if snapshot.eligible_count else "  No Eligible Participants")
    return "\n".join(lines)


def format_ledger(session: DrawSession, limit: int, out: TextIO) -> None:
    records = session.ledger.recent(limit)
    if not records:
        print("ledger is empty", file=out)
        return
    for record in records:
        backup = " (Backup)" if record.is_backup else ""
        print(
            f"{record.draw_date.isoformat()} {record.prize_type.value.upper()}{backup} "
            f"#{record.entrant.id} {record.entrant.name}",
            file=out,
        )


async def run_draw(session: DrawSession, prize_type: PrizeType) -> SessionSnapshot:
    """Run one full draw unattended; monthly runs main then backup."""
    if not session.set_prize_type(prize_type):
        raise RuntimeError(f"Cannot switch to {prize_type.value}; reset the session first")
    if not session.start():
        return session.snapshot()
    await session.wait_settled()
    if session.phase is DrawPhase.BACKUP and session.start():
        await session.wait_settled()
    return session.snapshot()


async def _report_when_settled(session: DrawSession, out: TextIO) -> None:
    await session.wait_settled()
    if session.status is not SessionStatus.SPINNING:
        print(format_snapshot(session.snapshot()), file=out)


async def run_console(session: DrawSession, limit: int, out: TextIO = sys.stdout) -> None:
    logger = logging.getLogger("luckydraw.console")
    pending: Set[asyncio.Task] = set()
    print(HELP_TEXT, file=out)
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            break
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        if not command:
            continue
        if command in {"quit", "exit"}:
            break
        if command == "start":
            if session.start():
                task = asyncio.create_task(_report_when_settled(session, out))
                pending.add(task)
                task.add_done_callback(pending.discard)
        elif command == "stop":
            session.stop()
        elif command == "reset":
            session.reset()
        elif command == "prize":
            try:
                session.set_prize_type(argument)
            except ValueError as exc:
                logger.warning("%s", exc)
        elif command == "status":
            print(format_snapshot(session.snapshot()), file=out)
        elif command == "ledger":
            format_ledger(session, limit, out)
        else:
            print(HELP_TEXT, file=out)
    session.reset()


async def run(args: argparse.Namespace) -> Optional[SessionSnapshot]:
    settings = load_config(args.env_file)
    updates = {}
    if args.entrants:
        updates["entrants"] = replace(settings.entrants, path=args.entrants)
    if args.seed is not None:
        updates["random_seed"] = args.seed
    if updates:
        settings = settings.copy(**updates)

    configure_logging(args.verbose)
    logger = logging.getLogger("luckydraw.session")
    session = build_session(settings, logger=logger)
    logger.info("Loaded %s entrants", len(session.entrants))

    if args.draw:
        snapshot = await run_draw(session, PrizeType.parse(args.draw))
        print(format_snapshot(snapshot))
        return snapshot

    await run_console(session, settings.leaderboard_size)
    return None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lucky draw operator console")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument("--entrants", type=str, default=None, help="JSON or CSV entrant export.")
    parser.add_argument("--seed", type=int, default=None, help="Seed the draw for a reproducible run.")
    parser.add_argument(
        "--draw",
        choices=[prize.value for prize in PrizeType],
        default=None,
        help="Run one complete draw of this prize type and exit.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Lucky draw stopped by user.")


if __name__ == "__main__":
    main()
