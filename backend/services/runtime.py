"""Hosts the draw session on a dedicated asyncio loop for the WSGI app.

Flask handlers run on request threads while the spin animation needs a
running event loop. Every command is marshalled onto the loop thread, so
start/stop/reset and pacer ticks never interleave.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from functools import lru_cache
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar, Union

from drawengine.config import EngineSettings
from drawengine.entrants import build_entrant_source
from drawengine.ledger import Ledger, LedgerStore
from drawengine.session import DrawSession
from drawengine.types import PrizeType, SessionSnapshot

from ..config import load_settings
from .winners import WinnerRepository

T = TypeVar("T")


class DrawLoopRunner:
    def __init__(self, name: str = "luckydraw-loop") -> None:
        self._loop = asyncio.new_event_loop()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def submit(self, coro: Awaitable[T]) -> Future:
        if self._closed:
            raise RuntimeError("Draw loop has been shut down")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def run(self, coro: Awaitable[T], timeout: Optional[float] = None) -> T:
        return self.submit(coro).result(timeout)

    def call(self, fn: Callable[..., T], *args: Any, timeout: Optional[float] = None) -> T:
        async def invoke() -> T:
            return fn(*args)

        return self.run(invoke(), timeout=timeout)

    def shutdown(self, timeout: float = 5.0) -> None:
        if self._closed:
            return
        self.run(self._cancel_pending(), timeout=timeout)
        self._closed = True
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        self._loop.close()

    @staticmethod
    async def _cancel_pending() -> None:
        current = asyncio.current_task()
        tasks = [task for task in asyncio.all_tasks() if task is not current]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


class DrawRuntime:
    """One draw session plus the loop that paces it."""

    def __init__(
        self,
        settings: EngineSettings,
        store: Optional[LedgerStore] = None,
        runner: Optional[DrawLoopRunner] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or logging.getLogger("luckydraw.runtime")
        entrants = build_entrant_source(settings.entrants).load_entrants()
        self._runner = runner or DrawLoopRunner()
        self.session = DrawSession(entrants, ledger=Ledger(store), settings=settings)
        self._logger.info("Draw runtime ready with %s entrants", len(entrants))

    def start(self) -> Tuple[bool, SessionSnapshot]:
        return self._command(self.session.start)

    def stop(self) -> Tuple[bool, SessionSnapshot]:
        return self._command(self.session.stop)

    def reset(self) -> Tuple[bool, SessionSnapshot]:
        return self._command(self.session.reset)

    def set_prize_type(self, prize_type: Union[PrizeType, str]) -> Tuple[bool, SessionSnapshot]:
        return self._command(self.session.set_prize_type, prize_type)

    def snapshot(self) -> SessionSnapshot:
        return self._runner.call(self.session.snapshot)

    def wait_settled(self, timeout: Optional[float] = None) -> SessionSnapshot:
        self._runner.run(self.session.wait_settled(), timeout=timeout)
        return self.snapshot()

    def shutdown(self) -> None:
        self._runner.call(self.session.reset)
        self._runner.shutdown()

    def _command(self, fn: Callable[..., bool], *args: Any) -> Tuple[bool, SessionSnapshot]:
        def apply() -> Tuple[bool, SessionSnapshot]:
            accepted = fn(*args)
            return accepted, self.session.snapshot()

        return self._runner.call(apply)


@lru_cache(maxsize=1)
def get_runtime() -> DrawRuntime:
    settings = load_settings()
    return DrawRuntime(settings.engine, store=WinnerRepository())


def shutdown_runtime() -> None:
    if get_runtime.cache_info().currsize:
        get_runtime().shutdown()
    get_runtime.cache_clear()
