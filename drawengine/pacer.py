from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

TickCallback = Callable[[], bool]


class Pacer(Protocol):
    @property
    def active(self) -> bool:
        ...

    def start(self, on_tick: TickCallback) -> None:
        ...

    def cancel(self) -> None:
        ...

    async def wait(self) -> None:
        ...


class AsyncioPacer:
    """Repeating timer task driving the spinning name display.

    ``on_tick`` runs every ``interval_ms`` on the running loop until it
    returns ``False`` or the pacer is cancelled. Every ``start``/``cancel``
    bumps a generation counter; a tick belonging to an older generation is
    dropped, so nothing is delivered once ``cancel`` has returned.
    """

    def __init__(self, interval_ms: int = 100, logger: Optional[logging.Logger] = None) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._interval = interval_ms / 1000.0
        self._logger = logger or logging.getLogger("luckydraw.pacer")
        self._generation = 0
        self._live = False
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._live

    def start(self, on_tick: TickCallback) -> None:
        self.cancel()
        self._generation += 1
        self._live = True
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(self._generation, on_tick))
        self._logger.debug("Pacer started (generation=%s)", self._generation)

    def cancel(self) -> None:
        if not self._live:
            return
        self._generation += 1
        self._live = False
        task = self._task
        # A tick callback may cancel its own pacer; that task ends on return.
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self._logger.debug("Pacer cancelled")

    async def wait(self) -> None:
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def _run(self, generation: int, on_tick: TickCallback) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if generation != self._generation:
                return
            try:
                keep_going = on_tick()
            except Exception as exc:
                self._logger.exception("Pacer tick failed: %s", exc)
                keep_going = False
            if not keep_going:
                if generation == self._generation:
                    self._live = False
                return
