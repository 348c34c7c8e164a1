"""Recurring countdown tick driven by an asyncio task."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class CountdownTimer:
    """Call ``on_tick`` every ``interval`` seconds until stopped.

    Starting again supersedes the previous countdown.
    """

    def __init__(self, on_tick: Callable[[], object], *, interval: float = 1.0) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._on_tick()
            except Exception:  # noqa: BLE001
                logger.exception("Countdown tick failed")


__all__ = ["CountdownTimer"]
