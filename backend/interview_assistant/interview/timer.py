from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional


logger = logging.getLogger("interview.timer")


class CountdownTimer:
    """
    Whole-second countdown driven by an asyncio task.

    pause() cancels the task but keeps `remaining`; a partially elapsed tick is
    discarded, so pause/resume never loses or gains a second. `on_expire` fires
    once per arming, after the task has detached itself, so the callback may
    safely re-arm this timer.
    """

    def __init__(self, on_expire: Callable[[], None], tick_interval: float = 1.0, name: str = ""):
        self.on_expire = on_expire
        self.tick_interval = max(0.001, float(tick_interval))
        self.name = name
        self.remaining = 0
        self.expired = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, seconds: int) -> None:
        self._stop_task()
        self.remaining = max(0, int(seconds))
        self.expired = False
        self._spawn()

    def pause(self) -> None:
        self._stop_task()

    def resume(self) -> None:
        if self.running or self.expired:
            return
        self._spawn()

    def cancel(self) -> None:
        self._stop_task()
        self.remaining = 0

    def _spawn(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._run())

    def _stop_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self.tick_interval)
            self.remaining -= 1

        self.expired = True
        self._task = None
        logger.info("[TIMER %s] expired", self.name)
        try:
            self.on_expire()
        except Exception:
            logger.exception("[TIMER %s] expiry callback failed", self.name)
