import asyncio
import logging
import time
from typing import Optional


logger = logging.getLogger("interview.submission")


class SubmissionLock:
    """
    The "submitting" flag for one candidate. Held from before the first
    mutation of a submission until after the advance transition.
    """

    def __init__(self, owner: str = ""):
        self.owner = owner
        self._lock = asyncio.Lock()
        self._held = False
        self.acquired_at: Optional[float] = None
        self.reason: Optional[str] = None

    @property
    def is_submitting(self) -> bool:
        return self._held

    async def try_acquire(self, reason: str) -> bool:
        async with self._lock:
            if self._held:
                logger.info(f"[SUBMIT {self.owner}] Rejected, submission in progress | held_by={self.reason} reason={reason}")
                return False

            self._held = True
            self.reason = reason
            self.acquired_at = time.monotonic()
            logger.info(f"[SUBMIT {self.owner}] Acquired | reason={reason}")
            return True

    async def release(self) -> None:
        async with self._lock:
            if self._held and self.acquired_at is not None:
                logger.info(f"[SUBMIT {self.owner}] Released | held={time.monotonic() - self.acquired_at:.2f}s")
            self._held = False
            self.reason = None
            self.acquired_at = None
