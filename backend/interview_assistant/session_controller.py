import asyncio
import logging
import time
from typing import Optional

from core.config import SUBMIT_PROCESSING_DELAY_SEC, TIMER_TICK_SEC
from core.logger import log_event
from core.state import SessionStatus
from interview_assistant.interview.engine import InterviewController
from interview_assistant.interview.models import InterviewSession
from interview_assistant.interview.submission import SubmissionLock
from interview_assistant.interview.timer import CountdownTimer
from interview_assistant.system_metrics import increment_metric, observe_submit_duration, set_metric


logger = logging.getLogger("session_controller")


class SessionController:
    """
    Drives live interviews on the event loop: one countdown per candidate,
    a draft answer buffer, and the submission lock shared by manual submits
    and timer expiry. All state changes go through InterviewController.
    """

    def __init__(
        self,
        controller: InterviewController,
        tick_interval: float = TIMER_TICK_SEC,
        processing_delay: float = SUBMIT_PROCESSING_DELAY_SEC,
    ):
        self.controller = controller
        self.tick_interval = tick_interval
        self.processing_delay = max(0.0, float(processing_delay))
        self.tasks: list[asyncio.Task] = []
        self._timers: dict[str, CountdownTimer] = {}
        self._armed_question: dict[str, str] = {}
        self._locks: dict[str, SubmissionLock] = {}
        self._drafts: dict[str, str] = {}

    # -------------------------
    # COMMANDS
    # -------------------------

    async def start_interview(self, candidate_id: str) -> Optional[InterviewSession]:
        session = self.controller.start(candidate_id)
        if session is not None:
            self._drafts.pop(candidate_id, None)
            self._sync_timer(candidate_id)
        return session

    async def restore_timers(self) -> int:
        """Arm countdowns for sessions that were in progress when the process stopped."""
        restored = 0
        for candidate in self.controller.resumable_sessions():
            if candidate.current_session.status == SessionStatus.IN_PROGRESS and candidate.id not in self._timers:
                self._sync_timer(candidate.id)
                restored += 1
        return restored

    def update_draft(self, candidate_id: str, text: str) -> bool:
        if self.controller.get_current_session(candidate_id) is None:
            return False
        self._drafts[candidate_id] = str(text or "")
        return True

    async def submit(
        self,
        candidate_id: str,
        answer: str | None = None,
        question_id: str | None = None,
        auto: bool = False,
    ) -> bool:
        reason = "timer_expired" if auto else "manual"
        lock = self._lock_for(candidate_id)
        if not await lock.try_acquire(reason):
            increment_metric("submissions_rejected")
            return False

        started = time.monotonic()
        try:
            session = self.controller.get_current_session(candidate_id)
            question = session.current_question if session else None
            if question is None or session.status != SessionStatus.IN_PROGRESS:
                log_event("runner", "submit_ignored", candidate_id, reason="not_in_progress")
                return False
            if question_id and question_id != question.id:
                log_event("runner", "submit_ignored", candidate_id, reason="stale_question", question_id=question_id)
                return False

            timer = self._timers.get(candidate_id)
            if timer is not None:
                timer.pause()

            text = answer if answer is not None else self._drafts.get(candidate_id, "")
            self.controller.submit_answer(candidate_id, question.id, text)

            # simulated evaluation latency, still inside the lock
            await asyncio.sleep(self.processing_delay)

            if not self.controller.advance(candidate_id, expected_session_id=session.id):
                # reset (and maybe restarted) while the answer was processing
                log_event("runner", "submit_discarded", candidate_id, interview_session_id=session.id)
                return False
            self._drafts.pop(candidate_id, None)
            if auto:
                increment_metric("auto_submits")
            self._sync_timer(candidate_id)
            return True
        finally:
            observe_submit_duration(time.monotonic() - started)
            await lock.release()

    async def pause(self, candidate_id: str) -> bool:
        if self.is_submitting(candidate_id):
            log_event("runner", "pause_rejected", candidate_id, reason="submitting")
            return False
        applied = self.controller.pause(candidate_id)
        if applied:
            timer = self._timers.get(candidate_id)
            if timer is not None:
                timer.pause()
            self._refresh_timer_metric()
        return applied

    async def resume(self, candidate_id: str) -> bool:
        applied = self.controller.resume(candidate_id)
        session = self.controller.get_current_session(candidate_id)
        if session is None or session.status != SessionStatus.IN_PROGRESS or session.current_question is None:
            return applied

        timer = self._timers.get(candidate_id)
        same_question = self._armed_question.get(candidate_id) == session.current_question.id
        if timer is not None and same_question and timer.expired:
            # expiry fired while paused, its submit was ignored
            self.create_task(self.submit(candidate_id, question_id=session.current_question.id, auto=True))
        elif timer is not None and same_question and not timer.running:
            timer.resume()
        else:
            # nothing armed yet, e.g. after a process restart
            self._sync_timer(candidate_id)
        self._refresh_timer_metric()
        return applied

    async def reset(self, candidate_id: str) -> bool:
        applied = self.controller.reset(candidate_id)
        if applied:
            self._drop_timer(candidate_id)
            self._drafts.pop(candidate_id, None)
        return applied

    # -------------------------
    # VIEW
    # -------------------------

    def time_left(self, candidate_id: str) -> Optional[int]:
        timer = self._timers.get(candidate_id)
        return timer.remaining if timer is not None else None

    def is_submitting(self, candidate_id: str) -> bool:
        lock = self._locks.get(candidate_id)
        return bool(lock and lock.is_submitting)

    def draft(self, candidate_id: str) -> str:
        return self._drafts.get(candidate_id, "")

    # -------------------------
    # TIMERS
    # -------------------------

    def _sync_timer(self, candidate_id: str) -> None:
        session = self.controller.get_current_session(candidate_id)
        question = session.current_question if session else None
        if question is None:
            self._drop_timer(candidate_id)
            return

        if session.status == SessionStatus.IN_PROGRESS and self._armed_question.get(candidate_id) != question.id:
            timer = self._timers.get(candidate_id)
            if timer is None:
                timer = CountdownTimer(
                    on_expire=lambda: self._on_timer_expired(candidate_id),
                    tick_interval=self.tick_interval,
                    name=candidate_id,
                )
                self._timers[candidate_id] = timer
            timer.start(question.time_limit)
            self._armed_question[candidate_id] = question.id
            log_event("runner", "timer_armed", candidate_id, question_id=question.id, seconds=question.time_limit)
        self._refresh_timer_metric()

    def _drop_timer(self, candidate_id: str) -> None:
        timer = self._timers.pop(candidate_id, None)
        if timer is not None:
            timer.cancel()
        self._armed_question.pop(candidate_id, None)
        self._refresh_timer_metric()

    def _on_timer_expired(self, candidate_id: str) -> None:
        question_id = self._armed_question.get(candidate_id)
        log_event("runner", "timer_expired", candidate_id, question_id=question_id)
        self.create_task(self.submit(candidate_id, question_id=question_id, auto=True))

    def _lock_for(self, candidate_id: str) -> SubmissionLock:
        lock = self._locks.get(candidate_id)
        if lock is None:
            lock = SubmissionLock(owner=candidate_id)
            self._locks[candidate_id] = lock
        return lock

    def _refresh_timer_metric(self) -> None:
        set_metric("timers_active", float(sum(1 for t in self._timers.values() if t.running)))

    # -------------------------
    # TASKS
    # -------------------------

    def create_task(self, coro):
        self.tasks = [task for task in self.tasks if not task.done()]
        task = asyncio.create_task(coro)
        self.tasks.append(task)
        return task

    async def wait_idle(self) -> None:
        pending = [task for task in self.tasks if not task.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def stop(self):
        logger.info("Stopping session controller | timers=%s tasks=%s", len(self._timers), len(self.tasks))
        for candidate_id in list(self._timers):
            self._drop_timer(candidate_id)

        for task in self.tasks:
            task.cancel()

        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks = []
