from __future__ import annotations

import copy
import uuid
from threading import RLock
from typing import Optional

from core.logger import log_event
from core.state import ActiveTab, SessionStatus
from interview_assistant.storage.state_store import InMemoryStateStore, StateStore, find_resumable_sessions
from interview_assistant.system_metrics import increment_metric
from .evaluator import RandomScoringPolicy, ScoreResult, ScoringPolicy, normalize_answer
from .models import AppState, Candidate, InterviewSession, utcnow
from .scorer import calculate_final_score
from .session import close_session, create_session


_EDITABLE_FIELDS = ("name", "email", "phone", "resume_text")


class InterviewController:
    """
    Owns the application state tree and is its only writer.

    Every public mutator is a declared transition: it either applies fully and
    flushes a snapshot to the store, or it is a no-op that returns a falsy value.
    Readers get deep copies.
    """

    def __init__(self, store: StateStore | None = None, scoring_policy: ScoringPolicy | None = None):
        self._lock = RLock()
        self._store = store if store is not None else InMemoryStateStore()
        self._scoring = scoring_policy or RandomScoringPolicy()
        self._state: AppState = self._store.load()

        resumable = find_resumable_sessions(self._state)
        if resumable:
            self._state.show_welcome_back_modal = True
            log_event(
                "engine",
                "resumable_sessions_detected",
                "",
                candidate_ids=[c.id for c in resumable],
            )

    # -------------------------
    # READ ACCESS
    # -------------------------

    def snapshot(self) -> AppState:
        with self._lock:
            return copy.deepcopy(self._state)

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            return copy.deepcopy(candidate) if candidate else None

    def get_current_session(self, candidate_id: str) -> Optional[InterviewSession]:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            if candidate is None or candidate.current_session is None:
                return None
            return copy.deepcopy(candidate.current_session)

    def resumable_sessions(self) -> list[Candidate]:
        with self._lock:
            return copy.deepcopy(find_resumable_sessions(self._state))

    # -------------------------
    # PROFILE / NAVIGATION
    # -------------------------

    def add_candidate(self, name: str, email: str, phone: str, resume_text: str | None = None) -> Candidate:
        with self._lock:
            candidate = Candidate(
                id=str(uuid.uuid4()),
                name=str(name or "").strip(),
                email=str(email or "").strip(),
                phone=str(phone or "").strip(),
                resume_text=resume_text,
                created_at=utcnow(),
            )
            self._state.candidates.append(candidate)
            self._commit("candidate_added", candidate.id, profile_complete=candidate.profile_complete)
            return copy.deepcopy(candidate)

    def update_candidate(self, candidate_id: str, **updates) -> bool:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            if candidate is None:
                return self._skip("candidate_update_skipped", candidate_id, reason="unknown_candidate")

            changed = []
            for key in _EDITABLE_FIELDS:
                if key not in updates or updates[key] is None:
                    continue
                value = updates[key] if key == "resume_text" else str(updates[key]).strip()
                setattr(candidate, key, value)
                changed.append(key)

            if not changed:
                return self._skip("candidate_update_skipped", candidate_id, reason="no_changes")

            self._commit("candidate_updated", candidate_id, fields=changed, profile_complete=candidate.profile_complete)
            return True

    def select_candidate(self, candidate_id: str | None) -> bool:
        with self._lock:
            if candidate_id is not None and self._state.find_candidate(candidate_id) is None:
                return self._skip("select_skipped", candidate_id, reason="unknown_candidate")
            self._state.current_candidate_id = candidate_id
            self._commit("candidate_selected", candidate_id or "")
            return True

    def set_active_tab(self, tab: str) -> bool:
        with self._lock:
            try:
                self._state.active_tab = ActiveTab(tab)
            except ValueError:
                return self._skip("tab_skipped", "", reason="unknown_tab", tab=tab)
            self._commit("tab_changed", "", tab=self._state.active_tab.value)
            return True

    def set_welcome_back_modal(self, visible: bool) -> bool:
        with self._lock:
            self._state.show_welcome_back_modal = bool(visible)
            self._commit("welcome_back_modal", "", visible=bool(visible))
            return True

    # -------------------------
    # SESSION TRANSITIONS
    # -------------------------

    def start(self, candidate_id: str) -> Optional[InterviewSession]:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            if candidate is None:
                self._skip("start_skipped", candidate_id, reason="unknown_candidate")
                return None
            if not candidate.profile_complete:
                self._skip("start_skipped", candidate_id, reason="profile_incomplete")
                return None
            if candidate.current_session is not None:
                self._skip("start_skipped", candidate_id, reason="session_exists")
                return None

            session = create_session(candidate_id)
            candidate.current_session = session

            other_in_progress = any(
                other.id != candidate_id
                and other.current_session is not None
                and other.current_session.status == SessionStatus.IN_PROGRESS
                for other in self._state.candidates
            )
            if other_in_progress and candidate_id != self._state.current_candidate_id:
                self._state.show_welcome_back_modal = True

            increment_metric("sessions_started")
            self._commit(
                "session_started",
                candidate_id,
                interview_session_id=session.id,
                welcome_back=self._state.show_welcome_back_modal,
            )
            return copy.deepcopy(session)

    def submit_answer(self, candidate_id: str, question_id: str, answer: str | None) -> Optional[ScoreResult]:
        with self._lock:
            session = self._current_session(candidate_id)
            if session is None:
                self._skip("submit_skipped", candidate_id, reason="no_session")
                return None
            question = session.find_question(question_id)
            if question is None:
                self._skip("submit_skipped", candidate_id, reason="unknown_question", question_id=question_id)
                return None

            text = normalize_answer(answer)
            result = self._scoring.score(text, question.difficulty)
            question.answer = text
            question.score = int(result.score)
            question.feedback = result.feedback

            increment_metric("answers_submitted")
            self._commit(
                "answer_submitted",
                candidate_id,
                question_id=question_id,
                answer=text,
                score=question.score,
            )
            return result

    def advance(self, candidate_id: str, expected_session_id: str | None = None) -> bool:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            session = candidate.current_session if candidate else None
            if session is None:
                return self._skip("advance_skipped", candidate_id, reason="no_session")
            if expected_session_id is not None and session.id != expected_session_id:
                return self._skip(
                    "advance_skipped",
                    candidate_id,
                    reason="session_replaced",
                    interview_session_id=expected_session_id,
                )

            session.current_question_index += 1

            if session.current_question_index >= len(session.questions):
                total_score, summary = calculate_final_score(session.questions)
                close_session(session, total_score, summary)
                candidate.completed_sessions.append(session)
                candidate.current_session = None
                increment_metric("sessions_completed")
                self._commit(
                    "session_completed",
                    candidate_id,
                    interview_session_id=session.id,
                    total_score=round(total_score, 2),
                )
                return True

            self._commit("question_advanced", candidate_id, index=session.current_question_index)
            return True

    def pause(self, candidate_id: str) -> bool:
        return self._switch_status(candidate_id, SessionStatus.IN_PROGRESS, SessionStatus.PAUSED, "session_paused")

    def resume(self, candidate_id: str) -> bool:
        return self._switch_status(candidate_id, SessionStatus.PAUSED, SessionStatus.IN_PROGRESS, "session_resumed")

    def reset(self, candidate_id: str) -> bool:
        with self._lock:
            candidate = self._state.find_candidate(candidate_id)
            if candidate is None or candidate.current_session is None:
                return self._skip("reset_skipped", candidate_id, reason="no_session")
            discarded = candidate.current_session.id
            candidate.current_session = None
            self._commit("session_reset", candidate_id, interview_session_id=discarded)
            return True

    # -------------------------
    # INTERNALS
    # -------------------------

    def _current_session(self, candidate_id: str) -> Optional[InterviewSession]:
        candidate = self._state.find_candidate(candidate_id)
        return candidate.current_session if candidate else None

    def _switch_status(self, candidate_id: str, expected: SessionStatus, target: SessionStatus, event: str) -> bool:
        with self._lock:
            session = self._current_session(candidate_id)
            if session is None:
                return self._skip(f"{event}_skipped", candidate_id, reason="no_session")
            if session.status != expected:
                return self._skip(f"{event}_skipped", candidate_id, reason="invalid_status", status=session.status.value)
            session.status = target
            self._commit(event, candidate_id, interview_session_id=session.id)
            return True

    def _commit(self, event: str, candidate_id: str, **details) -> None:
        self._store.save(self._state)
        log_event("engine", event, candidate_id, **details)

    def _skip(self, event: str, candidate_id: str, **details) -> bool:
        log_event("engine", event, candidate_id or "", **details)
        return False
