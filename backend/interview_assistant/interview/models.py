from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from core.state import ActiveTab, Difficulty, SessionStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Question:
    id: str
    text: str
    difficulty: Difficulty
    time_limit: int
    timestamp: datetime = field(default_factory=utcnow)

    # answer, score and feedback are written together by submit_answer
    answer: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.answer is not None


@dataclass
class InterviewSession:
    id: str
    candidate_id: str
    start_time: datetime
    questions: List[Question]
    status: SessionStatus = SessionStatus.NOT_STARTED
    current_question_index: int = 0
    end_time: Optional[datetime] = None
    total_score: Optional[float] = None
    ai_summary: Optional[str] = None

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def find_question(self, question_id: str) -> Optional[Question]:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass
class Candidate:
    id: str
    name: str
    email: str
    phone: str
    created_at: datetime = field(default_factory=utcnow)
    resume_text: Optional[str] = None
    current_session: Optional[InterviewSession] = None
    completed_sessions: List[InterviewSession] = field(default_factory=list)

    @property
    def profile_complete(self) -> bool:
        return bool(
            str(self.name or "").strip()
            and str(self.email or "").strip()
            and str(self.phone or "").strip()
        )

    @property
    def latest_session(self) -> Optional[InterviewSession]:
        return self.completed_sessions[-1] if self.completed_sessions else None


@dataclass
class AppState:
    """
    The whole application state tree. Only InterviewController writes to it.
    """
    candidates: List[Candidate] = field(default_factory=list)
    current_candidate_id: Optional[str] = None
    active_tab: ActiveTab = ActiveTab.INTERVIEWEE
    show_welcome_back_modal: bool = False

    def find_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return next((c for c in self.candidates if c.id == candidate_id), None)
