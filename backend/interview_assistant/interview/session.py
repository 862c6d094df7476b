import uuid

from core.state import SessionStatus
from .models import InterviewSession, utcnow
from .questions import generate_questions


def create_session(candidate_id: str) -> InterviewSession:
    return InterviewSession(
        id=str(uuid.uuid4()),
        candidate_id=candidate_id,
        start_time=utcnow(),
        questions=generate_questions(),
        status=SessionStatus.IN_PROGRESS,
        current_question_index=0,
    )


def close_session(session: InterviewSession, total_score: float, summary: str) -> None:
    session.status = SessionStatus.COMPLETED
    session.end_time = utcnow()
    session.total_score = total_score
    session.ai_summary = summary
