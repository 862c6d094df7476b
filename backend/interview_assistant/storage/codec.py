from __future__ import annotations

from datetime import datetime
from typing import Any

from core.state import ActiveTab, Difficulty, SessionStatus
from interview_assistant.interview.models import AppState, Candidate, InterviewSession, Question
from interview_assistant.interview.questions import QUESTIONS_PER_SESSION


SNAPSHOT_VERSION = 1


class SnapshotFormatError(ValueError):
    pass


# -------------------------
# ENCODE
# -------------------------

def _encode_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def encode_question(question: Question) -> dict[str, Any]:
    return {
        "id": question.id,
        "text": question.text,
        "difficulty": question.difficulty.value,
        "time_limit": int(question.time_limit),
        "answer": question.answer,
        "score": question.score,
        "feedback": question.feedback,
        "timestamp": _encode_dt(question.timestamp),
    }


def encode_session(session: InterviewSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "candidate_id": session.candidate_id,
        "start_time": _encode_dt(session.start_time),
        "end_time": _encode_dt(session.end_time),
        "status": session.status.value,
        "current_question_index": int(session.current_question_index),
        "questions": [encode_question(q) for q in session.questions],
        "total_score": session.total_score,
        "ai_summary": session.ai_summary,
    }


def encode_candidate(candidate: Candidate) -> dict[str, Any]:
    return {
        "id": candidate.id,
        "name": candidate.name,
        "email": candidate.email,
        "phone": candidate.phone,
        "resume_text": candidate.resume_text,
        "created_at": _encode_dt(candidate.created_at),
        "profile_complete": candidate.profile_complete,
        "current_session": encode_session(candidate.current_session) if candidate.current_session else None,
        "completed_sessions": [encode_session(s) for s in candidate.completed_sessions],
    }


def encode_state(state: AppState) -> dict[str, Any]:
    return {
        "candidates": [encode_candidate(c) for c in state.candidates],
        "current_candidate_id": state.current_candidate_id,
        "active_tab": state.active_tab.value,
        "show_welcome_back_modal": bool(state.show_welcome_back_modal),
    }


def encode_snapshot(state: AppState) -> dict[str, Any]:
    return {"version": SNAPSHOT_VERSION, "state": encode_state(state)}


# -------------------------
# DECODE
# -------------------------

def _require_dict(raw: Any, what: str) -> dict:
    if not isinstance(raw, dict):
        raise SnapshotFormatError(f"{what} must be an object")
    return raw


def _require_str(raw: dict, key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise SnapshotFormatError(f"{key} must be a string")
    return value


def _decode_dt(value: Any, key: str, required: bool = True) -> datetime | None:
    if value is None and not required:
        return None
    if not isinstance(value, str):
        raise SnapshotFormatError(f"{key} must be an ISO timestamp")
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise SnapshotFormatError(f"{key} is not a valid timestamp") from exc


def _decode_optional_int(value: Any, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotFormatError(f"{key} must be a number")
    return int(value)


def _decode_question(raw: Any) -> Question:
    data = _require_dict(raw, "question")
    try:
        difficulty = Difficulty(data.get("difficulty"))
    except ValueError as exc:
        raise SnapshotFormatError("unknown difficulty") from exc
    question = Question(
        id=_require_str(data, "id"),
        text=_require_str(data, "text"),
        difficulty=difficulty,
        time_limit=int(_decode_optional_int(data.get("time_limit"), "time_limit") or 0),
        timestamp=_decode_dt(data.get("timestamp"), "timestamp"),
        answer=data.get("answer") if isinstance(data.get("answer"), str) else None,
        score=_decode_optional_int(data.get("score"), "score"),
        feedback=data.get("feedback") if isinstance(data.get("feedback"), str) else None,
    )
    # answer, score and feedback are written together
    if question.answered != (question.score is not None) or question.answered != (question.feedback is not None):
        raise SnapshotFormatError(f"question {question.id} has a partial answer record")
    return question


def _decode_session(raw: Any) -> InterviewSession:
    data = _require_dict(raw, "session")
    try:
        status = SessionStatus(data.get("status"))
    except ValueError as exc:
        raise SnapshotFormatError("unknown session status") from exc

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise SnapshotFormatError("questions must be a list")
    if len(questions) != QUESTIONS_PER_SESSION:
        raise SnapshotFormatError(f"session must have {QUESTIONS_PER_SESSION} questions, got {len(questions)}")

    total_score = data.get("total_score")
    if total_score is not None and (isinstance(total_score, bool) or not isinstance(total_score, (int, float))):
        raise SnapshotFormatError("total_score must be a number")

    return InterviewSession(
        id=_require_str(data, "id"),
        candidate_id=_require_str(data, "candidate_id"),
        start_time=_decode_dt(data.get("start_time"), "start_time"),
        end_time=_decode_dt(data.get("end_time"), "end_time", required=False),
        status=status,
        current_question_index=max(0, int(_decode_optional_int(data.get("current_question_index"), "current_question_index") or 0)),
        questions=[_decode_question(item) for item in questions],
        total_score=float(total_score) if total_score is not None else None,
        ai_summary=data.get("ai_summary") if isinstance(data.get("ai_summary"), str) else None,
    )


def _decode_candidate(raw: Any) -> Candidate:
    data = _require_dict(raw, "candidate")
    current = data.get("current_session")
    completed = data.get("completed_sessions") or []
    if not isinstance(completed, list):
        raise SnapshotFormatError("completed_sessions must be a list")

    # profile_complete is derived, the stored copy is ignored
    return Candidate(
        id=_require_str(data, "id"),
        name=str(data.get("name") or ""),
        email=str(data.get("email") or ""),
        phone=str(data.get("phone") or ""),
        resume_text=data.get("resume_text") if isinstance(data.get("resume_text"), str) else None,
        created_at=_decode_dt(data.get("created_at"), "created_at"),
        current_session=_decode_session(current) if current is not None else None,
        completed_sessions=[_decode_session(item) for item in completed],
    )


def decode_state(raw: Any) -> AppState:
    data = _require_dict(raw, "state")
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list):
        raise SnapshotFormatError("candidates must be a list")

    try:
        active_tab = ActiveTab(data.get("active_tab") or ActiveTab.INTERVIEWEE.value)
    except ValueError as exc:
        raise SnapshotFormatError("unknown active tab") from exc

    current_candidate_id = data.get("current_candidate_id")
    return AppState(
        candidates=[_decode_candidate(item) for item in candidates],
        current_candidate_id=current_candidate_id if isinstance(current_candidate_id, str) else None,
        active_tab=active_tab,
        show_welcome_back_modal=bool(data.get("show_welcome_back_modal", False)),
    )


def decode_snapshot(raw: Any) -> AppState:
    data = _require_dict(raw, "snapshot")
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotFormatError(f"unsupported snapshot version: {version!r}")
    return decode_state(data.get("state"))
