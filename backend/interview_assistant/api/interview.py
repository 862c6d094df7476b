from fastapi import APIRouter, HTTPException

from interview_assistant import services
from interview_assistant.schemas import AnswerRequest, DraftRequest
from interview_assistant.storage.codec import encode_session

router = APIRouter(prefix="/api/interview")


def _require_candidate(candidate_id: str):
    candidate = services.controller.get_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


def _session_view(candidate_id: str) -> dict:
    candidate = _require_candidate(candidate_id)
    runner = services.session_controller
    session = candidate.current_session
    payload = {
        "candidate_id": candidate_id,
        "profile_complete": candidate.profile_complete,
        "session": encode_session(session) if session else None,
        "time_left": runner.time_left(candidate_id),
        "is_submitting": runner.is_submitting(candidate_id),
        "draft": runner.draft(candidate_id),
        "last_completed": None,
    }
    if session is not None:
        payload["question_number"] = min(session.current_question_index + 1, len(session.questions))
        payload["total_questions"] = len(session.questions)
    elif candidate.latest_session is not None:
        payload["last_completed"] = encode_session(candidate.latest_session)
    return payload


@router.get("/{candidate_id}")
def get_interview(candidate_id: str):
    return _session_view(candidate_id)


@router.post("/{candidate_id}/start")
async def start_interview(candidate_id: str):
    candidate = _require_candidate(candidate_id)
    if not candidate.profile_complete:
        raise HTTPException(status_code=400, detail="Candidate profile is incomplete")
    if candidate.current_session is not None:
        raise HTTPException(status_code=409, detail="Candidate already has an active session")

    session = await services.session_controller.start_interview(candidate_id)
    if session is None:
        raise HTTPException(status_code=409, detail="Interview could not be started")
    return _session_view(candidate_id)


@router.put("/{candidate_id}/draft")
def update_draft(candidate_id: str, req: DraftRequest):
    _require_candidate(candidate_id)
    applied = services.session_controller.update_draft(candidate_id, req.text)
    return {"applied": applied}


@router.post("/{candidate_id}/answer")
async def submit_answer(candidate_id: str, req: AnswerRequest):
    _require_candidate(candidate_id)
    accepted = await services.session_controller.submit(
        candidate_id,
        answer=req.answer,
        question_id=req.question_id,
    )
    payload = _session_view(candidate_id)
    payload["accepted"] = accepted
    return payload


@router.post("/{candidate_id}/pause")
async def pause_interview(candidate_id: str):
    _require_candidate(candidate_id)
    applied = await services.session_controller.pause(candidate_id)
    payload = _session_view(candidate_id)
    payload["applied"] = applied
    return payload


@router.post("/{candidate_id}/resume")
async def resume_interview(candidate_id: str):
    _require_candidate(candidate_id)
    applied = await services.session_controller.resume(candidate_id)
    payload = _session_view(candidate_id)
    payload["applied"] = applied
    return payload


@router.post("/{candidate_id}/reset")
async def reset_interview(candidate_id: str):
    _require_candidate(candidate_id)
    applied = await services.session_controller.reset(candidate_id)
    payload = _session_view(candidate_id)
    payload["applied"] = applied
    return payload
