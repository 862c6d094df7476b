from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import json
import logging

from core.config import CORS_ALLOW_ORIGINS, RESUME_MAX_BYTES, STATE_STORE_PATH
from interview_assistant import services
from interview_assistant.analytics.dashboard import build_analytics, candidate_row, search_candidates
from interview_assistant.api.interview import router as interview_router
from interview_assistant.export.mailer import generate_email_content
from interview_assistant.export.report import build_results, export_csv, export_pdf
from interview_assistant.resume.parser import ResumeParseError, parse_resume
from interview_assistant.schemas import (
    CandidateCreate,
    CandidateUpdate,
    EmailRequest,
    SelectCandidateRequest,
    TabRequest,
    WelcomeBackRequest,
)
from interview_assistant.storage.codec import encode_candidate, encode_session, encode_state
from interview_assistant.system_metrics import get_metrics_snapshot, increment_metric

app = FastAPI(title="Interview Assistant")
logger = logging.getLogger("interview.main")


def _get_allowed_origins() -> list[str]:
    if not CORS_ALLOW_ORIGINS:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    return [item.strip() for item in CORS_ALLOW_ORIGINS.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

app.include_router(interview_router)


def _require_candidate(candidate_id: str):
    candidate = services.controller.get_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


def _find_session(candidate, session_id: str):
    for session in candidate.completed_sessions:
        if session.id == session_id:
            return session
    if candidate.current_session is not None and candidate.current_session.id == session_id:
        return candidate.current_session
    raise HTTPException(status_code=404, detail="Session not found")


def _resumable_payload() -> list[dict]:
    rows = []
    for candidate in services.controller.resumable_sessions():
        session = candidate.current_session
        rows.append({
            "candidate_id": candidate.id,
            "name": candidate.name,
            "session_id": session.id,
            "status": session.status.value,
            "question_number": min(session.current_question_index + 1, len(session.questions)),
            "total_questions": len(session.questions),
        })
    return rows


@app.on_event("startup")
async def startup_banner():
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    restored = await services.session_controller.restore_timers()
    logger.info(
        "[SYSTEM] state store=%s resumable=%s timers_restored=%s",
        STATE_STORE_PATH,
        len(services.controller.resumable_sessions()),
        restored,
    )


@app.on_event("shutdown")
async def shutdown_handler():
    await services.session_controller.stop()


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "backend"}


# -------------------------
# APP STATE
# -------------------------

@app.get("/api/state")
def get_state():
    payload = encode_state(services.controller.snapshot())
    payload["resumable"] = _resumable_payload()
    return payload


@app.post("/api/state/tab")
def set_active_tab(req: TabRequest):
    applied = services.controller.set_active_tab(req.tab)
    if not applied:
        raise HTTPException(status_code=400, detail=f"Unknown tab: {req.tab}")
    return {"applied": True, "active_tab": req.tab}


@app.post("/api/state/welcome-back")
def set_welcome_back(req: WelcomeBackRequest):
    services.controller.set_welcome_back_modal(req.visible)
    return {"applied": True, "show_welcome_back_modal": req.visible}


@app.get("/api/resumable")
def list_resumable():
    snapshot = services.controller.snapshot()
    return {
        "show_welcome_back_modal": snapshot.show_welcome_back_modal,
        "sessions": _resumable_payload(),
    }


# -------------------------
# RESUME
# -------------------------

@app.post("/api/resume/parse")
async def parse_resume_route(file: UploadFile = File(...)):
    content = await file.read()
    try:
        parsed = parse_resume(file.filename or "", content, max_bytes=RESUME_MAX_BYTES)
    except ResumeParseError as exc:
        increment_metric("resume_parse_failures")
        raise HTTPException(status_code=400, detail=str(exc))

    increment_metric("resumes_parsed")
    payload = parsed.to_dict()
    payload["filename"] = file.filename
    return payload


# -------------------------
# CANDIDATES
# -------------------------

@app.post("/api/candidates")
def create_candidate(req: CandidateCreate):
    candidate = services.controller.add_candidate(req.name, req.email, req.phone, resume_text=req.resume_text)
    if req.select:
        services.controller.select_candidate(candidate.id)
    return encode_candidate(candidate)


@app.get("/api/candidates")
def list_candidates(search: str = ""):
    snapshot = services.controller.snapshot()
    return {"candidates": [candidate_row(c) for c in search_candidates(snapshot, search)]}


@app.post("/api/candidates/select")
def select_candidate(req: SelectCandidateRequest):
    if req.candidate_id is not None:
        _require_candidate(req.candidate_id)
    services.controller.select_candidate(req.candidate_id)
    return {"applied": True, "current_candidate_id": req.candidate_id}


@app.get("/api/candidates/{candidate_id}")
def get_candidate(candidate_id: str):
    return encode_candidate(_require_candidate(candidate_id))


@app.patch("/api/candidates/{candidate_id}")
def update_candidate(candidate_id: str, req: CandidateUpdate):
    _require_candidate(candidate_id)
    updates = req.model_dump(exclude_none=True)
    applied = services.controller.update_candidate(candidate_id, **updates) if updates else False
    payload = encode_candidate(_require_candidate(candidate_id))
    payload["applied"] = applied
    return payload


# -------------------------
# RESULTS
# -------------------------

@app.get("/api/candidates/{candidate_id}/sessions/{session_id}/export")
def export_session(candidate_id: str, session_id: str, format: str = Query("json")):
    candidate = _require_candidate(candidate_id)
    session = _find_session(candidate, session_id)
    results = build_results(candidate, session)
    slug = f"interview_{candidate.name.strip().replace(' ', '_') or candidate.id}"

    fmt = format.strip().lower()
    if fmt == "json":
        payload = results.to_dict()
        payload["session"] = encode_session(session)
        return Response(
            content=json.dumps(payload, indent=2),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{slug}.json"'},
        )
    if fmt == "csv":
        return Response(
            content=export_csv(results),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{slug}.csv"'},
        )
    if fmt == "pdf":
        return Response(
            content=export_pdf(results),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{slug}.pdf"'},
        )
    raise HTTPException(status_code=400, detail=f"Unsupported export format: {format}")


@app.post("/api/candidates/{candidate_id}/sessions/{session_id}/email")
async def email_session(candidate_id: str, session_id: str, req: EmailRequest | None = None):
    candidate = _require_candidate(candidate_id)
    session = _find_session(candidate, session_id)
    message = generate_email_content(build_results(candidate, session), to=(req.to if req else None) or "")
    sent = await services.email_sender.send(message)
    return {"sent": sent, "to": message["to"], "subject": message["subject"]}


# -------------------------
# ANALYTICS / SYSTEM
# -------------------------

@app.get("/api/analytics")
def analytics_route():
    return build_analytics(services.controller.snapshot())


@app.get("/api/system/metrics")
def system_metrics_route():
    return get_metrics_snapshot(extra={
        "candidates": len(services.controller.snapshot().candidates),
        "resumable_sessions": len(services.controller.resumable_sessions()),
    })
