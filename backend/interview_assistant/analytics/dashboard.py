from __future__ import annotations

from typing import Any, Optional

from core.state import Difficulty
from interview_assistant.interview.models import AppState, Candidate


TOP_PERFORMERS_LIMIT = 5


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def latest_score(candidate: Candidate) -> Optional[float]:
    session = candidate.latest_session
    if session is None:
        return None
    return float(session.total_score or 0.0)


def score_tier(score: float) -> str:
    if score >= 80:
        return "excellent"
    if score >= 70:
        return "good"
    return "needs_improvement"


def candidate_status(candidate: Candidate) -> str:
    if candidate.current_session is not None:
        return candidate.current_session.status.value
    if candidate.completed_sessions:
        return "completed"
    return "not-started"


def search_candidates(state: AppState, search: str = "") -> list[Candidate]:
    needle = str(search or "").strip().lower()
    if not needle:
        return list(state.candidates)
    return [
        c for c in state.candidates
        if needle in c.name.lower() or needle in c.email.lower() or needle in c.phone
    ]


def candidate_row(candidate: Candidate) -> dict[str, Any]:
    score = latest_score(candidate)
    return {
        "id": candidate.id,
        "name": candidate.name,
        "email": candidate.email,
        "phone": candidate.phone,
        "profile_complete": candidate.profile_complete,
        "completed_interviews": len(candidate.completed_sessions),
        "latest_score": score,
        "latest_score_display": round(score) if score is not None else None,
        "latest_tier": score_tier(score) if score is not None else None,
        "status": candidate_status(candidate),
        "created_at": candidate.created_at.isoformat(),
    }


def build_analytics(state: AppState) -> dict[str, Any]:
    candidates = list(state.candidates)
    completed = [session for c in candidates for session in c.completed_sessions]
    total_candidates = len(candidates)
    total_interviews = len(completed)

    by_difficulty: dict[str, list[float]] = {d.value: [] for d in Difficulty}
    for session in completed:
        for question in session.questions:
            by_difficulty[question.difficulty.value].append(float(question.score or 0))

    latest_scores = [
        (candidate, latest_score(candidate))
        for candidate in candidates
        if candidate.completed_sessions
    ]

    distribution = {"excellent": 0, "good": 0, "needs_improvement": 0}
    for _, score in latest_scores:
        distribution[score_tier(score)] += 1

    ranked = sorted(latest_scores, key=lambda item: item[1], reverse=True)[:TOP_PERFORMERS_LIMIT]
    top_performers = [
        {
            "rank": index,
            "id": candidate.id,
            "name": candidate.name,
            "email": candidate.email,
            "latest_score": score,
            "latest_score_display": round(score),
            "tier": score_tier(score),
            "interviews": len(candidate.completed_sessions),
        }
        for index, (candidate, score) in enumerate(ranked, start=1)
    ]

    return {
        "total_candidates": total_candidates,
        "completed_interviews": total_interviews,
        "average_score": _avg([float(s.total_score or 0.0) for s in completed]),
        "completion_rate_pct": round((total_interviews / total_candidates) * 100) if total_candidates else 0,
        "score_distribution": distribution,
        "difficulty_performance": {
            key: {
                "answered": len(values),
                "average": _avg(values),
            }
            for key, values in by_difficulty.items()
        },
        "top_performers": top_performers,
    }
