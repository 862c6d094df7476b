import threading
import time
from typing import Any


_lock = threading.Lock()
_metrics: dict[str, float] = {
    "sessions_started": 0.0,
    "sessions_completed": 0.0,
    "answers_submitted": 0.0,
    "auto_submits": 0.0,
    "submissions_rejected": 0.0,
    "timers_active": 0.0,
    "resumes_parsed": 0.0,
    "resume_parse_failures": 0.0,
    "emails_sent": 0.0,
    "emails_failed": 0.0,
    "submit_duration_total_sec": 0.0,
    "submit_duration_samples": 0.0,
}


def increment_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = float(_metrics.get(key, 0.0)) + float(amount)


def set_metric(name: str, value: float) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = max(0.0, float(value))


def observe_submit_duration(seconds: float) -> None:
    duration = max(0.0, float(seconds or 0.0))
    with _lock:
        _metrics["submit_duration_total_sec"] = float(_metrics.get("submit_duration_total_sec", 0.0)) + duration
        _metrics["submit_duration_samples"] = float(_metrics.get("submit_duration_samples", 0.0)) + 1.0


def get_metrics_snapshot(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    with _lock:
        data = dict(_metrics)

    submit_samples = max(1.0, float(data.get("submit_duration_samples") or 0.0))

    payload: dict[str, Any] = {
        "generated_at": time.time(),
        "sessions_started": int(data.get("sessions_started") or 0.0),
        "sessions_completed": int(data.get("sessions_completed") or 0.0),
        "answers_submitted": int(data.get("answers_submitted") or 0.0),
        "auto_submits": int(data.get("auto_submits") or 0.0),
        "submissions_rejected": int(data.get("submissions_rejected") or 0.0),
        "timers_active": int(data.get("timers_active") or 0.0),
        "resumes_parsed": int(data.get("resumes_parsed") or 0.0),
        "resume_parse_failures": int(data.get("resume_parse_failures") or 0.0),
        "emails_sent": int(data.get("emails_sent") or 0.0),
        "emails_failed": int(data.get("emails_failed") or 0.0),
        "avg_submit_duration_sec": round(float(data.get("submit_duration_total_sec") or 0.0) / submit_samples, 4),
    }

    if extra:
        payload.update(extra)
    return payload
