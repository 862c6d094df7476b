import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=True)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name) or default)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name) or default)
    except ValueError:
        return default


STATE_STORE_PATH = Path(
    str(os.getenv("STATE_STORE_PATH") or (_BACKEND_ROOT / "data" / "app_state.json")).strip()
)
SUBMIT_PROCESSING_DELAY_SEC = max(0.0, _env_float("SUBMIT_PROCESSING_DELAY_SEC", 1.0))
TIMER_TICK_SEC = max(0.001, _env_float("TIMER_TICK_SEC", 1.0))
RESUME_MAX_BYTES = max(1, _env_int("RESUME_MAX_BYTES", 10 * 1024 * 1024))

_raw_seed = str(os.getenv("SCORING_SEED") or "").strip()
SCORING_SEED = int(_raw_seed) if _raw_seed.lstrip("-").isdigit() else None

EMAIL_API_URL = str(os.getenv("EMAIL_API_URL") or "").strip()
EMAIL_API_KEY = str(os.getenv("EMAIL_API_KEY") or "").strip()
EMAIL_FROM = str(os.getenv("EMAIL_FROM") or "no-reply@interview-assistant.local").strip()
EMAIL_TIMEOUT_SEC = max(1.0, _env_float("EMAIL_TIMEOUT_SEC", 6.0))

CORS_ALLOW_ORIGINS = str(os.getenv("CORS_ALLOW_ORIGINS") or "").strip()

LOG_LEVEL =str(os.getenv("LOG_LEVEL") or "INFO").strip().upper()
