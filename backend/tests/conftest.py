import os
import sys
import tempfile
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# core.config reads these at import time
os.environ["STATE_STORE_PATH"] = str(Path(tempfile.mkdtemp(prefix="interview-tests-")) / "app_state.json")
os.environ["SUBMIT_PROCESSING_DELAY_SEC"] = "0"
os.environ["EMAIL_API_URL"] = ""


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("SCORING_SEED", "7")


@pytest.fixture
def controller():
    from interview_assistant.interview.engine import InterviewController
    from interview_assistant.interview.evaluator import FixedScoringPolicy
    from interview_assistant.storage.state_store import InMemoryStateStore

    return InterviewController(
        store=InMemoryStateStore(),
        scoring_policy=FixedScoringPolicy([60, 70, 80, 90, 100, 60]),
    )


@pytest.fixture
def candidate(controller):
    return controller.add_candidate("Ada Lovelace", "ada@example.com", "555-123-4567")
