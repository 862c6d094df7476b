import json

from core.state import SessionStatus
from interview_assistant.interview.engine import InterviewController
from interview_assistant.interview.evaluator import FixedScoringPolicy
from interview_assistant.interview.models import AppState
from interview_assistant.storage.codec import SNAPSHOT_VERSION, decode_snapshot, encode_snapshot
from interview_assistant.storage.state_store import (
    InMemoryStateStore,
    JsonFileStateStore,
    find_resumable_sessions,
)


def _controller(store):
    return InterviewController(store=store, scoring_policy=FixedScoringPolicy([75]))


def test_file_store_round_trips_full_state(tmp_path):
    store = JsonFileStateStore(tmp_path / "state.json")
    controller = _controller(store)
    candidate = controller.add_candidate("Ada", "ada@example.com", "1", resume_text="resume body")
    controller.select_candidate(candidate.id)
    controller.start(candidate.id)
    session = controller.get_current_session(candidate.id)
    controller.submit_answer(candidate.id, session.questions[0].id, "hooks")
    controller.advance(candidate.id)
    controller.pause(candidate.id)

    restored = JsonFileStateStore(tmp_path / "state.json").load()
    assert encode_snapshot(restored) == encode_snapshot(controller.snapshot())

    stored = restored.find_candidate(candidate.id)
    assert stored.current_session.status == SessionStatus.PAUSED
    assert stored.current_session.current_question_index == 1
    assert stored.current_session.questions[0].answer == "hooks"
    assert stored.current_session.questions[0].timestamp == session.questions[0].timestamp
    assert stored.created_at == candidate.created_at


def test_snapshot_layout_is_versioned(tmp_path):
    path = tmp_path / "state.json"
    controller = _controller(JsonFileStateStore(path))
    controller.add_candidate("Ada", "ada@example.com", "1")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == SNAPSHOT_VERSION
    assert payload["state"]["candidates"][0]["name"] == "Ada"
    assert payload["state"]["active_tab"] == "interviewee"


def test_missing_file_loads_empty_state(tmp_path):
    state = JsonFileStateStore(tmp_path / "nope.json").load()
    assert state == AppState()


def test_corrupt_file_loads_empty_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonFileStateStore(path).load() == AppState()


def test_wrong_version_loads_empty_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"version": 99, "state": {"candidates": []}}), encoding="utf-8")
    assert JsonFileStateStore(path).load() == AppState()


def test_structurally_invalid_snapshot_loads_empty_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps({"version": SNAPSHOT_VERSION, "state": {"candidates": [{"id": 3}]}}),
        encoding="utf-8",
    )
    assert JsonFileStateStore(path).load() == AppState()


def test_in_memory_store_round_trips_through_codec():
    store = InMemoryStateStore()
    controller = _controller(store)
    controller.add_candidate("Ada", "ada@example.com", "1")

    assert store.save_count == 1
    assert decode_snapshot(encode_snapshot(store.load())) == store.load()


def test_resumable_sessions_raise_flag_on_load():
    store = InMemoryStateStore()
    first = _controller(store)
    running = first.add_candidate("Ada", "ada@example.com", "1")
    paused = first.add_candidate("Bob", "bob@example.com", "2")
    first.start(running.id)
    first.start(paused.id)
    first.pause(paused.id)
    first.set_welcome_back_modal(False)

    reloaded = _controller(store)
    assert reloaded.snapshot().show_welcome_back_modal is True
    assert {c.id for c in reloaded.resumable_sessions()} == {running.id, paused.id}


def test_completed_sessions_do_not_raise_flag():
    store = InMemoryStateStore()
    first = _controller(store)
    candidate = first.add_candidate("Ada", "ada@example.com", "1")
    first.start(candidate.id)
    for _ in range(6):
        first.advance(candidate.id)

    reloaded = _controller(store)
    assert reloaded.snapshot().show_welcome_back_modal is False
    assert find_resumable_sessions(reloaded.snapshot()) == []


def _snapshot_with_session(tmp_path):
    path = tmp_path / "state.json"
    controller = _controller(JsonFileStateStore(path))
    candidate = controller.add_candidate("Ada", "ada@example.com", "1")
    session = controller.start(candidate.id)
    controller.submit_answer(candidate.id, session.questions[0].id, "hooks")
    return path, json.loads(path.read_text(encoding="utf-8"))


def test_partial_answer_record_loads_empty_state(tmp_path):
    path, payload = _snapshot_with_session(tmp_path)
    assert JsonFileStateStore(path).load().candidates

    payload["state"]["candidates"][0]["current_session"]["questions"][0]["score"] = None
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert JsonFileStateStore(path).load() == AppState()


def test_wrong_question_count_loads_empty_state(tmp_path):
    path, payload = _snapshot_with_session(tmp_path)
    payload["state"]["candidates"][0]["current_session"]["questions"].pop()
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert JsonFileStateStore(path).load() == AppState()
