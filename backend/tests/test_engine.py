import pytest

from core.state import ActiveTab, Difficulty, SessionStatus
from interview_assistant.interview.engine import InterviewController
from interview_assistant.interview.evaluator import NO_ANSWER_SENTINEL, FixedScoringPolicy
from interview_assistant.interview.models import Candidate
from interview_assistant.storage.state_store import InMemoryStateStore


def _answer_all(controller, candidate_id: str, answers=None) -> None:
    answers = list(answers or [])
    while True:
        session = controller.get_current_session(candidate_id)
        if session is None:
            return
        question = session.current_question
        text = answers.pop(0) if answers else f"answer {session.current_question_index}"
        controller.submit_answer(candidate_id, question.id, text)
        controller.advance(candidate_id)


@pytest.mark.parametrize(
    ("name", "email", "phone", "expected"),
    [
        ("Ada", "a@b.com", "123", True),
        ("Ada", "a@b.com", "", False),
        ("   ", "a@b.com", "123", False),
        ("Ada", "", "123", False),
    ],
)
def test_profile_complete(name, email, phone, expected):
    candidate = Candidate(id="c-1", name=name, email=email, phone=phone)
    assert candidate.profile_complete is expected


def test_start_requires_complete_profile(controller):
    incomplete = controller.add_candidate("Ada", "a@b.com", "")
    assert controller.start(incomplete.id) is None
    assert controller.get_current_session(incomplete.id) is None

    controller.update_candidate(incomplete.id, phone="123")
    session = controller.start(incomplete.id)
    assert session is not None
    assert session.status == SessionStatus.IN_PROGRESS


def test_start_unknown_candidate_is_noop(controller):
    assert controller.start("missing") is None
    assert controller.snapshot().candidates == []


def test_start_builds_six_questions_in_difficulty_order(controller, candidate):
    session = controller.start(candidate.id)

    assert session.current_question_index == 0
    assert [q.difficulty for q in session.questions] == [
        Difficulty.EASY,
        Difficulty.EASY,
        Difficulty.MEDIUM,
        Difficulty.MEDIUM,
        Difficulty.HARD,
        Difficulty.HARD,
    ]
    assert [q.time_limit for q in session.questions] == [20, 20, 60, 60, 120, 120]
    assert len({q.id for q in session.questions}) == 6
    assert all(q.answer is None and q.score is None for q in session.questions)


def test_start_with_existing_session_is_noop(controller, candidate):
    first = controller.start(candidate.id)
    assert controller.start(candidate.id) is None
    assert controller.get_current_session(candidate.id).id == first.id


def test_submit_scores_and_normalizes_blank_answer(controller, candidate):
    session = controller.start(candidate.id)
    result = controller.submit_answer(candidate.id, session.questions[0].id, "   ")

    assert result.score == 60
    stored = controller.get_current_session(candidate.id).questions[0]
    assert stored.answer == NO_ANSWER_SENTINEL
    assert stored.score == 60
    assert stored.feedback == "Needs improvement"


def test_submit_unknown_question_is_noop(controller, candidate):
    controller.start(candidate.id)
    assert controller.submit_answer(candidate.id, "nope", "text") is None


def test_advance_keeps_status_until_last_question(controller, candidate):
    controller.start(candidate.id)
    controller.pause(candidate.id)
    assert controller.advance(candidate.id) is True

    session = controller.get_current_session(candidate.id)
    assert session.current_question_index == 1
    assert session.status == SessionStatus.PAUSED


def test_six_advances_complete_session_with_mean_score(controller, candidate):
    controller.start(candidate.id)
    _answer_all(controller, candidate.id)

    stored = controller.get_candidate(candidate.id)
    assert stored.current_session is None
    assert len(stored.completed_sessions) == 1

    done = stored.completed_sessions[0]
    assert done.status == SessionStatus.COMPLETED
    assert done.end_time is not None
    assert done.current_question_index == 6
    assert done.total_score == pytest.approx(76.6667, abs=1e-3)
    assert done.ai_summary == (
        "Candidate demonstrated good technical knowledge. "
        "Consider for junior role or additional training."
    )


def test_unanswered_questions_count_as_zero(controller, candidate):
    controller.start(candidate.id)
    for _ in range(6):
        controller.advance(candidate.id)

    done = controller.get_candidate(candidate.id).completed_sessions[0]
    assert done.total_score == 0
    assert done.ai_summary.startswith("Candidate demonstrated basic technical knowledge.")


def test_pause_and_resume_require_matching_status(controller, candidate):
    assert controller.pause(candidate.id) is False

    controller.start(candidate.id)
    assert controller.resume(candidate.id) is False
    assert controller.pause(candidate.id) is True
    assert controller.pause(candidate.id) is False
    assert controller.get_current_session(candidate.id).status == SessionStatus.PAUSED
    assert controller.resume(candidate.id) is True
    assert controller.get_current_session(candidate.id).status == SessionStatus.IN_PROGRESS


def test_reset_discards_session_and_is_idempotent(controller, candidate):
    controller.start(candidate.id)
    assert controller.reset(candidate.id) is True
    assert controller.reset(candidate.id) is False

    stored = controller.get_candidate(candidate.id)
    assert stored.current_session is None
    assert stored.completed_sessions == []


def test_history_keeps_every_completed_session(controller, candidate):
    for _ in range(2):
        controller.start(candidate.id)
        _answer_all(controller, candidate.id)

    stored = controller.get_candidate(candidate.id)
    assert len(stored.completed_sessions) == 2
    assert stored.completed_sessions[0].id != stored.completed_sessions[1].id


def test_readers_get_copies(controller, candidate):
    controller.start(candidate.id)
    view = controller.get_current_session(candidate.id)
    view.current_question_index = 5
    view.questions[0].answer = "tampered"

    fresh = controller.get_current_session(candidate.id)
    assert fresh.current_question_index == 0
    assert fresh.questions[0].answer is None


def test_welcome_back_flag_when_other_candidate_in_progress(controller):
    first = controller.add_candidate("Ada", "ada@example.com", "1")
    second = controller.add_candidate("Bob", "bob@example.com", "2")
    controller.select_candidate(first.id)

    controller.start(first.id)
    assert controller.snapshot().show_welcome_back_modal is False

    controller.start(second.id)
    assert controller.snapshot().show_welcome_back_modal is True


def test_welcome_back_flag_not_set_for_current_candidate(controller):
    first = controller.add_candidate("Ada", "ada@example.com", "1")
    second = controller.add_candidate("Bob", "bob@example.com", "2")
    controller.start(first.id)

    controller.select_candidate(second.id)
    controller.start(second.id)
    assert controller.snapshot().show_welcome_back_modal is False


def test_a_at_b_scenario_end_to_end():
    store = InMemoryStateStore()
    controller = InterviewController(store=store, scoring_policy=FixedScoringPolicy([90]))
    candidate = controller.add_candidate("A", "a@b.com", "1")
    controller.select_candidate(candidate.id)

    controller.start(candidate.id)
    _answer_all(controller, candidate.id, answers=["hello"])

    done = controller.get_candidate(candidate.id).completed_sessions[0]
    assert done.questions[0].answer == "hello"
    assert done.total_score == 90
    assert done.ai_summary == "Candidate demonstrated strong technical knowledge. Recommended for next round."


def test_every_applied_transition_is_persisted(controller, candidate):
    store = controller._store
    before = store.save_count
    controller.start(candidate.id)
    controller.pause(candidate.id)
    controller.pause(candidate.id)

    assert store.save_count == before + 2


def test_update_candidate_ignores_unknown_fields(controller, candidate):
    assert controller.update_candidate(candidate.id, id="hijack", name=" Grace Hopper ") is True
    stored = controller.get_candidate(candidate.id)
    assert stored.id == candidate.id
    assert stored.name == "Grace Hopper"
    assert controller.update_candidate(candidate.id, created_at=None) is False


def test_navigation_transitions(controller, candidate):
    assert controller.set_active_tab("analytics") is True
    assert controller.set_active_tab("settings") is False
    assert controller.snapshot().active_tab == ActiveTab.ANALYTICS

    assert controller.select_candidate("missing") is False
    assert controller.select_candidate(candidate.id) is True
    assert controller.snapshot().current_candidate_id == candidate.id
    assert controller.select_candidate(None) is True
    assert controller.snapshot().current_candidate_id is None


def test_advance_ignores_replaced_session(controller, candidate):
    old = controller.start(candidate.id)
    controller.reset(candidate.id)
    fresh = controller.start(candidate.id)

    assert controller.advance(candidate.id, expected_session_id=old.id) is False
    assert controller.get_current_session(candidate.id).current_question_index == 0
    assert controller.advance(candidate.id, expected_session_id=fresh.id) is True
    assert controller.get_current_session(candidate.id).current_question_index == 1
