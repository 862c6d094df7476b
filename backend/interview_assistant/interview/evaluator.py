from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol

from core.state import Difficulty


NO_ANSWER_SENTINEL = "No answer provided"

MIN_SCORE = 60
MAX_SCORE = 99

FEEDBACK_EXCELLENT = "Excellent answer!"
FEEDBACK_GOOD = "Good answer"
FEEDBACK_NEEDS_IMPROVEMENT = "Needs improvement"


@dataclass(frozen=True)
class ScoreResult:
    score: int
    feedback: str


class ScoringPolicy(Protocol):
    def score(self, answer: str, difficulty: Difficulty) -> ScoreResult:
        ...


def normalize_answer(answer: str | None) -> str:
    text = str(answer or "").strip()
    return text or NO_ANSWER_SENTINEL


def feedback_for_score(score: int) -> str:
    if score > 80:
        return FEEDBACK_EXCELLENT
    if score > 70:
        return FEEDBACK_GOOD
    return FEEDBACK_NEEDS_IMPROVEMENT


class RandomScoringPolicy:
    """
    Placeholder evaluator: uniform integer score, tiered feedback.
    Difficulty is accepted for interface parity but not used.
    """

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        self._rng = rng or random.Random(seed)

    def score(self, answer: str, difficulty: Difficulty) -> ScoreResult:
        value = self._rng.randint(MIN_SCORE, MAX_SCORE)
        return ScoreResult(score=value, feedback=feedback_for_score(value))


class FixedScoringPolicy:
    """Replays a fixed sequence of scores, cycling when exhausted."""

    def __init__(self, scores: list[int]):
        if not scores:
            raise ValueError("scores must not be empty")
        self._scores = [max(0, min(100, int(value))) for value in scores]
        self._cursor = 0

    def score(self, answer: str, difficulty: Difficulty) -> ScoreResult:
        value = self._scores[self._cursor % len(self._scores)]
        self._cursor += 1
        return ScoreResult(score=value, feedback=feedback_for_score(value))
