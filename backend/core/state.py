# backend/core/state.py

from enum import Enum


class SessionStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActiveTab(str, Enum):
    INTERVIEWEE = "interviewee"
    INTERVIEWER = "interviewer"
    ANALYTICS = "analytics"


RESUMABLE_STATUSES = (SessionStatus.IN_PROGRESS, SessionStatus.PAUSED)
