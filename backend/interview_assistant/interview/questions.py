import uuid
from dataclasses import dataclass

from core.state import Difficulty
from .models import Question, utcnow


# ---------- STATIC QUESTION BANK ----------

@dataclass(frozen=True)
class BankQuestion:
    text: str
    difficulty: Difficulty
    time_limit: int


TIME_LIMITS = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 120,
}

QUESTION_BANK = (
    BankQuestion(
        "What is React and how does it differ from other JavaScript frameworks?",
        Difficulty.EASY,
        TIME_LIMITS[Difficulty.EASY],
    ),
    BankQuestion(
        "Explain the concept of state in React and how it's managed.",
        Difficulty.EASY,
        TIME_LIMITS[Difficulty.EASY],
    ),
    BankQuestion(
        "How would you implement authentication in a Node.js application?",
        Difficulty.MEDIUM,
        TIME_LIMITS[Difficulty.MEDIUM],
    ),
    BankQuestion(
        "Describe the process of connecting a React frontend to a Node.js backend API.",
        Difficulty.MEDIUM,
        TIME_LIMITS[Difficulty.MEDIUM],
    ),
    BankQuestion(
        "Design a scalable database architecture for a real-time chat application.",
        Difficulty.HARD,
        TIME_LIMITS[Difficulty.HARD],
    ),
    BankQuestion(
        "How would you optimize a React application for performance and handle large datasets?",
        Difficulty.HARD,
        TIME_LIMITS[Difficulty.HARD],
    ),
)

QUESTIONS_PER_SESSION = len(QUESTION_BANK)


def generate_questions() -> list[Question]:
    """Clone the bank into fresh Question records for a new session."""
    created_at = utcnow()
    return [
        Question(
            id=str(uuid.uuid4()),
            text=item.text,
            difficulty=item.difficulty,
            time_limit=item.time_limit,
            timestamp=created_at,
        )
        for item in QUESTION_BANK
    ]
