from .models import Question


def _tier(total: float) -> str:
    if total > 80:
        return "strong"
    if total > 70:
        return "good"
    return "basic"


def _recommendation(total: float) -> str:
    if total > 80:
        return "Recommended for next round."
    return "Consider for junior role or additional training."


def calculate_final_score(questions: list[Question]) -> tuple[float, str]:
    """
    Mean of the per-question scores (unanswered counts as 0) and the summary text.
    Not weighted by difficulty; no rounding is applied here.
    """
    items = list(questions or [])
    if not items:
        return 0.0, build_summary(0.0)

    total = sum(int(q.score or 0) for q in items) / len(items)
    return total, build_summary(total)


def build_summary(total: float) -> str:
    return f"Candidate demonstrated {_tier(total)} technical knowledge. {_recommendation(total)}"
