from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field, asdict
from typing import List

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from interview_assistant.interview.evaluator import NO_ANSWER_SENTINEL
from interview_assistant.interview.models import Candidate, InterviewSession


NO_SUMMARY = "No summary available"


@dataclass
class QuestionResult:
    text: str
    answer: str
    score: int


@dataclass
class SessionResults:
    candidate_name: str
    candidate_email: str
    session_id: str
    total_score: float
    summary: str
    questions: List[QuestionResult] = field(default_factory=list)

    @property
    def display_score(self) -> int:
        return round(self.total_score)

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["display_score"] = self.display_score
        return payload


def build_results(candidate: Candidate, session: InterviewSession) -> SessionResults:
    return SessionResults(
        candidate_name=candidate.name,
        candidate_email=candidate.email,
        session_id=session.id,
        total_score=float(session.total_score or 0.0),
        summary=session.ai_summary or NO_SUMMARY,
        questions=[
            QuestionResult(
                text=q.text,
                answer=q.answer or NO_ANSWER_SENTINEL,
                score=int(q.score or 0),
            )
            for q in session.questions
        ],
    )


def export_csv(results: SessionResults) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["candidate", "session_id", "total_score", "summary"])
    writer.writerow([results.candidate_name, results.session_id, round(results.total_score, 2), results.summary])
    writer.writerow([])
    writer.writerow(["question_number", "question", "answer", "score"])
    for index, item in enumerate(results.questions, start=1):
        writer.writerow([index, item.text, item.answer, item.score])
    return output.getvalue()


def export_pdf(results: SessionResults) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    x = 40
    y = height - 60

    c.setFont("Helvetica-Bold", 16)
    c.drawString(x, y, "Interview Results")
    y -= 24
    c.setFont("Helvetica", 10)
    c.drawString(x, y, f"Candidate: {results.candidate_name or 'Anonymous'}")
    y -= 14
    c.drawString(x, y, f"Total Score: {results.display_score}/100")
    y -= 18

    c.setFont("Helvetica-Bold", 12)
    c.drawString(x, y, "Summary:")
    y -= 14
    c.setFont("Helvetica", 10)
    c.drawString(x, y, results.summary[:120])
    y -= 18

    c.setFont("Helvetica-Bold", 12)
    c.drawString(x, y, "Questions:")
    y -= 14
    c.setFont("Helvetica", 10)
    for index, item in enumerate(results.questions, start=1):
        c.drawString(x + 6, y, f"Q{index}: {item.text[:100]}")
        y -= 12
        c.drawString(x + 12, y, f"A: {item.answer[:110]} (score: {item.score})")
        y -= 16
        if y < 80:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 60

    c.showPage()
    c.save()
    return buffer.getvalue()
