from pydantic import BaseModel


class CandidateCreate(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    resume_text: str | None = None
    select: bool = True


class CandidateUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    resume_text: str | None = None


class SelectCandidateRequest(BaseModel):
    candidate_id: str | None = None


class TabRequest(BaseModel):
    tab: str


class WelcomeBackRequest(BaseModel):
    visible: bool


class DraftRequest(BaseModel):
    text: str = ""


class AnswerRequest(BaseModel):
    answer: str | None = None
    question_id: str | None = None


class EmailRequest(BaseModel):
    to: str | None = None
