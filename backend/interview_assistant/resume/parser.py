import re
from dataclasses import dataclass, asdict
from io import BytesIO
from typing import Optional

from docx import Document
from pypdf import PdfReader

from core.config import RESUME_MAX_BYTES


SUPPORTED_EXTENSIONS = ("pdf", "docx")

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")
NAME_WORD_RE = re.compile(r"^(?:[A-Z][a-z]*|[A-Z]+)$")

_HEADER_KEYWORDS = ("email", "phone", "resume", "cv")
_NAME_SCAN_LINES = 5


class ResumeParseError(ValueError):
    pass


class UnsupportedResumeFormat(ResumeParseError):
    pass


class ResumeTooLarge(ResumeParseError):
    pass


class CorruptResume(ResumeParseError):
    pass


@dataclass
class ParsedResume:
    raw_text: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def extracted_fields(self) -> list[str]:
        return [label for label, value in (("Name", self.name), ("Email", self.email), ("Phone", self.phone)) if value]

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["extracted_fields"] = self.extracted_fields
        return payload


def parse_pdf(file_bytes: bytes) -> str:
    reader = PdfReader(BytesIO(file_bytes))
    text = []
    for page in reader.pages:
        t = page.extract_text()
        if t:
            text.append(t)
    return "\n".join(text)


def parse_docx(file_bytes: bytes) -> str:
    doc = Document(BytesIO(file_bytes))
    return "\n".join([p.text for p in doc.paragraphs])


def file_extension(filename: str) -> str:
    name = str(filename or "").lower().strip()
    return name.rsplit(".", 1)[-1] if "." in name else ""


def extract_text(filename: str, file_bytes: bytes, max_bytes: int = RESUME_MAX_BYTES) -> str:
    if len(file_bytes or b"") > max_bytes:
        raise ResumeTooLarge(
            f"File size too large. Please upload a file smaller than {max_bytes // (1024 * 1024) or 1}MB."
        )

    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedResumeFormat("Unsupported file format. Please upload a PDF or DOCX file.")

    try:
        if extension == "pdf":
            return parse_pdf(file_bytes)
        return parse_docx(file_bytes)
    except Exception as exc:
        raise CorruptResume("Failed to parse resume. Please ensure the file is not corrupted.") from exc


def _looks_like_contact_line(line: str) -> bool:
    lowered = line.lower()
    if any(keyword in lowered for keyword in _HEADER_KEYWORDS):
        return True
    return bool(EMAIL_RE.search(line) or PHONE_RE.search(line))


def _guess_name(text: str) -> Optional[str]:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:_NAME_SCAN_LINES]:
        if _looks_like_contact_line(line):
            continue
        words = line.split()
        if 2 <= len(words) <= 4 and all(NAME_WORD_RE.match(word) for word in words):
            return line
    return None


def extract_resume_data(text: str) -> ParsedResume:
    """Best-effort prefill: first email, first phone-like number, and a name guess."""
    content = str(text or "")
    email_match = EMAIL_RE.search(content)
    phone_match = PHONE_RE.search(content)
    return ParsedResume(
        raw_text=content,
        name=_guess_name(content),
        email=email_match.group(0) if email_match else None,
        phone=phone_match.group(0) if phone_match else None,
    )


def parse_resume(filename: str, file_bytes: bytes, max_bytes: int = RESUME_MAX_BYTES) -> ParsedResume:
    return extract_resume_data(extract_text(filename, file_bytes, max_bytes=max_bytes))
