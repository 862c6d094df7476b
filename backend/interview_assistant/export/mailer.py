import logging

import httpx

from core.config import EMAIL_API_KEY, EMAIL_API_URL, EMAIL_FROM, EMAIL_TIMEOUT_SEC
from interview_assistant.system_metrics import increment_metric
from .report import SessionResults


logger = logging.getLogger("interview.email")


def generate_email_content(results: SessionResults, to: str = "") -> dict:
    lines = [
        f"Dear {results.candidate_name},",
        "",
        "Thank you for completing your interview. Here are your results:",
        "",
        f"Total Score: {results.display_score}/100",
        "",
        f"Summary: {results.summary}",
        "",
        "Question Breakdown:",
    ]
    for index, item in enumerate(results.questions, start=1):
        lines.append(f"{index}. {item.text}")
        lines.append(f"   Answer: {item.answer}")
        lines.append(f"   Score: {item.score}/100")
    lines.extend(["", "Best regards,", "Interview Assistant"])

    return {
        "to": to or results.candidate_email,
        "subject": f"Interview Results - {results.candidate_name}",
        "body": "\n".join(lines),
    }


class EmailSender:
    """Posts messages to an HTTP email API. Failures are reported, never raised."""

    def __init__(self, api_url: str = EMAIL_API_URL, api_key: str = EMAIL_API_KEY,
                 sender: str = EMAIL_FROM, timeout: float = EMAIL_TIMEOUT_SEC,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_url)

    async def send(self, message: dict) -> bool:
        if not self.configured:
            logger.warning("Email API not configured; message to %s not sent", message.get("to"))
            increment_metric("emails_failed")
            return False

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    headers=headers,
                    json={
                        "from": self.sender,
                        "to": message.get("to"),
                        "subject": message.get("subject"),
                        "text": message.get("body"),
                    },
                )
        except Exception as exc:
            logger.warning("Email send failed: %s", exc)
            increment_metric("emails_failed")
            return False

        if response.status_code >= 300:
            logger.warning("Email API rejected message | status=%s", response.status_code)
            increment_metric("emails_failed")
            return False

        increment_metric("emails_sent")
        return True
