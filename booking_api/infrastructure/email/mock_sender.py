from __future__ import annotations

import logging
from dataclasses import dataclass

from booking_api.application.ports.email_sender import EmailSenderPort


@dataclass(frozen=True)
class SentMessage:
    to: str
    subject: str
    html_body: str
    from_name: str | None


class MockEmailSender(EmailSenderPort):
    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self._logger = logging.getLogger(__name__)

    def send_message(self, to: str, subject: str, html_body: str, from_name: str | None = None) -> str | None:
        self.sent.append(SentMessage(to=to, subject=subject, html_body=html_body, from_name=from_name))
        message_id = f"mock_message_{len(self.sent)}"
        self._logger.info("Mock email sent", extra={"event_id": message_id})
        return message_id
