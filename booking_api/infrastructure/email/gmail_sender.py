from __future__ import annotations

import base64
import logging
from email.mime.text import MIMEText
from email.utils import formataddr

import httpx

from booking_api.application.exceptions import EmailDeliveryError
from booking_api.application.ports.email_sender import EmailSenderPort
from booking_api.infrastructure.google.oauth import GoogleAccessTokenProvider, GoogleAuthError

GMAIL_API = "https://gmail.googleapis.com/gmail/v1"


class GmailSender(EmailSenderPort):
    def __init__(
        self,
        token_provider: GoogleAccessTokenProvider,
        sender_address: str,
        default_from_name: str,
        base_url: str = GMAIL_API,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._tokens = token_provider
        self._sender_address = sender_address
        self._default_from_name = default_from_name
        self._send_endpoint = f"{base_url.rstrip('/')}/users/me/messages/send"
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def build_raw_message(self, to: str, subject: str, html_body: str, from_name: str | None = None) -> str:
        message = MIMEText(html_body, "html", "utf-8")
        message["To"] = to
        message["From"] = formataddr((from_name or self._default_from_name, self._sender_address))
        message["Subject"] = subject
        return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii").rstrip("=")

    def send_message(self, to: str, subject: str, html_body: str, from_name: str | None = None) -> str | None:
        raw = self.build_raw_message(to, subject, html_body, from_name)
        try:
            headers = {"Authorization": f"Bearer {self._tokens.get_token()}"}
            resp = self._client.post(self._send_endpoint, headers=headers, json={"raw": raw})
        except GoogleAuthError as e:
            raise EmailDeliveryError(str(e)) from e
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Gmail request failed: {e}") from e

        if resp.status_code >= 400:
            if resp.status_code == 401:
                self._tokens.invalidate()
            try:
                error_message = resp.json().get("error", {}).get("message")
            except ValueError:
                error_message = resp.text
            self._logger.error(
                "Gmail send failed",
                extra={"status": resp.status_code, "error": error_message},
            )
            raise EmailDeliveryError(f"Gmail returned {resp.status_code}: {error_message}")

        message_id = resp.json().get("id")
        self._logger.info("Email sent via Gmail API", extra={"event_id": message_id})
        return message_id

    def close(self) -> None:
        self._client.close()
