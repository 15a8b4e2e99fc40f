"""
Resend email sender.

Delivers messages through the Resend HTTP API.
API: https://resend.com/docs/api-reference/emails/send-email
"""

import requests

from ideas_central.config import MAIL_FROM, REQUEST_TIMEOUT, RESEND_API_KEY
from ideas_central.errors import NotificationError
from ideas_central.log import get_logger
from ideas_central.notifications.base import NotificationSender, SendResult

logger = get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendSender(NotificationSender):
    """
    Sends email with the Resend API.

    Without an API key nothing is sent and every call reports
    success=False, so a missing key never breaks a review.
    """

    def __init__(self, api_key: str | None = None, sender: str | None = None):
        self.api_key = RESEND_API_KEY if api_key is None else api_key
        self.sender = sender or MAIL_FROM

    @property
    def name(self) -> str:
        return "resend"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, to: str, subject: str, body: str) -> SendResult:
        if not self.is_configured:
            logger.error("RESEND_API_KEY is not set. Cannot send email to %s", to)
            return SendResult(success=False, message="Email service not configured.")

        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": body,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                RESEND_API_URL,
                headers=headers,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.Timeout as e:
            raise NotificationError(f"Resend request timed out after {REQUEST_TIMEOUT}s") from e
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"Resend request failed: {e}") from e

        if not response.ok:
            reason = _error_message(response)
            logger.error("Resend rejected email to %s: %s", to, reason)
            return SendResult(success=False, message=reason)

        message_id = _json(response).get("id", "")
        logger.info("Email sent to %s (id=%s, subject=%r)", to, message_id, subject)
        return SendResult(success=True, message=message_id)


def _json(response: requests.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(response: requests.Response) -> str:
    return _json(response).get("message") or f"HTTP {response.status_code}"
