"""
In-memory outbox sender.

Keeps messages in a list instead of delivering them. Used for local
development (the CLI prints the outbox) and tests.
"""

from dataclasses import dataclass
from typing import List

from ideas_central.log import get_logger
from ideas_central.notifications.base import NotificationSender, SendResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutboxMessage:
    to: str
    subject: str
    body: str


class OutboxSender(NotificationSender):
    """
    Records every message it is asked to send.

    Attributes:
        messages: Sent messages, oldest first.
    """

    def __init__(self):
        self.messages: List[OutboxMessage] = []

    @property
    def name(self) -> str:
        return "outbox"

    def send(self, to: str, subject: str, body: str) -> SendResult:
        self.messages.append(OutboxMessage(to=to, subject=subject, body=body))
        logger.info("Queued email to %s: %s", to, subject)
        return SendResult(success=True, message=f"outbox-{len(self.messages)}")

    def sent_to(self, to: str) -> List[OutboxMessage]:
        return [m for m in self.messages if m.to == to]

    def clear(self) -> None:
        self.messages.clear()

    def __len__(self) -> int:
        return len(self.messages)
