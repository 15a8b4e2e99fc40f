"""
Notification sender abstraction for Ideas Central.

Defines the interface every outbound message channel implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class SendResult:
    """
    Outcome of a send attempt.

    Attributes:
        success: Whether the provider accepted the message.
        message: Provider message id on success, otherwise the reason it failed.
    """
    success: bool
    message: str = ""


class NotificationSender(ABC):
    """
    Abstract base class for notification channels (email provider, outbox).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs (e.g., "resend", "outbox")."""
        pass

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> SendResult:
        """
        Deliver one message.

        Args:
            to: Recipient address.
            subject: Subject line.
            body: HTML body.

        Returns:
            SendResult. A rejected message is reported with success=False.

        Raises:
            NotificationError: If the channel could not be reached at all.
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
