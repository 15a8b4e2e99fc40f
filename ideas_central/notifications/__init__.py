"""
Notifications module.

Outbound messages to idea submitters.
"""

from ideas_central.notifications.base import NotificationSender, SendResult
from ideas_central.notifications.outbox import OutboxMessage, OutboxSender
from ideas_central.notifications.resend import ResendSender
from ideas_central.notifications.templates import build_decision_message
from ideas_central.notifications.notifier import DecisionNotifier

__all__ = [
    "NotificationSender",
    "SendResult",
    "OutboxMessage",
    "OutboxSender",
    "ResendSender",
    "build_decision_message",
    "DecisionNotifier",
]
