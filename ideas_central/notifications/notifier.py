"""
Decision notifier.

Subscribed to the record store, it emails the submitter whenever an
idea is approved or rejected. It runs after the write is committed, so
a delivery failure is logged and never affects the stored decision.
"""

import logging
from typing import Optional

from ideas_central.config import MENTOR_CONTACT_EMAIL
from ideas_central.errors import NotificationError
from ideas_central.log import get_logger, log_with_context
from ideas_central.notifications.base import NotificationSender, SendResult
from ideas_central.notifications.templates import build_decision_message
from ideas_central.records import IdeaStatusChanged

logger = get_logger(__name__)


class DecisionNotifier:
    """
    Post-commit listener that sends decision emails.

    Usage:
        notifier = DecisionNotifier(OutboxSender())
        store.subscribe(notifier)
    """

    def __init__(self, sender: NotificationSender, mentor_contact: Optional[str] = None):
        self.sender = sender
        self.mentor_contact = mentor_contact or MENTOR_CONTACT_EMAIL

    def __call__(self, event: IdeaStatusChanged) -> Optional[SendResult]:
        return self.notify(event)

    def notify(self, event: IdeaStatusChanged) -> Optional[SendResult]:
        """
        Send the decision email for an event.

        Returns:
            SendResult, or None when the event needs no email (not a
            decision, or the submitter has no known address).
        """
        idea = event.idea
        if not event.is_decision:
            return None
        if not idea.submitted_by_email:
            logger.warning("No email address for submitter of idea %s; skipping notification", idea.id)
            return None

        subject, body = build_decision_message(idea, self.mentor_contact)
        try:
            result = self.sender.send(idea.submitted_by_email, subject, body)
        except NotificationError as e:
            log_with_context(
                logger, logging.ERROR, "Decision email failed",
                idea_id=idea.id, status=idea.status, sender=self.sender.name, error=str(e),
            )
            return SendResult(success=False, message=str(e))

        log_with_context(
            logger, logging.INFO if result.success else logging.WARNING,
            "Decision email sent" if result.success else "Decision email not delivered",
            idea_id=idea.id, status=idea.status, sender=self.sender.name, detail=result.message,
        )
        return result

    def __repr__(self) -> str:
        return f"<DecisionNotifier sender={self.sender.name!r}>"
