"""
Idea lifecycle rules.

    pending ──> under-review ──> approved
       │                    └──> rejected
       └──────────────────────> approved / rejected

Approved and rejected are final unless re-evaluation is enabled, in
which case a decided idea may receive a new decision.
"""

from datetime import datetime

from ideas_central.errors import ConflictError, ValidationError
from ideas_central.models import (
    IDEA_APPROVED,
    IDEA_PENDING,
    IDEA_REJECTED,
    IDEA_UNDER_REVIEW,
)


TRANSITIONS: dict[str, tuple[str, ...]] = {
    IDEA_PENDING: (IDEA_UNDER_REVIEW, IDEA_APPROVED, IDEA_REJECTED),
    IDEA_UNDER_REVIEW: (IDEA_APPROVED, IDEA_REJECTED),
    IDEA_APPROVED: (),
    IDEA_REJECTED: (),
}

REEVALUATION_TRANSITIONS: dict[str, tuple[str, ...]] = {
    IDEA_APPROVED: (IDEA_APPROVED, IDEA_REJECTED),
    IDEA_REJECTED: (IDEA_APPROVED, IDEA_REJECTED),
}


def allowed_targets(current: str, allow_reevaluation: bool = False) -> tuple[str, ...]:
    """Statuses an idea in `current` may move to."""
    if allow_reevaluation and current in REEVALUATION_TRANSITIONS:
        return REEVALUATION_TRANSITIONS[current]
    return TRANSITIONS.get(current, ())


def can_transition(current: str, target: str, allow_reevaluation: bool = False) -> bool:
    return target in allowed_targets(current, allow_reevaluation)


def check_transition(
    idea_id: str,
    current: str,
    target: str,
    allow_reevaluation: bool = False,
) -> None:
    """
    Raises:
        ConflictError: If the idea may not move from current to target.
    """
    if not can_transition(current, target, allow_reevaluation):
        raise ConflictError(f"Idea {idea_id} cannot move from {current} to {target}")


def decision_status(decision: bool) -> str:
    """
    Map a reviewer decision to the resulting idea status.

    Raises:
        ValidationError: If decision is not a bool.
    """
    if not isinstance(decision, bool):
        raise ValidationError(f"decision must be true or false, got {decision!r}")
    return IDEA_APPROVED if decision else IDEA_REJECTED


def idempotency_key(idea_id: str, evaluator_id: str, at: datetime, window_seconds: int) -> str:
    """
    Key identifying one review action, used to drop retried submissions.

    Submissions by the same evaluator for the same idea within one
    window of `window_seconds` share a key.
    """
    bucket = int(at.timestamp()) // window_seconds
    return f"{idea_id}:{evaluator_id}:{bucket}"
