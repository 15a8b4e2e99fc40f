"""
Shared constants and helpers for the Ideas Central data model.
"""

from datetime import datetime
from typing import Any, Optional

from ideas_central.scoring import MAX_SUB_SCORE, MIN_SUB_SCORE


# =============================================================================
# Enumerated Values
# =============================================================================

PRIORITIES = ("low", "medium", "high", "urgent")

PROBLEM_STATUSES = ("open", "in-progress", "solved", "closed")

IDEA_PENDING = "pending"
IDEA_UNDER_REVIEW = "under-review"
IDEA_APPROVED = "approved"
IDEA_REJECTED = "rejected"

IDEA_STATUSES = (IDEA_PENDING, IDEA_UNDER_REVIEW, IDEA_APPROVED, IDEA_REJECTED)

# Statuses that carry a score
DECIDED_STATUSES = (IDEA_APPROVED, IDEA_REJECTED)

ROLES = ("student", "faculty", "admin")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO timestamp (as returned by storage backends) into a datetime.

    Accepts datetime objects unchanged and a trailing "Z" for UTC.
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO string (None stays None)."""
    return value.isoformat() if value else None


def require_text(errors: list[str], name: str, value: Optional[str]) -> None:
    """Append an error when a required text field is empty."""
    if not value or not str(value).strip():
        errors.append(f"{name} is required and cannot be empty")
