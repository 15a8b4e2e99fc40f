"""
Problem model for Ideas Central.

A Problem is a challenge statement submitted by a student or faculty
member and left open for the community to propose ideas against.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from ideas_central.errors import ValidationError
from ideas_central.models.common import (
    PRIORITIES,
    PROBLEM_STATUSES,
    format_timestamp,
    parse_timestamp,
    require_text,
)


@dataclass
class Problem:
    """
    A submitted challenge statement.

    Attributes:
        title: Short problem title.
        description: One or two sentence summary.
        category: Category slug (e.g., "technology", "environment").
        submitted_by: User id of the submitter.
        submitted_by_name: Display name of the submitter.
        priority: One of low/medium/high/urgent.
        status: One of open/in-progress/solved/closed.
        tags: Ordered list of free-form tags.
        full_description: Optional long-form description.
        department: Optional owning department.
        views_count / ideas_count / comments_count: Activity counters.
    """

    title: str
    description: str
    category: str
    submitted_by: str
    submitted_by_name: str = ""
    id: Optional[str] = None
    priority: str = "medium"
    status: str = "open"
    tags: list[str] = field(default_factory=list)
    full_description: Optional[str] = None
    department: Optional[str] = None
    views_count: int = 0
    ideas_count: int = 0
    comments_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Validate field values.

        Raises:
            ValidationError: If validation fails.
        """
        errors = []

        require_text(errors, "title", self.title)
        require_text(errors, "description", self.description)
        require_text(errors, "category", self.category)
        require_text(errors, "submitted_by", self.submitted_by)

        if self.priority not in PRIORITIES:
            errors.append(f"priority must be one of {', '.join(PRIORITIES)}, got {self.priority!r}")

        if self.status not in PROBLEM_STATUSES:
            errors.append(f"status must be one of {', '.join(PROBLEM_STATUSES)}, got {self.status!r}")

        for counter in ("views_count", "ideas_count", "comments_count"):
            if getattr(self, counter) < 0:
                errors.append(f"{counter} cannot be negative")

        if errors:
            raise ValidationError(f"Problem validation failed: {'; '.join(errors)}")

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"

    def to_dict(self) -> dict:
        """Convert to a plain dictionary with ISO timestamps."""
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Problem":
        """Create a Problem from a storage row, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("created_at", "updated_at"):
            if key in known:
                known[key] = parse_timestamp(known[key]) or datetime.now()
        if known.get("tags") is None:
            known["tags"] = []
        for counter in ("views_count", "ideas_count", "comments_count"):
            if known.get(counter) is None:
                known[counter] = 0
        return cls(**known)

    def __str__(self) -> str:
        return f"[{self.priority}] {self.title} ({self.status})"
