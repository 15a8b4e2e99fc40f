"""
Idea model for Ideas Central.

An Idea is a proposed solution to a Problem. It moves through the
lifecycle pending -> under-review -> approved/rejected, and carries a
score only once a decision has been made.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from ideas_central.errors import ValidationError
from ideas_central.models.common import (
    DECIDED_STATUSES,
    IDEA_PENDING,
    IDEA_STATUSES,
    MAX_SUB_SCORE,
    MIN_SUB_SCORE,
    format_timestamp,
    parse_timestamp,
    require_text,
)


@dataclass
class Idea:
    """
    A proposed solution to a Problem.

    Attributes:
        problem_id: Id of the Problem this idea solves.
        title: Short idea title.
        description: Summary of the idea.
        solution: How the idea solves the problem.
        submitted_by: User id of the submitter.
        submitted_by_name: Display name of the submitter.
        submitted_by_email: Address decision emails are sent to (optional).
        status: pending, under-review, approved or rejected.
        score: Overall evaluation score, set only when approved/rejected.
        version: Incremented on every status write (optimistic concurrency).
    """

    problem_id: str
    title: str
    description: str
    solution: str
    submitted_by: str
    submitted_by_name: str = ""
    id: Optional[str] = None
    submitted_by_email: Optional[str] = None
    implementation: Optional[str] = None
    resources: Optional[str] = None
    timeline: Optional[str] = None
    status: str = IDEA_PENDING
    score: Optional[float] = None
    version: int = 1
    problem_title: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Validate field values and the status/score invariant.

        Raises:
            ValidationError: If validation fails.
        """
        errors = []

        require_text(errors, "problem_id", self.problem_id)
        require_text(errors, "title", self.title)
        require_text(errors, "description", self.description)
        require_text(errors, "solution", self.solution)
        require_text(errors, "submitted_by", self.submitted_by)

        if self.status not in IDEA_STATUSES:
            errors.append(f"status must be one of {', '.join(IDEA_STATUSES)}, got {self.status!r}")
        elif self.status in DECIDED_STATUSES and self.score is None:
            errors.append(f"score is required when status is {self.status}")
        elif self.status not in DECIDED_STATUSES and self.score is not None:
            errors.append(f"score must be empty while status is {self.status}")

        if self.score is not None and not (MIN_SUB_SCORE <= self.score <= MAX_SUB_SCORE):
            errors.append(
                f"score must be between {MIN_SUB_SCORE} and {MAX_SUB_SCORE}, got {self.score}"
            )

        if self.version < 1:
            errors.append("version must be at least 1")

        if errors:
            raise ValidationError(f"Idea validation failed: {'; '.join(errors)}")

    @property
    def is_decided(self) -> bool:
        return self.status in DECIDED_STATUSES

    def to_dict(self) -> dict:
        """Convert to a plain dictionary with ISO timestamps."""
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Idea":
        """Create an Idea from a storage row, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("created_at", "updated_at"):
            if key in known:
                known[key] = parse_timestamp(known[key]) or datetime.now()
        if known.get("score") is not None:
            known["score"] = float(known["score"])
        if known.get("version") is None:
            known["version"] = 1
        return cls(**known)

    def __str__(self) -> str:
        score = f"{self.score:.1f}" if self.score is not None else "-"
        return f"{self.title} [{self.status}] (score: {score})"

    def __repr__(self) -> str:
        return (
            f"Idea(id={self.id!r}, title={self.title!r}, "
            f"status={self.status!r}, score={self.score}, version={self.version})"
        )
