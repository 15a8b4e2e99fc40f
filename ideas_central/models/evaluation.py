"""
Evaluation model for Ideas Central.

An Evaluation is the scored review a faculty member or admin records
for an Idea. Its status mirrors the decision applied to the Idea.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from ideas_central.errors import ValidationError
from ideas_central.models.common import (
    DECIDED_STATUSES,
    format_timestamp,
    parse_timestamp,
    require_text,
)
from ideas_central.scoring import SUB_SCORE_NAMES, compute_overall_score


# Read-side display fields filled by RecordStore.list_evaluations
DISPLAY_FIELDS = ("idea_title", "idea_description", "submitted_by_name")


@dataclass
class Evaluation:
    """
    A scored review of an Idea.

    Attributes:
        idea_id: Id of the evaluated Idea.
        evaluator_id: User id of the reviewer.
        evaluator_name: Full name of the reviewer.
        innovation_score / feasibility_score / impact_score: Sub-scores (1-10).
        status: "approved" or "rejected".
        overall_score: Derived from the sub-scores when not given.
        comments: Optional reviewer feedback.
        idempotency_key: Deduplicates retried submissions of the same review.
        idea_title / idea_description / submitted_by_name: Display-only join fields.
    """

    idea_id: str
    evaluator_id: str
    evaluator_name: str
    innovation_score: int
    feasibility_score: int
    impact_score: int
    status: str
    overall_score: Optional[float] = None
    id: Optional[str] = None
    comments: Optional[str] = None
    idempotency_key: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    idea_title: Optional[str] = None
    idea_description: Optional[str] = None
    submitted_by_name: Optional[str] = None

    def __post_init__(self) -> None:
        expected = compute_overall_score(
            self.innovation_score, self.feasibility_score, self.impact_score
        )
        if self.overall_score is None:
            self.overall_score = expected
        self.validate()

    def validate(self) -> None:
        """
        Validate field values and the overall score invariant.

        Raises:
            ValidationError: If validation fails.
        """
        errors = []

        require_text(errors, "idea_id", self.idea_id)
        require_text(errors, "evaluator_id", self.evaluator_id)

        if self.status not in DECIDED_STATUSES:
            errors.append(f"status must be one of {', '.join(DECIDED_STATUSES)}, got {self.status!r}")

        expected = compute_overall_score(
            self.innovation_score, self.feasibility_score, self.impact_score
        )
        if float(self.overall_score) != expected:
            errors.append(f"overall_score must be {expected}, got {self.overall_score}")

        if errors:
            raise ValidationError(f"Evaluation validation failed: {'; '.join(errors)}")

    @property
    def sub_scores(self) -> dict[str, int]:
        return dict(zip(
            SUB_SCORE_NAMES,
            (self.innovation_score, self.feasibility_score, self.impact_score),
        ))

    def to_dict(self, include_display: bool = True) -> dict:
        """
        Convert to a plain dictionary with ISO timestamps.

        Args:
            include_display: Keep the read-side join fields (False for writes).
        """
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["updated_at"] = format_timestamp(self.updated_at)
        if not include_display:
            for key in DISPLAY_FIELDS:
                data.pop(key, None)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Evaluation":
        """Create an Evaluation from a storage row, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("created_at", "updated_at"):
            if key in known:
                known[key] = parse_timestamp(known[key]) or datetime.now()
        if known.get("overall_score") is not None:
            known["overall_score"] = float(known["overall_score"])
        return cls(**known)

    def __str__(self) -> str:
        return f"{self.evaluator_name}: {self.status} ({self.overall_score:.1f})"
