"""
Evaluation module.

Scores ideas and drives them through the review lifecycle.
"""

from ideas_central.evaluation.workflow import (
    TRANSITIONS,
    allowed_targets,
    can_transition,
    check_transition,
    decision_status,
    idempotency_key,
)
from ideas_central.evaluation.engine import EvaluationEngine, EvaluationOutcome

__all__ = [
    "TRANSITIONS",
    "allowed_targets",
    "can_transition",
    "check_transition",
    "decision_status",
    "idempotency_key",
    "EvaluationEngine",
    "EvaluationOutcome",
]
