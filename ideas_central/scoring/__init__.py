"""
Scoring module.

Aggregates evaluation sub-scores into the overall score of an idea.
"""

from ideas_central.scoring.scorer import (
    SUB_SCORE_NAMES,
    MIN_SUB_SCORE,
    MAX_SUB_SCORE,
    ScoreBreakdown,
    validate_sub_score,
    compute_overall_score,
    score_breakdown,
)

__all__ = [
    "SUB_SCORE_NAMES",
    "MIN_SUB_SCORE",
    "MAX_SUB_SCORE",
    "ScoreBreakdown",
    "validate_sub_score",
    "compute_overall_score",
    "score_breakdown",
]
