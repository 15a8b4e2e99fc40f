"""
Score aggregation for idea evaluations.

Provides pure, side-effect-free functions to:
1. Validate the three evaluation sub-scores (innovation, feasibility, impact)
2. Compute the overall score an evaluation assigns to an idea

All functions are deterministic and do not mutate input data.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from ideas_central.errors import ValidationError


# =============================================================================
# Scoring Configuration
# =============================================================================

# Inclusive range for each sub-score
MIN_SUB_SCORE: int = 1
MAX_SUB_SCORE: int = 10

# Names of the sub-scores, in the order reviewers enter them
SUB_SCORE_NAMES: tuple[str, ...] = ("innovation", "feasibility", "impact")

# Overall score precision (one decimal place)
SCORE_QUANTUM = Decimal("0.1")


# =============================================================================
# Result Data Structures
# =============================================================================

@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Sub-scores and the overall score derived from them.

    Attributes:
        innovation: How novel the idea is (1-10).
        feasibility: How realistic the implementation is (1-10).
        impact: How much the idea would help (1-10).
        overall: Mean of the three, rounded half-up to one decimal.
    """
    innovation: int
    feasibility: int
    impact: int
    overall: float


# =============================================================================
# Validation
# =============================================================================

def validate_sub_score(name: str, value: object) -> int:
    """
    Check that a sub-score is an integer in [MIN_SUB_SCORE, MAX_SUB_SCORE].

    Booleans are rejected even though they are ints in Python.

    Raises:
        ValidationError: If the value is not an int or is out of range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} score must be an integer, got {value!r}")
    if not (MIN_SUB_SCORE <= value <= MAX_SUB_SCORE):
        raise ValidationError(
            f"{name} score must be between {MIN_SUB_SCORE} and {MAX_SUB_SCORE}, got {value}"
        )
    return value


# =============================================================================
# Scoring Functions
# =============================================================================

def compute_overall_score(innovation: int, feasibility: int, impact: int) -> float:
    """
    Compute the overall score of an evaluation.

    Formula:
        overall = (innovation + feasibility + impact) / 3
        rounded to one decimal place, halves rounded up

    Decimal arithmetic is used so that the rounding does not depend on
    binary floating point representation.

    Args:
        innovation: Innovation sub-score (1-10).
        feasibility: Feasibility sub-score (1-10).
        impact: Impact sub-score (1-10).

    Returns:
        Overall score as a float with one decimal place.

    Raises:
        ValidationError: If any sub-score is invalid.

    Example:
        >>> compute_overall_score(7, 6, 8)
        7.0
        >>> compute_overall_score(8, 9, 8)
        8.3
    """
    scores = [
        validate_sub_score(name, value)
        for name, value in zip(SUB_SCORE_NAMES, (innovation, feasibility, impact))
    ]
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return float(mean.quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP))


def score_breakdown(innovation: int, feasibility: int, impact: int) -> ScoreBreakdown:
    """Validate sub-scores and return them together with the overall score."""
    return ScoreBreakdown(
        innovation=innovation,
        feasibility=feasibility,
        impact=impact,
        overall=compute_overall_score(innovation, feasibility, impact),
    )

