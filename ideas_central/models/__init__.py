"""
Data models module.

Defines data structures for problems, ideas and evaluations.
"""

from ideas_central.models.common import (
    PRIORITIES,
    PROBLEM_STATUSES,
    IDEA_STATUSES,
    DECIDED_STATUSES,
    IDEA_PENDING,
    IDEA_UNDER_REVIEW,
    IDEA_APPROVED,
    IDEA_REJECTED,
    ROLES,
)
from ideas_central.models.problem import Problem
from ideas_central.models.idea import Idea
from ideas_central.models.evaluation import Evaluation

__all__ = [
    "PRIORITIES",
    "PROBLEM_STATUSES",
    "IDEA_STATUSES",
    "DECIDED_STATUSES",
    "IDEA_PENDING",
    "IDEA_UNDER_REVIEW",
    "IDEA_APPROVED",
    "IDEA_REJECTED",
    "ROLES",
    "Problem",
    "Idea",
    "Evaluation",
]
