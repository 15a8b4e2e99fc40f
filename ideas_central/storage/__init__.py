"""
Storage module.

Handles persistence and retrieval of problems, ideas and evaluations
via the in-memory store or Supabase.
"""

from ideas_central.storage.base import (
    Storage,
    ProblemFilters,
    IdeaFilters,
    EvaluationFilters,
    ProblemStats,
)
from ideas_central.storage.memory import InMemoryStorage
from ideas_central.storage.supabase import SupabaseStorage

__all__ = [
    "Storage",
    "ProblemFilters",
    "IdeaFilters",
    "EvaluationFilters",
    "ProblemStats",
    "InMemoryStorage",
    "SupabaseStorage",
]
