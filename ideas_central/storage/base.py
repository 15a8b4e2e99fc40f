"""
Base storage abstraction for Ideas Central.

Defines the abstract interface that all storage backends must implement.
This allows swapping between the in-memory store and Supabase without
touching the record store facade or the evaluation engine. The backend
is chosen once at process start (see ideas_central.bootstrap).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ideas_central.models import Evaluation, Idea, Problem


# =============================================================================
# Filters and Results
# =============================================================================

@dataclass(frozen=True)
class ProblemFilters:
    """
    Filters for listing problems. None means "do not filter".

    Attributes:
        category: Exact category match.
        priority: Exact priority match.
        search: Case-insensitive substring of title (and description/tags
            where the backend supports it).
        submitted_by: Exact submitter user id.
    """
    category: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    submitted_by: Optional[str] = None


@dataclass(frozen=True)
class IdeaFilters:
    """Filters for listing ideas. None means "do not filter"."""
    problem_id: Optional[str] = None
    status: Optional[str] = None
    submitted_by: Optional[str] = None


@dataclass(frozen=True)
class EvaluationFilters:
    """Filters for listing evaluations. None means "do not filter"."""
    idea_id: Optional[str] = None
    evaluator_id: Optional[str] = None


@dataclass(frozen=True)
class ProblemStats:
    """Counts over the full problem collection."""
    total: int = 0
    open: int = 0
    urgent: int = 0
    in_progress: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.open,
            "urgent": self.urgent,
            "inProgress": self.in_progress,
        }

    def __str__(self) -> str:
        return (
            f"ProblemStats(total={self.total}, open={self.open}, "
            f"urgent={self.urgent}, in_progress={self.in_progress})"
        )


class Storage(ABC):
    """
    Abstract base class for all storage backends.

    Implementations must provide create/read/update/filter operations
    over problems, ideas and evaluations, with listings ordered newest
    first by creation time.

    Failures of the underlying store are raised as PersistenceError.
    Missing records are raised as NotFoundError from update operations
    and returned as None from single-record reads.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    # =========================================================================
    # Problems
    # =========================================================================

    @abstractmethod
    def list_problems(self, filters: ProblemFilters) -> List[Problem]:
        """Return problems matching filters, newest first."""
        pass

    @abstractmethod
    def get_problem(self, problem_id: str) -> Optional[Problem]:
        """Return a problem by id, or None."""
        pass

    @abstractmethod
    def insert_problem(self, problem: Problem) -> Problem:
        """
        Persist a new problem.

        The backend assigns the id; counters and timestamps are taken
        from the given instance.
        """
        pass

    @abstractmethod
    def update_problem_status(self, problem_id: str, status: str) -> Problem:
        """Set a problem's status and refresh updated_at."""
        pass

    @abstractmethod
    def count_problems(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> int:
        """Count problems, optionally restricted to a status and/or priority."""
        pass

    def get_problem_stats(self) -> ProblemStats:
        """
        Compute dashboard counts over the full problem collection.

        Default implementation issues one count per figure. Override for
        backends that can compute all figures in a single pass.
        """
        return ProblemStats(
            total=self.count_problems(),
            open=self.count_problems(status="open"),
            urgent=self.count_problems(priority="urgent"),
            in_progress=self.count_problems(status="in-progress"),
        )

    # =========================================================================
    # Ideas
    # =========================================================================

    @abstractmethod
    def list_ideas(self, filters: IdeaFilters) -> List[Idea]:
        """Return ideas matching filters, newest first."""
        pass

    @abstractmethod
    def get_idea(self, idea_id: str) -> Optional[Idea]:
        """Return an idea by id, or None."""
        pass

    @abstractmethod
    def insert_idea(self, idea: Idea) -> Idea:
        """
        Persist a new idea and increment its problem's ideas_count.

        The backend assigns the id.
        """
        pass

    @abstractmethod
    def update_idea_status(
        self,
        idea_id: str,
        status: str,
        score: Optional[float],
        expected_version: Optional[int] = None,
    ) -> Idea:
        """
        Write status and score to an idea as one update.

        The idea's version is incremented by one.

        Args:
            idea_id: Idea to update.
            status: New status.
            score: New score (None for undecided statuses).
            expected_version: When given, the update only applies if the
                stored version still matches.

        Raises:
            NotFoundError: If the idea does not exist.
            ConflictError: If expected_version no longer matches.
            PersistenceError: If the write fails.
        """
        pass

    # =========================================================================
    # Evaluations
    # =========================================================================

    @abstractmethod
    def list_evaluations(self, filters: EvaluationFilters) -> List[Evaluation]:
        """Return evaluations matching filters, newest first."""
        pass

    @abstractmethod
    def insert_evaluation(self, evaluation: Evaluation) -> Evaluation:
        """Persist a new evaluation. The backend assigns the id."""
        pass

    @abstractmethod
    def find_evaluation_by_key(self, idempotency_key: str) -> Optional[Evaluation]:
        """Return the evaluation stored under an idempotency key, or None."""
        pass

    @abstractmethod
    def record_evaluation(
        self,
        evaluation: Evaluation,
        expected_version: Optional[int] = None,
    ) -> Tuple[Evaluation, Idea]:
        """
        Insert an evaluation and apply its decision to the idea as one unit.

        Either both writes become visible or neither does. The idea's
        status is set to evaluation.status and its score to
        evaluation.overall_score.

        Raises:
            NotFoundError: If the idea does not exist.
            ConflictError: If expected_version no longer matches.
            PersistenceError: If either write fails.
        """
        pass

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
