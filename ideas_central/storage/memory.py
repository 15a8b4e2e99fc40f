"""
In-memory storage backend for Ideas Central.

Each InMemoryStorage instance owns its own collections; nothing is
shared between instances. Use it for development, demos and tests.
Data is lost when the process ends.
"""

import copy
import itertools
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple, TypeVar

from ideas_central.errors import ConflictError, NotFoundError
from ideas_central.log import get_logger
from ideas_central.models import Evaluation, Idea, Problem
from ideas_central.storage.base import (
    EvaluationFilters,
    IdeaFilters,
    ProblemFilters,
    Storage,
)

logger = get_logger(__name__)

Record = TypeVar("Record", Problem, Idea, Evaluation)


class InMemoryStorage(Storage):
    """
    Dictionary-backed storage with snapshot transactions.

    Records are copied on the way in and on the way out, so callers can
    never mutate stored state except through the Storage interface.
    """

    def __init__(self):
        self._problems: Dict[str, Problem] = {}
        self._ideas: Dict[str, Idea] = {}
        self._evaluations: Dict[str, Evaluation] = {}
        # Insertion sequence, used to order records created in the same instant
        self._sequence: Dict[str, int] = {}
        self._counter = itertools.count()

    @property
    def name(self) -> str:
        return "memory"

    # =========================================================================
    # Helpers
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run a block of writes as a unit.

        On any exception, all three collections are restored to their state
        at the start of the block and the exception is re-raised.
        """
        snapshot = (
            copy.deepcopy(self._problems),
            copy.deepcopy(self._ideas),
            copy.deepcopy(self._evaluations),
            dict(self._sequence),
        )
        try:
            yield
        except Exception:
            self._problems, self._ideas, self._evaluations, self._sequence = snapshot
            logger.warning("In-memory transaction rolled back")
            raise

    def _assign_id(self, prefix: str) -> str:
        record_id = f"{prefix}-{uuid.uuid4()}"
        self._sequence[record_id] = next(self._counter)
        return record_id

    def _newest_first(self, records: List[Record]) -> List[Record]:
        ordered = sorted(
            records,
            key=lambda r: (r.created_at, self._sequence.get(r.id, -1)),
            reverse=True,
        )
        return [copy.deepcopy(r) for r in ordered]

    def _require_idea(self, idea_id: str) -> Idea:
        idea = self._ideas.get(idea_id)
        if idea is None:
            raise NotFoundError("Idea", idea_id)
        return idea

    # =========================================================================
    # Problems
    # =========================================================================

    def list_problems(self, filters: ProblemFilters) -> List[Problem]:
        problems = list(self._problems.values())

        if filters.category:
            problems = [p for p in problems if p.category == filters.category]

        if filters.priority:
            problems = [p for p in problems if p.priority == filters.priority]

        if filters.search:
            needle = filters.search.lower()
            problems = [
                p for p in problems
                if needle in p.title.lower()
                or needle in p.description.lower()
                or any(needle in tag.lower() for tag in p.tags)
            ]

        if filters.submitted_by:
            problems = [p for p in problems if p.submitted_by == filters.submitted_by]

        return self._newest_first(problems)

    def get_problem(self, problem_id: str) -> Optional[Problem]:
        problem = self._problems.get(problem_id)
        return copy.deepcopy(problem) if problem else None

    def insert_problem(self, problem: Problem) -> Problem:
        stored = copy.deepcopy(problem)
        stored.id = stored.id or self._assign_id("problem")
        self._sequence.setdefault(stored.id, next(self._counter))
        self._problems[stored.id] = stored
        return copy.deepcopy(stored)

    def update_problem_status(self, problem_id: str, status: str) -> Problem:
        problem = self._problems.get(problem_id)
        if problem is None:
            raise NotFoundError("Problem", problem_id)
        updated = copy.deepcopy(problem)
        updated.status = status
        updated.updated_at = datetime.now()
        updated.validate()

        self._problems[problem_id] = updated
        return copy.deepcopy(updated)

    def count_problems(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> int:
        return sum(
            1 for p in self._problems.values()
            if (status is None or p.status == status)
            and (priority is None or p.priority == priority)
        )

    # =========================================================================
    # Ideas
    # =========================================================================

    def list_ideas(self, filters: IdeaFilters) -> List[Idea]:
        ideas = list(self._ideas.values())

        if filters.problem_id:
            ideas = [i for i in ideas if i.problem_id == filters.problem_id]

        if filters.status:
            ideas = [i for i in ideas if i.status == filters.status]

        if filters.submitted_by:
            ideas = [i for i in ideas if i.submitted_by == filters.submitted_by]

        return self._newest_first(ideas)

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        idea = self._ideas.get(idea_id)
        return copy.deepcopy(idea) if idea else None

    def insert_idea(self, idea: Idea) -> Idea:
        with self.transaction():
            stored = copy.deepcopy(idea)
            stored.id = stored.id or self._assign_id("idea")
            self._sequence.setdefault(stored.id, next(self._counter))
            self._ideas[stored.id] = stored

            problem = self._problems.get(stored.problem_id)
            if problem is not None:
                problem.ideas_count += 1
                problem.updated_at = datetime.now()
        return copy.deepcopy(stored)

    def update_idea_status(
        self,
        idea_id: str,
        status: str,
        score: Optional[float],
        expected_version: Optional[int] = None,
    ) -> Idea:
        idea = self._require_idea(idea_id)

        if expected_version is not None and idea.version != expected_version:
            raise ConflictError(
                f"Idea {idea_id} changed concurrently "
                f"(expected version {expected_version}, found {idea.version})"
            )

        updated = copy.deepcopy(idea)
        updated.status = status
        updated.score = score
        updated.version = idea.version + 1
        updated.updated_at = datetime.now()
        updated.validate()

        self._ideas[idea_id] = updated
        return copy.deepcopy(updated)

    # =========================================================================
    # Evaluations
    # =========================================================================

    def list_evaluations(self, filters: EvaluationFilters) -> List[Evaluation]:
        evaluations = list(self._evaluations.values())

        if filters.idea_id:
            evaluations = [e for e in evaluations if e.idea_id == filters.idea_id]

        if filters.evaluator_id:
            evaluations = [e for e in evaluations if e.evaluator_id == filters.evaluator_id]

        return self._newest_first(evaluations)

    def insert_evaluation(self, evaluation: Evaluation) -> Evaluation:
        stored = copy.deepcopy(evaluation)
        stored.id = stored.id or self._assign_id("evaluation")
        self._sequence.setdefault(stored.id, next(self._counter))
        self._evaluations[stored.id] = stored
        return copy.deepcopy(stored)

    def find_evaluation_by_key(self, idempotency_key: str) -> Optional[Evaluation]:
        for evaluation in self._evaluations.values():
            if evaluation.idempotency_key == idempotency_key:
                return copy.deepcopy(evaluation)
        return None

    def record_evaluation(
        self,
        evaluation: Evaluation,
        expected_version: Optional[int] = None,
    ) -> Tuple[Evaluation, Idea]:
        self._require_idea(evaluation.idea_id)

        with self.transaction():
            stored = self.insert_evaluation(evaluation)
            idea = self.update_idea_status(
                evaluation.idea_id,
                evaluation.status,
                stored.overall_score,
                expected_version=expected_version,
            )
        return stored, idea

    # =========================================================================
    # Testing helpers
    # =========================================================================

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._problems.clear()
        self._ideas.clear()
        self._evaluations.clear()
        self._sequence.clear()

    def count(self) -> Dict[str, int]:
        """Return number of stored records per collection (for testing)."""
        return {
            "problems": len(self._problems),
            "ideas": len(self._ideas),
            "evaluations": len(self._evaluations),
        }
