"""
Record store facade for Ideas Central.

RecordStore presents one CRUD + filter interface over problems, ideas
and evaluations, whatever storage backend sits underneath. It owns the
input rules (required fields, "all" filter values, closed problems) and
publishes an IdeaStatusChanged event after every committed idea status
write. Listeners such as the decision notifier subscribe to those
events; a failing listener is logged and never undoes the write.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ideas_central.errors import ConflictError, NotFoundError, ValidationError
from ideas_central.log import get_logger
from ideas_central.models import (
    DECIDED_STATUSES,
    IDEA_PENDING,
    IDEA_STATUSES,
    PROBLEM_STATUSES,
    Evaluation,
    Idea,
    Problem,
)
from ideas_central.storage.base import (
    EvaluationFilters,
    IdeaFilters,
    ProblemFilters,
    ProblemStats,
    Storage,
)

logger = get_logger(__name__)

# Filter value meaning "no filter", as sent by list pages
ALL = "all"

UNKNOWN_IDEA_TITLE = "Unknown Idea"
UNKNOWN_SUBMITTER = "Unknown Submitter"

# Fields callers may not set when creating records
_PROBLEM_MANAGED = ("id", "views_count", "ideas_count", "comments_count", "created_at", "updated_at")
_IDEA_MANAGED = ("id", "status", "score", "version", "problem_title", "created_at", "updated_at")
_EVALUATION_MANAGED = ("id", "created_at", "updated_at", "idea_title", "idea_description", "submitted_by_name")


@dataclass(frozen=True)
class IdeaStatusChanged:
    """
    Published after an idea's status/score write has been committed.

    Attributes:
        idea: The idea as stored after the write.
        previous_status: Status before the write.
        evaluation: The evaluation that caused the change, if any.
    """
    idea: Idea
    previous_status: str
    evaluation: Optional[Evaluation] = None

    @property
    def is_decision(self) -> bool:
        return self.idea.status in DECIDED_STATUSES


Listener = Callable[[IdeaStatusChanged], None]


def _filter_value(value: Optional[str]) -> Optional[str]:
    """Normalize a filter value: empty and "all" mean no filter."""
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.lower() == ALL:
        return None
    return value


def _creation_fields(data: Dict[str, Any], managed: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in managed}


class RecordStore:
    """
    Facade over a Storage backend.

    Usage:
        store = RecordStore(InMemoryStorage())
        store.subscribe(DecisionNotifier(sender))
        problem = store.create_problem({...})
        idea = store.create_idea({"problem_id": problem.id, ...})
    """

    def __init__(self, storage: Storage, listeners: Optional[List[Listener]] = None):
        self.storage = storage
        self._listeners: List[Listener] = list(listeners or [])

    # =========================================================================
    # Post-commit events
    # =========================================================================

    def subscribe(self, listener: Listener) -> None:
        """Register a listener for IdeaStatusChanged events."""
        self._listeners.append(listener)

    def _publish(self, event: IdeaStatusChanged) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Post-commit listener %r failed for idea %s",
                    listener, event.idea.id,
                )

    # =========================================================================
    # Problems
    # =========================================================================

    def list_problems(
        self,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> List[Problem]:
        """List problems newest first. "all" or empty filters are ignored."""
        filters = ProblemFilters(
            category=_filter_value(category),
            priority=_filter_value(priority),
            search=_filter_value(search),
            submitted_by=_filter_value(submitted_by),
        )
        problems = self.storage.list_problems(filters)
        logger.debug("Listed %d problems with %s", len(problems), filters)
        return problems

    def get_problem(self, problem_id: str) -> Optional[Problem]:
        return self.storage.get_problem(problem_id)

    def create_problem(self, data: Dict[str, Any]) -> Problem:
        """
        Create a problem from submitted data.

        The id, counters and timestamps are assigned here; any such keys
        in data are ignored.

        Raises:
            ValidationError: If required fields are missing or invalid.
        """
        fields = _creation_fields(data, _PROBLEM_MANAGED)
        try:
            problem = Problem(**fields)
        except TypeError as e:
            raise ValidationError(f"Invalid problem data: {e}") from e

        created = self.storage.insert_problem(problem)
        logger.info("Created problem %s (%s)", created.id, created.title)
        return created

    def get_problem_stats(self) -> ProblemStats:
        return self.storage.get_problem_stats()

    def update_problem_status(self, problem_id: str, status: str) -> Problem:
        """
        Change a problem's status. Closed problems are final.

        Raises:
            ValidationError: If status is unknown or the problem is closed.
            NotFoundError: If the problem does not exist.
        """
        if status not in PROBLEM_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(PROBLEM_STATUSES)}, got {status!r}")

        problem = self.storage.get_problem(problem_id)
        if problem is None:
            raise NotFoundError("Problem", problem_id)
        if problem.is_closed:
            raise ValidationError(f"Problem {problem_id} is closed and cannot change status")

        updated = self.storage.update_problem_status(problem_id, status)
        logger.info("Problem %s status %s -> %s", problem_id, problem.status, status)
        return updated

    # =========================================================================
    # Ideas
    # =========================================================================

    def list_ideas(
        self,
        problem_id: Optional[str] = None,
        status: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> List[Idea]:
        """List ideas newest first. "all" or empty filters are ignored."""
        status = _filter_value(status)
        if status is not None and status not in IDEA_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(IDEA_STATUSES)}, got {status!r}")

        filters = IdeaFilters(
            problem_id=_filter_value(problem_id),
            status=status,
            submitted_by=_filter_value(submitted_by),
        )
        ideas = self.storage.list_ideas(filters)
        logger.debug("Listed %d ideas with %s", len(ideas), filters)
        return ideas

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        return self.storage.get_idea(idea_id)

    def create_idea(self, data: Dict[str, Any]) -> Idea:
        """
        Create an idea for an existing, not closed problem.

        The status is always "pending" and the score empty, whatever
        data contains.

        Raises:
            ValidationError: If fields are missing or the problem is closed.
            NotFoundError: If the referenced problem does not exist.
        """
        fields = _creation_fields(data, _IDEA_MANAGED)
        try:
            idea = Idea(**fields, status=IDEA_PENDING, score=None)
        except TypeError as e:
            raise ValidationError(f"Invalid idea data: {e}") from e

        problem = self.storage.get_problem(idea.problem_id)
        if problem is None:
            raise NotFoundError("Problem", idea.problem_id)
        if problem.is_closed:
            raise ValidationError(f"Problem {problem.id} is closed to new ideas")

        created = self.storage.insert_idea(idea)
        logger.info("Created idea %s for problem %s", created.id, created.problem_id)
        return created

    def update_idea_status_and_score(
        self,
        idea_id: str,
        status: str,
        score: Optional[float],
        expected_version: Optional[int] = None,
    ) -> Idea:
        """
        Write status and score to an idea as one update, then publish
        IdeaStatusChanged to listeners.

        Raises:
            ValidationError: If status/score break the idea invariants.
            NotFoundError: If the idea does not exist.
            ConflictError: If expected_version no longer matches, or the key
                is already stored for a review with different scores or decision.
            PersistenceError: If the write fails.
        """
        if status not in IDEA_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(IDEA_STATUSES)}, got {status!r}")
        if status in DECIDED_STATUSES and score is None:
            raise ValidationError(f"score is required when status is {status}")
        if status not in DECIDED_STATUSES and score is not None:
            raise ValidationError(f"score must be empty while status is {status}")

        current = self.storage.get_idea(idea_id)
        if current is None:
            raise NotFoundError("Idea", idea_id)

        updated = self.storage.update_idea_status(idea_id, status, score, expected_version)
        logger.info(
            "Idea %s status %s -> %s (score=%s)",
            idea_id, current.status, updated.status, updated.score,
        )

        self._publish(IdeaStatusChanged(idea=updated, previous_status=current.status))
        return updated

    # =========================================================================
    # Evaluations
    # =========================================================================

    def list_evaluations(
        self,
        idea_id: Optional[str] = None,
        evaluator_id: Optional[str] = None,
    ) -> List[Evaluation]:
        """
        List evaluations newest first, each enriched with the evaluated
        idea's title, description and submitter name for display.
        """
        filters = EvaluationFilters(
            idea_id=_filter_value(idea_id),
            evaluator_id=_filter_value(evaluator_id),
        )
        evaluations = self.storage.list_evaluations(filters)

        ideas: Dict[str, Optional[Idea]] = {}
        for evaluation in evaluations:
            if evaluation.idea_title is not None:
                continue
            if evaluation.idea_id not in ideas:
                ideas[evaluation.idea_id] = self.storage.get_idea(evaluation.idea_id)
            idea = ideas[evaluation.idea_id]
            evaluation.idea_title = idea.title if idea else UNKNOWN_IDEA_TITLE
            evaluation.idea_description = idea.description if idea else ""
            evaluation.submitted_by_name = idea.submitted_by_name if idea else UNKNOWN_SUBMITTER

        return evaluations

    def create_evaluation(self, data: Dict[str, Any]) -> Evaluation:
        """
        Persist an evaluation record on its own (no idea update).

        The overall score is derived from the sub-scores.

        Raises:
            ValidationError: If fields or sub-scores are invalid.
        """
        fields = _creation_fields(data, _EVALUATION_MANAGED)
        fields.pop("overall_score", None)
        try:
            evaluation = Evaluation(**fields)
        except TypeError as e:
            raise ValidationError(f"Invalid evaluation data: {e}") from e

        created = self.storage.insert_evaluation(evaluation)
        logger.info("Created evaluation %s for idea %s", created.id, created.idea_id)
        return created

    def find_evaluation_by_key(self, idempotency_key: str) -> Optional[Evaluation]:
        return self.storage.find_evaluation_by_key(idempotency_key)

    def record_evaluation(
        self,
        evaluation: Evaluation,
        expected_version: Optional[int] = None,
    ) -> Tuple[Evaluation, Idea]:
        """
        Store an evaluation and apply its decision to the idea as one unit,
        then publish IdeaStatusChanged.

        A replay with an idempotency key that is already stored does not
        create a second evaluation. The idea update is re-applied only if
        it is missing and no later evaluation of the idea exists.

        Raises:
            NotFoundError: If the idea does not exist.
            ConflictError: If expected_version no longer matches, or the key
                is already stored for a review with other scores or decision.
            PersistenceError: If the unit could not be committed.
        """
        current = self.storage.get_idea(evaluation.idea_id)
        if current is None:
            raise NotFoundError("Idea", evaluation.idea_id)

        if evaluation.idempotency_key:
            existing = self.storage.find_evaluation_by_key(evaluation.idempotency_key)
            if existing is not None:
                if not _same_review(existing, evaluation):
                    raise ConflictError(
                        f"Evaluator {evaluation.evaluator_id} already reviewed idea "
                        f"{evaluation.idea_id} with a different outcome in this window"
                    )
                return self._replay(existing, current, expected_version)

        stored, idea = self.storage.record_evaluation(evaluation, expected_version)
        logger.info(
            "Recorded evaluation %s: idea %s %s -> %s (score=%.1f)",
            stored.id, idea.id, current.status, idea.status, stored.overall_score,
        )

        self._publish(IdeaStatusChanged(idea=idea, previous_status=current.status, evaluation=stored))
        return stored, idea

    def _replay(
        self,
        existing: Evaluation,
        current: Idea,
        expected_version: Optional[int] = None,
    ) -> Tuple[Evaluation, Idea]:
        logger.info("Evaluation %s already recorded (key=%s)", existing.id, existing.idempotency_key)

        if current.status == existing.status and current.score == existing.overall_score:
            return existing, current

        # A later evaluation owns the idea's current state
        later = [
            e for e in self.storage.list_evaluations(EvaluationFilters(idea_id=current.id))
            if e.id != existing.id and e.created_at >= existing.created_at
        ]
        if later:
            return existing, current

        version = expected_version if expected_version is not None else current.version
        idea = self.storage.update_idea_status(
            current.id, existing.status, existing.overall_score, expected_version=version,
        )
        self._publish(IdeaStatusChanged(idea=idea, previous_status=current.status, evaluation=existing))
        return existing, idea

    def __repr__(self) -> str:
        return f"<RecordStore storage={self.storage.name!r} listeners={len(self._listeners)}>"


def _same_review(stored: Evaluation, incoming: Evaluation) -> bool:
    """True when incoming repeats stored: same evaluator, sub-scores and decision."""
    return (
        stored.evaluator_id == incoming.evaluator_id
        and stored.innovation_score == incoming.innovation_score
        and stored.feasibility_score == incoming.feasibility_score
        and stored.impact_score == incoming.impact_score
        and stored.status == incoming.status
    )
