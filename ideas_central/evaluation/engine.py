"""
Evaluation engine - the idea scoring and decision workflow.

A reviewer submits three sub-scores and a decision for an idea:

    validate input -> load idea -> check lifecycle -> score
        -> record evaluation + update idea (one unit) -> post-commit events

Validation and lookup failures happen before anything is written. The
write itself is guarded by the idea's version, so two reviewers deciding
the same idea at once cannot both win.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ideas_central.config import ALLOW_REEVALUATION, IDEMPOTENCY_WINDOW_SECONDS
from ideas_central.errors import ConflictError, NotFoundError, ValidationError
from ideas_central.evaluation.workflow import (
    check_transition,
    decision_status,
    idempotency_key,
)
from ideas_central.log import get_logger
from ideas_central.models import IDEA_UNDER_REVIEW, Evaluation, Idea
from ideas_central.records import RecordStore
from ideas_central.scoring import score_breakdown

logger = get_logger(__name__)


@dataclass
class EvaluationOutcome:
    """
    Result of an evaluate() call.

    Attributes:
        evaluation: The stored Evaluation record.
        idea: The idea after the decision was applied.
    """
    evaluation: Evaluation
    idea: Idea

    @property
    def overall_score(self) -> float:
        return self.evaluation.overall_score

    @property
    def status(self) -> str:
        return self.idea.status

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        e = self.evaluation
        return "\n".join([
            f"Idea:        {self.idea.title} ({self.idea.id})",
            f"Evaluator:   {e.evaluator_name}",
            f"Scores:      innovation={e.innovation_score} "
            f"feasibility={e.feasibility_score} impact={e.impact_score}",
            f"Overall:     {e.overall_score:.1f}",
            f"Decision:    {self.idea.status.upper()}",
        ])


class EvaluationEngine:
    """
    Computes evaluation scores and applies decisions to ideas.

    Usage:
        engine = EvaluationEngine(store)
        outcome = engine.evaluate(
            idea_id, evaluator_id, "Dr. Rajesh Kumar",
            innovation=8, feasibility=7, impact=9,
            comments="Strong proposal", decision=True,
        )
        outcome.idea.status   # "approved"
        outcome.idea.score    # 8.0
    """

    def __init__(
        self,
        store: RecordStore,
        allow_reevaluation: Optional[bool] = None,
        idempotency_window: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            store: Record store facade used for all reads and writes.
            allow_reevaluation: Let a decided idea be decided again.
                Defaults to config.ALLOW_REEVALUATION.
            idempotency_window: Seconds within which a repeated review by
                the same evaluator counts as a retry. Defaults to
                config.IDEMPOTENCY_WINDOW_SECONDS.
            clock: Returns the current time (override in tests).
        """
        self.store = store
        self.allow_reevaluation = (
            ALLOW_REEVALUATION if allow_reevaluation is None else allow_reevaluation
        )
        self.idempotency_window = idempotency_window or IDEMPOTENCY_WINDOW_SECONDS
        self.clock = clock

    def _require_idea(self, idea_id: str) -> Idea:
        idea = self.store.get_idea(idea_id)
        if idea is None:
            raise NotFoundError("Idea", idea_id)
        return idea

    def evaluate(
        self,
        idea_id: str,
        evaluator_id: str,
        evaluator_name: str,
        innovation: int,
        feasibility: int,
        impact: int,
        comments: Optional[str] = None,
        decision: Optional[bool] = None,
    ) -> EvaluationOutcome:
        """
        Score an idea and apply the reviewer's decision.

        Args:
            idea_id: Idea being evaluated.
            evaluator_id: User id of the reviewer.
            evaluator_name: Full name of the reviewer.
            innovation / feasibility / impact: Sub-scores, integers 1-10.
            comments: Optional feedback.
            decision: True approves the idea, False rejects it.

        Returns:
            EvaluationOutcome with the stored evaluation and updated idea.

        Raises:
            ValidationError: Bad sub-score, decision or evaluator (nothing written).
            NotFoundError: Unknown idea (nothing written).
            ConflictError: The idea is already decided (and re-evaluation is
                disabled), was changed by another reviewer meanwhile, or
                this evaluator already submitted a different review in the
                current idempotency window.
            PersistenceError: The store failed; the idea is left unchanged.
        """
        status = decision_status(decision)
        breakdown = score_breakdown(innovation, feasibility, impact)
        if not evaluator_id or not str(evaluator_id).strip():
            raise ValidationError("evaluator_id is required")

        idea = self._require_idea(idea_id)
        now = self.clock()
        key = idempotency_key(idea.id, evaluator_id, now, self.idempotency_window)

        if self.store.find_evaluation_by_key(key) is None:
            check_transition(idea.id, idea.status, status, self.allow_reevaluation)

        evaluation = Evaluation(
            idea_id=idea.id,
            evaluator_id=evaluator_id,
            evaluator_name=evaluator_name or "",
            innovation_score=breakdown.innovation,
            feasibility_score=breakdown.feasibility,
            impact_score=breakdown.impact,
            overall_score=breakdown.overall,
            comments=comments or None,
            status=status,
            idempotency_key=key,
            created_at=now,
            updated_at=now,
        )

        stored, updated = self.store.record_evaluation(evaluation, expected_version=idea.version)
        logger.info(
            "Evaluated idea %s: %s with overall score %.1f",
            updated.id, updated.status, stored.overall_score,
        )
        return EvaluationOutcome(evaluation=stored, idea=updated)

    def start_review(self, idea_id: str) -> Idea:
        """
        Move a pending idea to under-review.

        Raises:
            NotFoundError: Unknown idea.
            ConflictError: The idea is not pending.
        """
        idea = self._require_idea(idea_id)
        if idea.status == IDEA_UNDER_REVIEW:
            raise ConflictError(f"Idea {idea_id} is already under review")
        check_transition(idea.id, idea.status, IDEA_UNDER_REVIEW)

        return self.store.update_idea_status_and_score(
            idea.id, IDEA_UNDER_REVIEW, None, expected_version=idea.version
        )
