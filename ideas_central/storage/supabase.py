"""
Supabase storage backend for Ideas Central.

Implements the Storage interface on top of Supabase's PostgREST API.
Uses the REST endpoints directly with `requests` for all operations.

PostgREST Documentation: https://postgrest.org/en/stable/references/api.html

=============================================================================
SUPABASE SCHEMA
=============================================================================

| Table        | Columns                                                      |
|--------------|--------------------------------------------------------------|
| problems     | id, title, description, full_description, category,          |
|              | priority, status, tags (text[]), submitted_by,               |
|              | submitted_by_name, department, views_count, ideas_count,     |
|              | comments_count, created_at, updated_at                       |
| ideas        | id, problem_id, title, description, solution,                |
|              | implementation, resources, timeline, submitted_by,           |
|              | submitted_by_name, status, score, version, created_at,       |
|              | updated_at                                                   |
| evaluations  | id, idea_id, evaluator_id, evaluator_name, innovation_score, |
|              | feasibility_score, impact_score, overall_score, comments,    |
|              | status, idempotency_key (unique), created_at, updated_at     |
| users        | id, email, first_name, last_name, role, ...                  |

ideas.submitted_by and evaluations.evaluator_id reference users.id; the
submitter's email and the evaluator's name are read through those joins.

PostgREST has no multi-request transactions, so record_evaluation inserts
the evaluation first and deletes it again if the idea update fails.

=============================================================================
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

from ideas_central.config import REQUEST_TIMEOUT, SUPABASE_KEY, SUPABASE_URL
from ideas_central.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ideas_central.log import get_logger
from ideas_central.models import Evaluation, Idea, Problem
from ideas_central.models.evaluation import DISPLAY_FIELDS
from ideas_central.storage.base import (
    EvaluationFilters,
    IdeaFilters,
    ProblemFilters,
    Storage,
)

logger = get_logger(__name__)

# Characters with meaning inside a PostgREST or=(...) expression
_FILTER_SYNTAX = re.compile(r"[(),*]")

IDEA_SELECT = "*,users(email)"
EVALUATION_SELECT = "*,ideas(title,description,submitted_by_name),users(first_name,last_name)"

# Idea fields that are joined or display-only, never written
_IDEA_READ_ONLY = ("submitted_by_email", "problem_title")

# Attempts at the ideas_count compare-and-set before giving up
COUNTER_RETRIES = 3


class SupabaseStorage(Storage):
    """
    Supabase-backed storage implementation.

    Configuration is pulled from environment variables via ideas_central.config:
    - SUPABASE_URL: Project URL (e.g., https://abcd.supabase.co)
    - SUPABASE_KEY: API key sent as both apikey and bearer token
    """

    REST_PATH = "/rest/v1"

    def __init__(self, url: str = None, api_key: str = None):
        """
        Initialize SupabaseStorage.

        Args:
            url: Project URL. Defaults to config.SUPABASE_URL.
            api_key: API key. Defaults to config.SUPABASE_KEY.
        """
        # Use provided values, or fall back to config if None (not empty string)
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_KEY

    @property
    def name(self) -> str:
        return "supabase"

    def _table_url(self, table: str) -> str:
        return f"{self.url}{self.REST_PATH}/{table}"

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise ValueError("SUPABASE_URL is not configured")
        if not self.api_key:
            raise ValueError("SUPABASE_KEY is not configured")

    # =========================================================================
    # HTTP
    # =========================================================================

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        """
        Send one PostgREST request.

        Raises:
            PersistenceError: On transport errors and non-2xx responses.
        """
        self._validate_config()
        send = getattr(requests, method.lower())

        try:
            response = send(
                self._table_url(table),
                headers=self._headers(prefer),
                params=params,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Supabase %s %s failed: %s", method, table, e)
            raise PersistenceError(f"Supabase {method} {table} failed: {e}") from e

        return response

    def _rows(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Send a request and decode the JSON array PostgREST returns."""
        response = self._request(method, table, params=params, payload=payload, prefer=prefer)
        try:
            data = response.json()
        except ValueError as e:
            raise PersistenceError(f"Invalid JSON from Supabase {table}: {e}") from e
        if isinstance(data, dict):
            return [data]
        return data or []

    def _count(self, table: str, params: Dict[str, Any]) -> int:
        """Count rows with a HEAD request and an exact Content-Range."""
        response = self._request("HEAD", table, params=params, prefer="count=exact")
        content_range = response.headers.get("Content-Range", "")
        try:
            return int(content_range.rsplit("/", 1)[1])
        except (IndexError, ValueError) as e:
            raise PersistenceError(f"Missing row count from Supabase: {content_range!r}") from e

    # =========================================================================
    # Serialization: models <-> PostgREST rows
    # =========================================================================

    @staticmethod
    def _write_fields(record: Any, read_only: Tuple[str, ...] = ()) -> Dict[str, Any]:
        fields = record.to_dict()
        for key in read_only:
            fields.pop(key, None)
        if fields.get("id") is None:
            fields.pop("id", None)
        return fields

    @staticmethod
    def problem_to_row(problem: Problem) -> Dict[str, Any]:
        return SupabaseStorage._write_fields(problem)

    @staticmethod
    def idea_to_row(idea: Idea) -> Dict[str, Any]:
        return SupabaseStorage._write_fields(idea, _IDEA_READ_ONLY)

    @staticmethod
    def evaluation_to_row(evaluation: Evaluation) -> Dict[str, Any]:
        return SupabaseStorage._write_fields(evaluation, DISPLAY_FIELDS)

    @staticmethod
    def row_to_idea(row: Dict[str, Any]) -> Idea:
        data = dict(row)
        user = data.pop("users", None) or {}
        if user.get("email"):
            data["submitted_by_email"] = user["email"]
        return Idea.from_dict(data)

    @staticmethod
    def row_to_evaluation(row: Dict[str, Any]) -> Evaluation:
        data = dict(row)
        idea = data.pop("ideas", None) or {}
        user = data.pop("users", None) or {}
        data["idea_title"] = idea.get("title")
        data["idea_description"] = idea.get("description")
        data["submitted_by_name"] = idea.get("submitted_by_name")
        full_name = " ".join(
            part for part in (user.get("first_name"), user.get("last_name")) if part
        )
        if full_name:
            data["evaluator_name"] = full_name
        return Evaluation.from_dict(data)

    def _convert(self, rows: List[Dict[str, Any]], convert, kind: str) -> list:
        """Convert rows, skipping (and logging) rows that fail validation."""
        records = []
        for row in rows:
            try:
                records.append(convert(row))
            except (ValidationError, TypeError) as e:
                logger.warning("Skipping malformed %s row %s: %s", kind, row.get("id"), e)
        return records

    @staticmethod
    def _search_clause(term: str) -> str:
        term = _FILTER_SYNTAX.sub(" ", term).strip()
        return f"(title.ilike.*{term}*,description.ilike.*{term}*)"

    # =========================================================================
    # Problems
    # =========================================================================

    def list_problems(self, filters: ProblemFilters) -> List[Problem]:
        params: Dict[str, Any] = {"select": "*", "order": "created_at.desc"}

        if filters.category:
            params["category"] = f"eq.{filters.category}"
        if filters.priority:
            params["priority"] = f"eq.{filters.priority}"
        if filters.search:
            params["or"] = self._search_clause(filters.search)
        if filters.submitted_by:
            params["submitted_by"] = f"eq.{filters.submitted_by}"

        rows = self._rows("GET", "problems", params=params)
        return self._convert(rows, Problem.from_dict, "problem")

    def get_problem(self, problem_id: str) -> Optional[Problem]:
        rows = self._rows("GET", "problems", params={"select": "*", "id": f"eq.{problem_id}", "limit": 1})
        problems = self._convert(rows, Problem.from_dict, "problem")
        return problems[0] if problems else None

    def insert_problem(self, problem: Problem) -> Problem:
        rows = self._rows(
            "POST", "problems",
            payload=[self.problem_to_row(problem)],
            prefer="return=representation",
        )
        if not rows:
            raise PersistenceError("Supabase returned no row for the new problem")
        return Problem.from_dict(rows[0])

    def update_problem_status(self, problem_id: str, status: str) -> Problem:
        rows = self._rows(
            "PATCH", "problems",
            params={"id": f"eq.{problem_id}"},
            payload={"status": status, "updated_at": _now_iso()},
            prefer="return=representation",
        )
        if not rows:
            raise NotFoundError("Problem", problem_id)
        return Problem.from_dict(rows[0])

    def count_problems(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> int:
        params: Dict[str, Any] = {"select": "id"}
        if status:
            params["status"] = f"eq.{status}"
        if priority:
            params["priority"] = f"eq.{priority}"
        return self._count("problems", params)

    def _increment_ideas_count(self, problem_id: str) -> None:
        # Compare-and-set on the old value
        for _ in range(COUNTER_RETRIES):
            problem = self.get_problem(problem_id)
            if problem is None:
                return
            rows = self._rows(
                "PATCH", "problems",
                params={"id": f"eq.{problem_id}", "ideas_count": f"eq.{problem.ideas_count}"},
                payload={"ideas_count": problem.ideas_count + 1},
                prefer="return=representation",
            )
            if rows:
                return
        raise PersistenceError(
            f"ideas_count for problem {problem_id} changed {COUNTER_RETRIES} times while updating"
        )

    # =========================================================================
    # Ideas
    # =========================================================================

    def list_ideas(self, filters: IdeaFilters) -> List[Idea]:
        params: Dict[str, Any] = {"select": IDEA_SELECT, "order": "created_at.desc"}

        if filters.problem_id:
            params["problem_id"] = f"eq.{filters.problem_id}"
        if filters.status:
            params["status"] = f"eq.{filters.status}"
        if filters.submitted_by:
            params["submitted_by"] = f"eq.{filters.submitted_by}"

        rows = self._rows("GET", "ideas", params=params)
        return self._convert(rows, self.row_to_idea, "idea")

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        rows = self._rows("GET", "ideas", params={"select": IDEA_SELECT, "id": f"eq.{idea_id}", "limit": 1})
        ideas = self._convert(rows, self.row_to_idea, "idea")
        return ideas[0] if ideas else None

    def insert_idea(self, idea: Idea) -> Idea:
        rows = self._rows(
            "POST", "ideas",
            params={"select": IDEA_SELECT},
            payload=[self.idea_to_row(idea)],
            prefer="return=representation",
        )
        if not rows:
            raise PersistenceError("Supabase returned no row for the new idea")
        created = self.row_to_idea(rows[0])

        # ideas_count is a denormalized counter; the idea itself is already stored
        try:
            self._increment_ideas_count(created.problem_id)
        except PersistenceError as e:
            logger.warning("Could not bump ideas_count for problem %s: %s", created.problem_id, e)

        return created

    def update_idea_status(
        self,
        idea_id: str,
        status: str,
        score: Optional[float],
        expected_version: Optional[int] = None,
    ) -> Idea:
        current = self.get_idea(idea_id)
        if current is None:
            raise NotFoundError("Idea", idea_id)

        version = expected_version if expected_version is not None else current.version
        params = {
            "select": IDEA_SELECT,
            "id": f"eq.{idea_id}",
            "version": f"eq.{version}",
        }
        rows = self._rows(
            "PATCH", "ideas",
            params=params,
            payload={
                "status": status,
                "score": score,
                "version": version + 1,
                "updated_at": _now_iso(),
            },
            prefer="return=representation",
        )

        # Zero rows: the version filter did not match
        if not rows:
            raise ConflictError(
                f"Idea {idea_id} changed concurrently (expected version {version})"
            )
        return self.row_to_idea(rows[0])

    # =========================================================================
    # Evaluations
    # =========================================================================

    def list_evaluations(self, filters: EvaluationFilters) -> List[Evaluation]:
        params: Dict[str, Any] = {"select": EVALUATION_SELECT, "order": "created_at.desc"}

        if filters.idea_id:
            params["idea_id"] = f"eq.{filters.idea_id}"
        if filters.evaluator_id:
            params["evaluator_id"] = f"eq.{filters.evaluator_id}"

        rows = self._rows("GET", "evaluations", params=params)
        return self._convert(rows, self.row_to_evaluation, "evaluation")

    def insert_evaluation(self, evaluation: Evaluation) -> Evaluation:
        rows = self._rows(
            "POST", "evaluations",
            payload=[self.evaluation_to_row(evaluation)],
            prefer="return=representation",
        )
        if not rows:
            raise PersistenceError("Supabase returned no row for the new evaluation")
        return Evaluation.from_dict(rows[0])

    def find_evaluation_by_key(self, idempotency_key: str) -> Optional[Evaluation]:
        rows = self._rows(
            "GET", "evaluations",
            params={"select": "*", "idempotency_key": f"eq.{idempotency_key}", "limit": 1},
        )
        evaluations = self._convert(rows, Evaluation.from_dict, "evaluation")
        return evaluations[0] if evaluations else None

    def _delete_evaluation(self, evaluation_id: str) -> None:
        self._request("DELETE", "evaluations", params={"id": f"eq.{evaluation_id}"})

    def record_evaluation(
        self,
        evaluation: Evaluation,
        expected_version: Optional[int] = None,
    ) -> Tuple[Evaluation, Idea]:
        if self.get_idea(evaluation.idea_id) is None:
            raise NotFoundError("Idea", evaluation.idea_id)

        stored = self.insert_evaluation(evaluation)

        try:
            idea = self.update_idea_status(
                evaluation.idea_id,
                evaluation.status,
                stored.overall_score,
                expected_version=expected_version,
            )
        except (PersistenceError, ConflictError, NotFoundError) as e:
            logger.warning("Idea update failed, removing evaluation %s: %s", stored.id, e)
            try:
                self._delete_evaluation(stored.id)
            except PersistenceError as cleanup_error:
                logger.error("Evaluation %s left without idea update", stored.id)
                raise PersistenceError(
                    f"Idea update failed ({e}) and evaluation {stored.id} could not be removed"
                ) from cleanup_error
            raise

        return stored, idea


def _now_iso() -> str:
    return datetime.now().isoformat()
