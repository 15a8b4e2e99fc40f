"""
Tests for the Supabase storage backend.

All HTTP calls are mocked; tests check the PostgREST requests that are
sent, row conversion, and the compensation path of record_evaluation.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from ideas_central.errors import ConflictError, NotFoundError, PersistenceError
from ideas_central.models import Evaluation, Idea, Problem
from ideas_central.storage import (
    EvaluationFilters,
    IdeaFilters,
    ProblemFilters,
    ProblemStats,
    SupabaseStorage,
)
from tests.test_data import CONFIG, get_idea_data, get_problem_data

pytestmark = pytest.mark.supabase

MODULE = "ideas_central.storage.supabase.requests"


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def storage():
    return SupabaseStorage(url=CONFIG["supabase_url"], api_key=CONFIG["supabase_key"])


def response(json_data=None, status_code=200, headers=None):
    """Build a mocked requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else []
    resp.headers = headers or {}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


def idea_row(**overrides):
    row = dict(get_idea_data("p-1"), id="i-1", version=1, status="pending", score=None)
    row.pop("submitted_by_email")
    row["users"] = {"email": "priya@example.edu"}
    row.update(overrides)
    return row


def problem_row(**overrides):
    row = dict(get_problem_data(0), id="p-1", status="open", ideas_count=0)
    row.update(overrides)
    return row


def evaluation_row(**overrides):
    row = {
        "id": "e-1",
        "idea_id": "i-1",
        "evaluator_id": "u-1",
        "evaluator_name": "R. Kumar",
        "innovation_score": 8,
        "feasibility_score": 7,
        "impact_score": 9,
        "overall_score": 8.0,
        "status": "approved",
        "comments": None,
        "idempotency_key": "i-1:u-1:1",
        "created_at": "2025-06-01T10:00:00+00:00",
        "updated_at": "2025-06-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def make_evaluation():
    return Evaluation(
        idea_id="i-1", evaluator_id="u-1", evaluator_name="R. Kumar",
        innovation_score=8, feasibility_score=7, impact_score=9, status="approved",
        idempotency_key="i-1:u-1:1",
    )


# =============================================================================
# Configuration and transport
# =============================================================================

class TestSupabaseTransport:

    def test_name(self, storage):
        assert storage.name == "supabase"

    def test_missing_url_raises(self):
        storage = SupabaseStorage(url="", api_key="key")
        with pytest.raises(ValueError, match="SUPABASE_URL"):
            storage.get_problem("p-1")

    def test_missing_key_raises(self):
        storage = SupabaseStorage(url=CONFIG["supabase_url"], api_key="")
        with pytest.raises(ValueError, match="SUPABASE_KEY"):
            storage.get_problem("p-1")

    def test_headers_and_url(self, storage):
        with patch(f"{MODULE}.get", return_value=response([])) as mock_get:
            storage.get_problem("p-1")

        url = mock_get.call_args.args[0]
        headers = mock_get.call_args.kwargs["headers"]
        assert url == f"{CONFIG['supabase_url']}/rest/v1/problems"
        assert headers["apikey"] == CONFIG["supabase_key"]
        assert headers["Authorization"] == f"Bearer {CONFIG['supabase_key']}"

    def test_http_error_becomes_persistence_error(self, storage):
        with patch(f"{MODULE}.get", return_value=response(status_code=500)):
            with pytest.raises(PersistenceError):
                storage.list_problems(ProblemFilters())

    def test_timeout_becomes_persistence_error(self, storage):
        with patch(f"{MODULE}.get", side_effect=requests.Timeout("slow")):
            with pytest.raises(PersistenceError):
                storage.get_idea("i-1")


# =============================================================================
# Problems
# =============================================================================

class TestSupabaseProblems:

    def test_list_filters_and_order(self, storage):
        with patch(f"{MODULE}.get", return_value=response([])) as mock_get:
            storage.list_problems(ProblemFilters(category="technology", priority="high", search="wifi"))

        params = mock_get.call_args.kwargs["params"]
        assert params["order"] == "created_at.desc"
        assert params["category"] == "eq.technology"
        assert params["priority"] == "eq.high"
        assert params["or"] == "(title.ilike.*wifi*,description.ilike.*wifi*)"

    def test_search_strips_filter_syntax(self, storage):
        assert storage._search_clause("a,b(c)") == "(title.ilike.*a b c*,description.ilike.*a b c*)"

    def test_malformed_rows_skipped(self, storage):
        rows = [dict(get_problem_data(0), id="p-1"), {"id": "p-2", "title": ""}]
        with patch(f"{MODULE}.get", return_value=response(rows)):
            problems = storage.list_problems(ProblemFilters())
        assert [p.id for p in problems] == ["p-1"]

    def test_insert_problem(self, storage):
        row = dict(get_problem_data(0), id="p-1")
        with patch(f"{MODULE}.post", return_value=response([row])) as mock_post:
            created = storage.insert_problem(Problem(**get_problem_data(0)))

        payload = mock_post.call_args.kwargs["json"]
        assert "id" not in payload[0]
        assert mock_post.call_args.kwargs["headers"]["Prefer"] == "return=representation"
        assert created.id == "p-1"

    def test_update_missing_problem(self, storage):
        with patch(f"{MODULE}.patch", return_value=response([])):
            with pytest.raises(NotFoundError):
                storage.update_problem_status("p-9", "solved")

    def test_stats_use_exact_counts(self, storage):
        counts = iter(["0-9/10", "0-5/6", "0-1/2", "0-2/3"])

        def head(*args, **kwargs):
            return response(headers={"Content-Range": next(counts)})

        with patch(f"{MODULE}.head", side_effect=head) as mock_head:
            stats = storage.get_problem_stats()

        assert stats == ProblemStats(total=10, open=6, urgent=2, in_progress=3)
        assert mock_head.call_args.kwargs["headers"]["Prefer"] == "count=exact"

    def test_missing_content_range(self, storage):
        with patch(f"{MODULE}.head", return_value=response(headers={})):
            with pytest.raises(PersistenceError):
                storage.count_problems()


# =============================================================================
# Ideas
# =============================================================================

class TestSupabaseIdeas:

    def test_row_to_idea_reads_user_email(self):
        idea = SupabaseStorage.row_to_idea(idea_row())
        assert idea.submitted_by_email == "priya@example.edu"

    def test_idea_to_row_drops_read_only_fields(self):
        row = SupabaseStorage.idea_to_row(Idea(**get_idea_data("p-1"), problem_title="Wi-Fi"))
        assert "submitted_by_email" not in row
        assert "problem_title" not in row

    def test_list_ideas_filters(self, storage):
        with patch(f"{MODULE}.get", return_value=response([idea_row()])) as mock_get:
            ideas = storage.list_ideas(IdeaFilters(problem_id="p-1", status="pending"))

        params = mock_get.call_args.kwargs["params"]
        assert params["problem_id"] == "eq.p-1"
        assert params["status"] == "eq.pending"
        assert params["select"] == "*,users(email)"
        assert ideas[0].id == "i-1"

    def test_update_idea_status_uses_version_filter(self, storage):
        updated = idea_row(status="approved", score=8.0, version=2)
        with patch(f"{MODULE}.get", return_value=response([idea_row()])), \
             patch(f"{MODULE}.patch", return_value=response([updated])) as mock_patch:
            idea = storage.update_idea_status("i-1", "approved", 8.0, expected_version=1)

        params = mock_patch.call_args.kwargs["params"]
        payload = mock_patch.call_args.kwargs["json"]
        assert params["version"] == "eq.1"
        assert payload["version"] == 2
        assert (payload["status"], payload["score"]) == ("approved", 8.0)
        assert idea.version == 2

    def test_update_idea_status_conflict(self, storage):
        with patch(f"{MODULE}.get", return_value=response([idea_row(version=3)])), \
             patch(f"{MODULE}.patch", return_value=response([])):
            with pytest.raises(ConflictError):
                storage.update_idea_status("i-1", "approved", 8.0, expected_version=1)

    def test_update_missing_idea(self, storage):
        with patch(f"{MODULE}.get", return_value=response([])):
            with pytest.raises(NotFoundError):
                storage.update_idea_status("i-9", "approved", 8.0)

    def test_insert_idea_bumps_counter_with_guard(self, storage):
        with patch(f"{MODULE}.post", return_value=response([idea_row()])), \
             patch(f"{MODULE}.get", return_value=response([problem_row(ideas_count=2)])), \
             patch(f"{MODULE}.patch", return_value=response([problem_row(ideas_count=3)])) as mock_patch:
            storage.insert_idea(Idea(**get_idea_data("p-1")))

        assert mock_patch.call_count == 1
        assert mock_patch.call_args.kwargs["params"] == {"id": "eq.p-1", "ideas_count": "eq.2"}
        assert mock_patch.call_args.kwargs["json"] == {"ideas_count": 3}

    def test_counter_retries_when_count_moved(self, storage):
        reads = [response([problem_row(ideas_count=2)]), response([problem_row(ideas_count=3)])]
        writes = [response([]), response([problem_row(ideas_count=4)])]
        with patch(f"{MODULE}.post", return_value=response([idea_row()])), \
             patch(f"{MODULE}.get", side_effect=reads), \
             patch(f"{MODULE}.patch", side_effect=writes) as mock_patch:
            storage.insert_idea(Idea(**get_idea_data("p-1")))

        assert mock_patch.call_count == 2
        assert mock_patch.call_args.kwargs["params"]["ideas_count"] == "eq.3"
        assert mock_patch.call_args.kwargs["json"] == {"ideas_count": 4}

    def test_insert_idea_counter_failure_is_not_fatal(self, storage):
        with patch(f"{MODULE}.post", return_value=response([idea_row()])), \
             patch(f"{MODULE}.get", side_effect=requests.ConnectionError("down")):
            created = storage.insert_idea(Idea(**get_idea_data("p-1")))
        assert created.id == "i-1"


# =============================================================================
# Evaluations
# =============================================================================

class TestSupabaseEvaluations:

    def test_row_to_evaluation_joins(self):
        row = evaluation_row(
            ideas={"title": "Mesh", "description": "Mesh Wi-Fi", "submitted_by_name": "Priya"},
            users={"first_name": "Rajesh", "last_name": "Kumar"},
        )
        evaluation = SupabaseStorage.row_to_evaluation(row)
        assert evaluation.idea_title == "Mesh"
        assert evaluation.submitted_by_name == "Priya"
        assert evaluation.evaluator_name == "Rajesh Kumar"

    def test_list_evaluations_filters(self, storage):
        with patch(f"{MODULE}.get", return_value=response([])) as mock_get:
            storage.list_evaluations(EvaluationFilters(idea_id="i-1", evaluator_id="u-1"))
        params = mock_get.call_args.kwargs["params"]
        assert params["idea_id"] == "eq.i-1"
        assert params["evaluator_id"] == "eq.u-1"

    def test_record_evaluation(self, storage):
        updated = idea_row(status="approved", score=8.0, version=2)
        with patch(f"{MODULE}.get", return_value=response([idea_row()])), \
             patch(f"{MODULE}.post", return_value=response([evaluation_row()])) as mock_post, \
             patch(f"{MODULE}.patch", return_value=response([updated])):
            stored, idea = storage.record_evaluation(make_evaluation(), expected_version=1)

        payload = mock_post.call_args.kwargs["json"][0]
        assert "idea_title" not in payload
        assert payload["overall_score"] == 8.0
        assert stored.id == "e-1"
        assert idea.status == "approved"

    def test_record_evaluation_compensates_on_conflict(self, storage):
        with patch(f"{MODULE}.get", return_value=response([idea_row(version=2)])), \
             patch(f"{MODULE}.post", return_value=response([evaluation_row()])), \
             patch(f"{MODULE}.patch", return_value=response([])), \
             patch(f"{MODULE}.delete", return_value=response()) as mock_delete:
            with pytest.raises(ConflictError):
                storage.record_evaluation(make_evaluation(), expected_version=1)

        assert mock_delete.call_args.kwargs["params"] == {"id": "eq.e-1"}

    def test_record_evaluation_failed_compensation(self, storage):
        with patch(f"{MODULE}.get", return_value=response([idea_row()])), \
             patch(f"{MODULE}.post", return_value=response([evaluation_row()])), \
             patch(f"{MODULE}.patch", return_value=response(status_code=503)), \
             patch(f"{MODULE}.delete", return_value=response(status_code=503)):
            with pytest.raises(PersistenceError, match="could not be removed"):
                storage.record_evaluation(make_evaluation(), expected_version=1)

    def test_record_evaluation_missing_idea(self, storage):
        with patch(f"{MODULE}.get", return_value=response([])), \
             patch(f"{MODULE}.post") as mock_post:
            with pytest.raises(NotFoundError):
                storage.record_evaluation(make_evaluation())
        mock_post.assert_not_called()

    def test_find_evaluation_by_key(self, storage):
        with patch(f"{MODULE}.get", return_value=response([evaluation_row()])) as mock_get:
            found = storage.find_evaluation_by_key("i-1:u-1:1")
        assert mock_get.call_args.kwargs["params"]["idempotency_key"] == "eq.i-1:u-1:1"
        assert found.id == "e-1"
