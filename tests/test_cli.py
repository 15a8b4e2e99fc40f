"""
CLI Behavior Tests

Verifies that the command-line interface parses arguments, prints the
expected output and returns the right exit codes. Every command runs
against the in-memory backend with the demo data loaded.
"""

import json
from unittest.mock import patch

import pytest

from main import create_parser, main

DEMO = ["--demo", "--backend", "memory"]
REVIEWER_LOGIN = ["--email", "rajesh.kumar@example.edu", "--password", "password"]


@pytest.fixture(autouse=True)
def outbox_only():
    """Never reach a real email provider from CLI tests."""
    with patch("ideas_central.bootstrap.RESEND_API_KEY", ""):
        yield


class TestArgumentParsing:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_evaluate_scores_parsed_as_int(self):
        args = create_parser().parse_args(
            ["evaluate", "i-1", "-i", "8", "-f", "7", "-m", "9", "--approve", *REVIEWER_LOGIN]
        )
        assert (args.innovation, args.feasibility, args.impact) == (8, 7, 9)
        assert args.decision is True

    def test_reject_flag(self):
        args = create_parser().parse_args(
            ["evaluate", "i-1", "-i", "3", "-f", "3", "-m", "3", "--reject", *REVIEWER_LOGIN]
        )
        assert args.decision is False

    def test_approve_and_reject_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(
                ["evaluate", "i-1", "-i", "8", "-f", "7", "-m", "9", "--approve", "--reject", *REVIEWER_LOGIN]
            )

    def test_decision_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["evaluate", "i-1", "-i", "8", "-f", "7", "-m", "9", *REVIEWER_LOGIN])

    def test_invalid_idea_status_filter(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["ideas", "--status", "maybe"])


class TestBrowsing:

    def test_list_problems(self, capsys):
        assert main([*DEMO, "problems"]) == 0
        out = capsys.readouterr().out
        assert "demo-problem-1" in out
        assert "7 record(s)" in out

    def test_filter_problems(self, capsys):
        assert main([*DEMO, "problems", "--priority", "urgent"]) == 0
        assert "2 record(s)" in capsys.readouterr().out

    def test_stats(self, capsys):
        assert main([*DEMO, "stats"]) == 0
        assert "Total: 7  Open: 5  Urgent: 2  In progress: 2" in capsys.readouterr().out

    def test_ideas_as_json(self, capsys):
        assert main([*DEMO, "--json", "ideas", "--problem", "demo-problem-1"]) == 0
        ideas = json.loads(capsys.readouterr().out)
        assert {i["id"] for i in ideas} == {"demo-idea-1", "demo-idea-2"}

    def test_evaluations_joined(self, capsys):
        assert main([*DEMO, "evaluations"]) == 0
        out = capsys.readouterr().out
        assert "Mesh Network for Campus Wi-Fi" in out
        assert "8.3 APPROVED" in out

    def test_empty_backend(self, capsys):
        assert main(["--backend", "memory", "problems"]) == 0
        assert "No records found." in capsys.readouterr().out


class TestSubmissions:

    def test_submit_problem_suggests_category(self, capsys):
        code = main([
            *DEMO, "submit-problem",
            "--title", "Bus delays",
            "--description", "Bus routes are delayed and parking is scarce",
            "--submitted-by", "demo-student-2",
        ])
        out = capsys.readouterr().out
        assert code == 0
        assert "Suggested category: Transportation" in out
        assert "✓ Created problem" in out

    def test_submit_idea(self, capsys):
        code = main([
            *DEMO, "submit-idea",
            "--problem", "demo-problem-2",
            "--title", "Solar benches",
            "--description", "Benches with solar panels",
            "--solution", "Charge phones from the benches",
            "--submitted-by", "demo-student-2",
        ])
        assert code == 0
        assert "(pending)" in capsys.readouterr().out

    def test_submit_idea_unknown_problem(self, capsys):
        code = main([
            *DEMO, "submit-idea",
            "--problem", "nope",
            "--title", "T", "--description", "D", "--solution", "S",
            "--submitted-by", "demo-student-2",
        ])
        assert code == 1
        assert "❌" in capsys.readouterr().out

    def test_close_problem(self, capsys):
        assert main([*DEMO, "problem-status", "demo-problem-1", "closed"]) == 0
        assert "is now closed" in capsys.readouterr().out


class TestReview:

    def test_evaluate_approves_and_notifies(self, capsys):
        code = main([*DEMO, "evaluate", "demo-idea-3", "-i", "8", "-f", "7", "-m", "9", "--approve",
                     "--comments", "Good plan", *REVIEWER_LOGIN])
        out = capsys.readouterr().out
        assert code == 0
        assert "Overall:     8.0" in out
        assert "Decision:    APPROVED" in out
        assert "Notifications (outbox):" in out
        assert "To: rajesh.kumar@example.edu" in out

    def test_student_cannot_evaluate(self, capsys):
        code = main([*DEMO, "evaluate", "demo-idea-3", "-i", "8", "-f", "7", "-m", "9", "--approve",
                     "--email", "priya.sharma@example.edu", "--password", "password"])
        assert code == 1
        assert "not allowed" in capsys.readouterr().out

    def test_wrong_password(self, capsys):
        code = main([*DEMO, "evaluate", "demo-idea-3", "-i", "8", "-f", "7", "-m", "9", "--approve",
                     "--email", "rajesh.kumar@example.edu", "--password", "wrong"])
        assert code == 1
        assert "Invalid email or password" in capsys.readouterr().out

    def test_out_of_range_score(self, capsys):
        code = main([*DEMO, "evaluate", "demo-idea-3", "-i", "11", "-f", "7", "-m", "9", "--approve",
                     *REVIEWER_LOGIN])
        assert code == 1

    def test_decided_idea_is_final(self, capsys):
        code = main([*DEMO, "evaluate", "demo-idea-1", "-i", "2", "-f", "2", "-m", "2", "--reject",
                     *REVIEWER_LOGIN])
        assert code == 1
        assert "cannot move" in capsys.readouterr().out

    def test_start_review(self, capsys):
        assert main([*DEMO, "review", "demo-idea-3"]) == 0
        assert "is now under-review" in capsys.readouterr().out

    def test_review_twice_fails(self, capsys):
        assert main([*DEMO, "review", "demo-idea-2"]) == 1


class TestTools:

    def test_classify(self, capsys):
        assert main(["--backend", "memory", "classify",
                     "Our campus produces too much waste and the recycling bins are always full."]) == 0
        out = capsys.readouterr().out
        assert "Category:   Environment (environment)" in out

    def test_classify_short_text(self, capsys):
        assert main(["--backend", "memory", "classify", "Too short"]) == 1
        assert "Text too short" in capsys.readouterr().out

    def test_config(self, capsys):
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "Ideas Central Configuration" in out
        assert "STORAGE_BACKEND" in out
