"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation
- Shared fixtures for all tests
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import patch

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_data import (
    CONFIG, EXPECTED, TEST_DATA, TEST_CATEGORIES,
    get_problem_data, get_idea_data,
)


# =============================================================================
# TEST RESULT FILE CONFIGURATION
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / "test_results"


def get_result_filename() -> str:
    """Generate timestamped result filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"test_results_{timestamp}.txt"


class TestResultCollector:
    """Collects test results for formatted output."""

    __test__ = False

    def __init__(self):
        self.results: List[Dict[str, Any]] = []
        self.start_time: datetime = None
        self.end_time: datetime = None
        self.categories: Dict[str, List[Dict]] = {}

    def add_result(self, nodeid: str, outcome: str, duration: float, message: str = ""):
        filename = nodeid.split("::")[0].split("/")[-1]
        category = filename.replace("test_", "").replace(".py", "")
        result = {
            "nodeid": nodeid,
            "name": nodeid.split("::")[-1].replace("test_", "").replace("_", " "),
            "outcome": outcome,
            "duration": duration,
            "message": message,
        }
        self.results.append(result)
        self.categories.setdefault(category, []).append(result)

    def get_summary(self) -> Dict[str, int]:
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["outcome"] == "passed"),
            "failed": sum(1 for r in self.results if r["outcome"] == "failed"),
            "skipped": sum(1 for r in self.results if r["outcome"] == "skipped"),
        }


_collector = TestResultCollector()


def pytest_configure(config):
    """Register markers and start the result collector."""
    config.addinivalue_line("markers", "engine: Evaluation engine behavior tests")
    config.addinivalue_line("markers", "supabase: Supabase backend tests with mocked HTTP")
    _collector.start_time = datetime.now()


def pytest_runtest_logreport(report):
    """Called after each test phase."""
    if report.when == "call":
        _collector.add_result(
            nodeid=report.nodeid,
            outcome=report.outcome,
            duration=report.duration,
            message=str(report.longrepr) if report.longrepr else "",
        )


def pytest_sessionfinish(session, exitstatus):
    """Write the formatted report once all tests complete."""
    _collector.end_time = datetime.now()
    if not _collector.results:
        return
    RESULTS_DIR.mkdir(exist_ok=True)
    filepath = RESULTS_DIR / get_result_filename()
    with open(filepath, "w") as f:
        f.write(generate_formatted_report(_collector))


def generate_formatted_report(collector: TestResultCollector) -> str:
    """Generate a formatted test report."""
    summary = collector.get_summary()
    lines = [
        "=" * 80,
        "IDEAS CENTRAL - TEST RESULTS REPORT",
        "=" * 80,
        f"Run Date:     {collector.start_time.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Total Tests:  {summary['total']}",
        f"Passed:       {summary['passed']} ✓",
        f"Failed:       {summary['failed']} ✗",
        f"Skipped:      {summary['skipped']} ○",
        "",
    ]

    for category, results in sorted(collector.categories.items()):
        info = TEST_CATEGORIES.get(category, {"name": category.replace("_", " ").title()})
        lines.append(f"{info['name']}")
        for protection in info.get("protects_against", []):
            lines.append(f"  • protects against: {protection}")
        for result in results:
            status = "✓" if result["outcome"] == "passed" else "✗" if result["outcome"] == "failed" else "○"
            lines.append(f"    {status} {result['name']:<60} ({result['duration']*1000:.0f}ms)")
        lines.append("")

    lines.append("=" * 80)
    return "\n".join(lines)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def test_config():
    """Provide access to test configuration."""
    return CONFIG


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


@pytest.fixture
def test_data():
    """Provide access to test data."""
    return TEST_DATA


@pytest.fixture
def storage():
    """A fresh in-memory storage backend."""
    from ideas_central.storage import InMemoryStorage
    return InMemoryStorage()


@pytest.fixture
def outbox():
    """An outbox sender that records messages."""
    from ideas_central.notifications import OutboxSender
    return OutboxSender()


@pytest.fixture
def store(storage, outbox):
    """Record store over in-memory storage with the decision notifier attached."""
    from ideas_central.notifications import DecisionNotifier
    from ideas_central.records import RecordStore

    record_store = RecordStore(storage)
    record_store.subscribe(DecisionNotifier(outbox, mentor_contact=EXPECTED["mentor_contact"]))
    return record_store


@pytest.fixture
def problem(store):
    """A stored open problem."""
    return store.create_problem(get_problem_data(0))


@pytest.fixture
def idea(store, problem):
    """A stored pending idea for the problem fixture."""
    return store.create_idea(get_idea_data(problem.id))


@pytest.fixture
def engine(store):
    """Evaluation engine with re-evaluation disabled and a fixed clock."""
    from ideas_central.evaluation import EvaluationEngine
    return EvaluationEngine(
        store,
        allow_reevaluation=False,
        idempotency_window=CONFIG["idempotency_window"],
        clock=lambda: datetime(2025, 6, 1, 10, 0, 0),
    )


@pytest.fixture(autouse=True)
def fast_password_hashing():
    """Use the minimum bcrypt cost so sign-up heavy tests stay quick."""
    with patch("ideas_central.identity.memory.BCRYPT_ROUNDS", 4):
        yield
