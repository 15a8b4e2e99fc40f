"""
Test Data - Externalized Test Inputs and Expected Values

This file contains the test records, expected values and messages used
across the suite. Update values here when requirements change - no need
to modify test scripts.

Structure:
- CONFIG: General test configuration
- EXPECTED: Expected values for validation tests
- TEST_DATA: Test input records (problems, ideas, users)
- MESSAGES: Expected error messages and outputs
- TEST_CATEGORIES: Category metadata for the results report
"""

from typing import Any, Dict


# =============================================================================
# GENERAL TEST CONFIGURATION
# =============================================================================

CONFIG = {
    "backends": ["memory", "supabase"],
    "supabase_url": "https://test-project.supabase.co",
    "supabase_key": "test-service-key",
    "resend_key": "re_test_key",
    "idempotency_window": 60,
}


# =============================================================================
# EXPECTED VALUES FOR VALIDATION
# =============================================================================

EXPECTED = {
    "scoring": {
        # (innovation, feasibility, impact) -> overall
        "samples": [
            ((8, 7, 9), 8.0),
            ((8, 9, 8), 8.3),
            ((7, 6, 8), 7.0),
            ((1, 1, 2), 1.3),
            ((9, 9, 10), 9.3),
            ((10, 10, 9), 9.7),
            ((1, 1, 1), 1.0),
            ((10, 10, 10), 10.0),
        ],
        "invalid_sub_scores": [0, 11, -1, 5.5, "7", None, True],
    },
    "stats_keys": ["total", "open", "urgent", "inProgress"],
    "unknown_idea_title": "Unknown Idea",
    "unknown_submitter": "Unknown Submitter",
    "mentor_contact": "mentors@example.edu",
}


# =============================================================================
# TEST INPUT DATA
# =============================================================================

TEST_DATA = {
    "problems": [
        {
            "title": "Campus Wi-Fi Connectivity Issues",
            "description": "Intermittent Wi-Fi in hostels and classrooms disrupts online learning.",
            "category": "technology",
            "priority": "high",
            "tags": ["WiFi", "Networking"],
            "submitted_by": "user-faculty-1",
            "submitted_by_name": "Dr. Rajesh Kumar",
        },
        {
            "title": "Green Energy for Campus Lighting",
            "description": "Need solar-powered street lights to reduce electricity bills.",
            "category": "environment",
            "priority": "medium",
            "tags": ["Solar", "Sustainability"],
            "submitted_by": "user-student-1",
            "submitted_by_name": "Priya Sharma",
        },
        {
            "title": "Cybersecurity Awareness",
            "description": "Students fall for phishing emails and online scams.",
            "category": "security",
            "priority": "urgent",
            "tags": ["Phishing"],
            "submitted_by": "user-faculty-2",
            "submitted_by_name": "Prof. Amit Patel",
        },
    ],
    "idea": {
        "title": "Mesh Network for Campus Wi-Fi",
        "description": "Implement a mesh Wi-Fi network to eliminate dead zones.",
        "solution": "Deploy self-healing mesh access points across all buildings.",
        "timeline": "6 months",
        "submitted_by": "user-student-1",
        "submitted_by_name": "Priya Sharma",
        "submitted_by_email": "priya@example.edu",
    },
    "reviewer": {
        "id": "user-faculty-1",
        "name": "Dr. Rajesh Kumar",
    },
    "users": [
        {
            "email": "rajesh@example.edu",
            "password": "faculty-pass",
            "first_name": "Rajesh",
            "last_name": "Kumar",
            "role": "faculty",
        },
        {
            "email": "priya@example.edu",
            "password": "student-pass",
            "first_name": "Priya",
            "last_name": "Sharma",
            "role": "student",
        },
    ],
    "classifier_texts": {
        "environment": "Our campus produces too much waste and the recycling bins are always full.",
        "finance": "The annual budget for labs keeps growing and the cost of equipment is high.",
        "none": "Nothing in this sentence relates to any of the listed areas whatsoever.",
        "short": "Too short",
    },
}


# =============================================================================
# EXPECTED MESSAGES
# =============================================================================

MESSAGES = {
    "not_found": "not found",
    "closed_problem": "closed",
    "too_short": "Text too short",
    "conflict": "cannot move",
}


# =============================================================================
# TEST CATEGORIES (for the results report)
# =============================================================================

TEST_CATEGORIES: Dict[str, Dict[str, Any]] = {
    "scoring": {
        "name": "Scoring",
        "description": "Overall score formula and sub-score validation",
        "protects_against": ["Rounding drift", "Out-of-range sub-scores accepted"],
    },
    "engine": {
        "name": "Evaluation Engine",
        "description": "Decisions, failure atomicity, concurrency and replays",
        "protects_against": [
            "Half-written evaluations",
            "Lost updates between reviewers",
            "Duplicate evaluations on retry",
        ],
    },
    "records": {
        "name": "Record Store",
        "description": "CRUD, filters and post-commit events",
        "protects_against": ["Filters ignored or misapplied", "Notifications before commit"],
    },
    "storage": {
        "name": "In-Memory Storage",
        "description": "Ordering, filters, transactions",
        "protects_against": ["Partial writes after a failure"],
    },
    "supabase_storage": {
        "name": "Supabase Storage",
        "description": "PostgREST requests and row conversion",
        "protects_against": ["Wrong query parameters", "Orphaned evaluations"],
    },
}


def get_problem_data(index: int = 0) -> Dict[str, Any]:
    """Get a copy of a sample problem by index."""
    data = dict(TEST_DATA["problems"][index])
    data["tags"] = list(data["tags"])
    return data


def get_idea_data(problem_id: str, **overrides) -> Dict[str, Any]:
    """Get a copy of the sample idea for a problem."""
    data = dict(TEST_DATA["idea"], problem_id=problem_id)
    data.update(overrides)
    return data
