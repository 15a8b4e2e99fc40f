"""
Demo data for Ideas Central.

Loads a small campus dataset (problems, ideas, one evaluation and demo
accounts) so the CLI has something to show without a database:

    python main.py --demo problems
"""

from datetime import datetime, timedelta
from typing import Optional

from ideas_central.identity import IdentityProvider
from ideas_central.log import get_logger
from ideas_central.models import Evaluation, Idea, Problem
from ideas_central.storage import Storage

logger = get_logger(__name__)

DEMO_PASSWORD = "password"

# (id, email, first, last, role, department)
DEMO_USERS = [
    ("demo-faculty-1", "rajesh.kumar@example.edu", "Rajesh", "Kumar", "faculty", "IT Services"),
    ("demo-faculty-2", "amit.patel@example.edu", "Amit", "Patel", "faculty", "Computer Science"),
    ("demo-student-1", "priya.sharma@example.edu", "Priya", "Sharma", "student", "Environmental Sciences"),
    ("demo-student-2", "rahul.singh@example.edu", "Rahul", "Singh", "student", "Computer Science"),
]

_NAMES = {
    "demo-faculty-1": "Dr. Rajesh Kumar",
    "demo-faculty-2": "Prof. Amit Patel",
    "demo-student-1": "Priya Sharma",
    "demo-student-2": "Rahul Singh",
}

_EMAILS = {user[0]: user[1] for user in DEMO_USERS}

# age is in hours
DEMO_PROBLEMS = [
    {
        "id": "demo-problem-1",
        "title": "Campus Wi-Fi Connectivity Issues",
        "description": "Intermittent Wi-Fi in hostels and classrooms disrupts online learning.",
        "full_description": (
            "Students are unable to access online resources in Blocks A & C due to poor "
            "Wi-Fi coverage. The current infrastructure is outdated and cannot handle the "
            "increasing number of devices."
        ),
        "category": "technology", "priority": "high", "status": "open",
        "tags": ["WiFi", "Networking", "Student Life"],
        "submitted_by": "demo-faculty-1", "department": "IT Services",
        "views_count": 54, "age": 5 * 24,
    },
    {
        "id": "demo-problem-2",
        "title": "Green Energy for Campus Lighting",
        "description": "Need solar-powered street lights to reduce electricity bills.",
        "category": "environment", "priority": "medium", "status": "open",
        "tags": ["Solar", "Energy", "Sustainability"],
        "submitted_by": "demo-student-1", "department": "Environmental Sciences",
        "views_count": 21, "age": 7 * 24,
    },
    {
        "id": "demo-problem-3",
        "title": "Automated Student Feedback System",
        "description": "Develop a system for collecting and analyzing student feedback on courses and faculty.",
        "category": "education", "priority": "low", "status": "in-progress",
        "tags": ["Feedback", "Education", "Automation"],
        "submitted_by": "demo-faculty-2", "department": "Computer Science",
        "views_count": 30, "age": 10 * 24,
    },
    {
        "id": "demo-problem-4",
        "title": "Lack of Accessible Study Spaces",
        "description": "Students with disabilities face challenges accessing certain study areas and facilities.",
        "category": "social", "priority": "high", "status": "open",
        "tags": ["Accessibility", "Inclusion", "Infrastructure"],
        "submitted_by": "demo-faculty-1", "department": "Student Affairs",
        "views_count": 78, "age": 3 * 24,
    },
    {
        "id": "demo-problem-5",
        "title": "Inefficient Campus Transportation",
        "description": "Bus routes are often delayed, and parking is scarce, leading to student frustration.",
        "category": "transportation", "priority": "medium", "status": "in-progress",
        "tags": ["Commute", "Parking", "Logistics"],
        "submitted_by": "demo-student-1", "department": "Civil Engineering",
        "views_count": 92, "age": 6 * 24,
    },
    {
        "id": "demo-problem-6",
        "title": "Cybersecurity Awareness for Students",
        "description": "Students are vulnerable to phishing and online scams due to lack of cybersecurity knowledge.",
        "category": "security", "priority": "urgent", "status": "open",
        "tags": ["Cybersecurity", "Awareness", "Data Protection"],
        "submitted_by": "demo-faculty-2", "department": "Computer Science",
        "views_count": 110, "age": 24,
    },
    {
        "id": "demo-problem-7",
        "title": "Student Mental Health Support",
        "description": "Lack of accessible and comprehensive mental health services for students.",
        "category": "healthcare", "priority": "urgent", "status": "open",
        "tags": ["Mental Health", "Student Welfare", "Support Services"],
        "submitted_by": "demo-student-1", "department": "Psychology",
        "views_count": 150, "age": 25,
    },
]

DEMO_IDEAS = [
    {
        "id": "demo-idea-1", "problem_id": "demo-problem-1",
        "title": "Mesh Network for Campus Wi-Fi",
        "description": "Implement a robust mesh Wi-Fi network to eliminate dead zones.",
        "solution": "Deploy a self-healing mesh of high-performance access points across all buildings.",
        "implementation": "Pilot in Block A, then hostels, then the entire campus.",
        "resources": "Budget: $50,000, 2 network engineers, 3 student volunteers",
        "timeline": "6 months",
        "submitted_by": "demo-student-1", "age": 3 * 24,
    },
    {
        "id": "demo-idea-2", "problem_id": "demo-problem-1",
        "title": "Wi-Fi Signal Boosters in Dorms",
        "description": "Install signal boosters in student dormitories to improve coverage.",
        "solution": "Place boosters on each dormitory floor to extend the existing network.",
        "timeline": "2 months",
        "submitted_by": "demo-student-2", "status": "under-review", "age": 2 * 24,
    },
    {
        "id": "demo-idea-3", "problem_id": "demo-problem-2",
        "title": "Solar-Powered Street Lights",
        "description": "Replace existing street lights with integrated solar-powered units.",
        "solution": "Standalone solar lights with motion sensors that charge during the day.",
        "timeline": "4 months",
        "submitted_by": "demo-faculty-1", "age": 24,
    },
    {
        "id": "demo-idea-4", "problem_id": "demo-problem-3",
        "title": "AI-Powered Feedback Analysis System",
        "description": "Use natural language processing to analyze and categorize student feedback automatically.",
        "solution": "A text model that finds key themes in feedback and reports them to faculty.",
        "timeline": "3 months",
        "submitted_by": "demo-student-2", "age": 12,
    },
    {
        "id": "demo-idea-5", "problem_id": "demo-problem-2",
        "title": "Hybrid Solar-Wind Energy System",
        "description": "Combine solar panels with small wind turbines for continuous energy generation.",
        "solution": "Integrated solar-wind units with smart controllers to optimize energy capture.",
        "timeline": "6 months",
        "submitted_by": "demo-student-1", "age": 18,
    },
]

DEMO_EVALUATIONS = [
    {
        "id": "demo-eval-1", "idea_id": "demo-idea-1", "evaluator_id": "demo-faculty-1",
        "innovation_score": 8, "feasibility_score": 9, "impact_score": 8,
        "status": "approved",
        "comments": "A well-thought-out solution. The mesh approach is scalable and feasible.",
        "age": 24,
    },
]


def _at(now: datetime, hours: int) -> datetime:
    return now - timedelta(hours=hours)


def seed_demo_data(storage: Storage, now: Optional[datetime] = None) -> dict:
    """
    Insert the demo problems, ideas and evaluations into storage.

    Returns:
        Counts of inserted records per collection.
    """
    now = now or datetime.now()

    for data in DEMO_PROBLEMS:
        fields = {k: v for k, v in data.items() if k != "age"}
        created = _at(now, data["age"])
        storage.insert_problem(Problem(
            **fields,
            submitted_by_name=_NAMES[data["submitted_by"]],
            created_at=created,
            updated_at=created,
        ))

    for data in DEMO_IDEAS:
        fields = {k: v for k, v in data.items() if k != "age"}
        created = _at(now, data["age"])
        storage.insert_idea(Idea(
            **fields,
            submitted_by_name=_NAMES[data["submitted_by"]],
            submitted_by_email=_EMAILS[data["submitted_by"]],
            created_at=created,
            updated_at=created,
        ))

    for data in DEMO_EVALUATIONS:
        fields = {k: v for k, v in data.items() if k != "age"}
        created = _at(now, data["age"])
        storage.record_evaluation(Evaluation(
            **fields,
            evaluator_name=_NAMES[data["evaluator_id"]],
            created_at=created,
            updated_at=created,
        ))

    counts = {
        "problems": len(DEMO_PROBLEMS),
        "ideas": len(DEMO_IDEAS),
        "evaluations": len(DEMO_EVALUATIONS),
    }
    logger.info("Seeded demo data into %s storage: %s", storage.name, counts)
    return counts


def seed_demo_users(identity: IdentityProvider) -> int:
    """Register the demo accounts (password: DEMO_PASSWORD)."""
    for _, email, first, last, role, department in DEMO_USERS:
        identity.sign_up(email, DEMO_PASSWORD, first, last, role, department=department)
    return len(DEMO_USERS)
