"""Decision email content."""

from html import escape
from typing import Optional, Tuple

from ideas_central.models import IDEA_APPROVED, Idea


def decision_subject(idea: Idea) -> str:
    return f'Your Idea "{idea.title}" has been {idea.status}!'


def decision_body(idea: Idea, mentor_contact: Optional[str] = None) -> str:
    """
    HTML body telling the submitter the outcome of the review.

    Approved ideas also get the mentorship contact address.
    """
    title = escape(idea.title)
    score = f"{idea.score:.1f}" if idea.score is not None else "N/A"

    parts = [
        f"Dear {escape(idea.submitted_by_name or 'innovator')},",
        f'Your idea "{title}" for problem "{escape(idea.problem_title or idea.problem_id)}" '
        f"has been reviewed and its status is now: <strong>{idea.status.upper()}</strong>.",
        f"Overall Score: {score}",
    ]
    if idea.status == IDEA_APPROVED and mentor_contact:
        contact = escape(mentor_contact)
        parts.append(
            "Congratulations! Your idea has been approved. You can now approach a "
            "mentor for guidance on the next steps. Please contact our mentorship "
            f'program at <a href="mailto:{contact}">{contact}</a>.'
        )
    parts.append("Thank you for your contribution!")
    return "<br><br>".join(parts)


def build_decision_message(idea: Idea, mentor_contact: Optional[str] = None) -> Tuple[str, str]:
    """Return (subject, body) for an idea's decision email."""
    return decision_subject(idea), decision_body(idea, mentor_contact)
