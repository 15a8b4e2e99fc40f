#!/usr/bin/env python3
"""
Ideas Central - command-line entry point.

Browse problems and ideas, submit new ones and evaluate ideas against
the configured storage backend (in-memory by default, Supabase when
STORAGE_BACKEND=supabase).

Usage:
    python main.py --demo problems                  # List demo problems
    python main.py --demo stats                     # Problem counters
    python main.py --demo ideas --status pending    # Filter ideas
    python main.py --demo evaluate demo-idea-3 \\
        --innovation 8 --feasibility 7 --impact 9 --approve \\
        --email rajesh.kumar@example.edu --password password
    python main.py classify "Bus routes are delayed and parking is scarce"
    python main.py config                           # Show configuration

The in-memory backend lives only for one command, so use --demo to
work against sample data without a database.
"""

import argparse
import json
import sys

from ideas_central import __version__
from ideas_central.bootstrap import Services, create_services
from ideas_central.config import print_config_summary, validate_config
from ideas_central.errors import IdeasCentralError
from ideas_central.evaluation import EvaluationOutcome
from ideas_central.identity import REVIEWER_ROLES, require_role
from ideas_central.models import IDEA_STATUSES, PRIORITIES, PROBLEM_STATUSES
from ideas_central.notifications import OutboxSender
from ideas_central.seed import seed_demo_data, seed_demo_users


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="ideas-central",
        description="Submit problems and ideas, and evaluate ideas.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --demo problems --category technology
  %(prog)s --demo ideas --problem demo-problem-1
  %(prog)s --demo review demo-idea-3
  %(prog)s --demo evaluate demo-idea-3 -i 8 -f 7 -m 9 --approve \\
      --email rajesh.kumar@example.edu --password password
  %(prog)s classify "Our campus recycling system wastes energy"
        """,
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Load demo problems, ideas and accounts before running the command",
    )
    parser.add_argument(
        "--backend",
        choices=["memory", "supabase"],
        default=None,
        help="Storage backend (default: STORAGE_BACKEND from config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print records as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show tracebacks on errors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # Browsing
    p = sub.add_parser("problems", help="List problems")
    p.add_argument("--category", default=None)
    p.add_argument("--priority", choices=PRIORITIES + ("all",), default=None)
    p.add_argument("--search", default=None, help="Match title, description or tags")
    p.add_argument("--submitted-by", default=None, metavar="USER_ID")

    sub.add_parser("stats", help="Show problem counters")

    p = sub.add_parser("ideas", help="List ideas")
    p.add_argument("--problem", default=None, metavar="PROBLEM_ID")
    p.add_argument("--status", choices=IDEA_STATUSES + ("all",), default=None)
    p.add_argument("--submitted-by", default=None, metavar="USER_ID")

    p = sub.add_parser("evaluations", help="List evaluations")
    p.add_argument("--idea", default=None, metavar="IDEA_ID")
    p.add_argument("--evaluator", default=None, metavar="USER_ID")

    # Submissions
    p = sub.add_parser("submit-problem", help="Submit a problem")
    p.add_argument("--title", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--category", default=None, help="Default: suggested by the classifier")
    p.add_argument("--priority", choices=PRIORITIES, default="medium")
    p.add_argument("--tags", nargs="*", default=None)
    p.add_argument("--department", default=None)
    p.add_argument("--submitted-by", required=True, metavar="USER_ID")
    p.add_argument("--name", default="", help="Submitter display name")

    p = sub.add_parser("problem-status", help="Change a problem's status")
    p.add_argument("problem_id")
    p.add_argument("status", choices=PROBLEM_STATUSES)

    p = sub.add_parser("submit-idea", help="Submit an idea for a problem")
    p.add_argument("--problem", required=True, metavar="PROBLEM_ID")
    p.add_argument("--title", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--solution", required=True)
    p.add_argument("--timeline", default=None)
    p.add_argument("--submitted-by", required=True, metavar="USER_ID")
    p.add_argument("--name", default="", help="Submitter display name")
    p.add_argument("--email", default=None, help="Submitter email for decision notices")

    # Review
    p = sub.add_parser("review", help="Move a pending idea to under-review")
    p.add_argument("idea_id")

    p = sub.add_parser("evaluate", help="Score an idea and approve or reject it")
    p.add_argument("idea_id")
    p.add_argument("--innovation", "-i", type=int, required=True)
    p.add_argument("--feasibility", "-f", type=int, required=True)
    p.add_argument("--impact", "-m", type=int, required=True)
    p.add_argument("--comments", default=None)
    decision = p.add_mutually_exclusive_group(required=True)
    decision.add_argument("--approve", dest="decision", action="store_true")
    decision.add_argument("--reject", dest="decision", action="store_false")
    p.add_argument("--email", required=True, help="Reviewer sign-in email")
    p.add_argument("--password", required=True, help="Reviewer password")

    # Tools
    p = sub.add_parser("classify", help="Suggest a category and tags for text")
    p.add_argument("text")

    sub.add_parser("config", help="Show configuration and exit")

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Ideas Central Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_records(records: list, as_json: bool = False) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in records], indent=2, default=str))
        return
    if not records:
        print("No records found.")
        return
    for record in records:
        print(f"  {record.id}  {record}")
    print(f"\n{len(records)} record(s)")


def print_outbox(services: Services) -> None:
    """Show messages held by the development outbox."""
    if not isinstance(services.sender, OutboxSender) or not services.sender.messages:
        return
    print("\nNotifications (outbox):")
    for message in services.sender.messages:
        print(f"  To: {message.to}")
        print(f"  Subject: {message.subject}")


def run_command(args: argparse.Namespace, services: Services) -> int:
    """Run one subcommand. Returns the exit code."""
    store = services.store

    if args.command == "problems":
        problems = store.list_problems(
            category=args.category,
            priority=args.priority,
            search=args.search,
            submitted_by=args.submitted_by,
        )
        print_records(problems, args.json)

    elif args.command == "stats":
        stats = store.get_problem_stats()
        if args.json:
            print(json.dumps(stats.to_dict(), indent=2))
        else:
            print(f"Total: {stats.total}  Open: {stats.open}  "
                  f"Urgent: {stats.urgent}  In progress: {stats.in_progress}")

    elif args.command == "ideas":
        ideas = store.list_ideas(
            problem_id=args.problem,
            status=args.status,
            submitted_by=args.submitted_by,
        )
        print_records(ideas, args.json)

    elif args.command == "evaluations":
        evaluations = store.list_evaluations(idea_id=args.idea, evaluator_id=args.evaluator)
        if args.json:
            print(json.dumps([e.to_dict() for e in evaluations], indent=2, default=str))
        else:
            for e in evaluations:
                print(f"  {e.idea_title} by {e.submitted_by_name}: "
                      f"{e.overall_score:.1f} {e.status.upper()} ({e.evaluator_name})")
            print(f"\n{len(evaluations)} record(s)")

    elif args.command == "submit-problem":
        category = args.category
        tags = args.tags
        if category is None:
            suggestion = services.classifier.classify(f"{args.title}. {args.description}")
            category = suggestion.category
            tags = tags if tags is not None else suggestion.tags
            print(f"Suggested category: {suggestion.label} ({suggestion.confidence:.0f}% confidence)")
        problem = store.create_problem({
            "title": args.title,
            "description": args.description,
            "category": category,
            "priority": args.priority,
            "tags": tags or [],
            "department": args.department,
            "submitted_by": args.submitted_by,
            "submitted_by_name": args.name,
        })
        print(f"✓ Created problem {problem.id}")

    elif args.command == "problem-status":
        problem = store.update_problem_status(args.problem_id, args.status)
        print(f"✓ Problem {problem.id} is now {problem.status}")

    elif args.command == "submit-idea":
        idea = store.create_idea({
            "problem_id": args.problem,
            "title": args.title,
            "description": args.description,
            "solution": args.solution,
            "timeline": args.timeline,
            "submitted_by": args.submitted_by,
            "submitted_by_name": args.name,
            "submitted_by_email": args.email,
        })
        print(f"✓ Created idea {idea.id} ({idea.status})")

    elif args.command == "review":
        idea = services.engine.start_review(args.idea_id)
        print(f"✓ Idea {idea.id} is now {idea.status}")

    elif args.command == "evaluate":
        reviewer = services.identity.authenticate(args.email, args.password)
        require_role(reviewer, *REVIEWER_ROLES)

        outcome: EvaluationOutcome = services.engine.evaluate(
            args.idea_id,
            reviewer.id,
            reviewer.full_name,
            innovation=args.innovation,
            feasibility=args.feasibility,
            impact=args.impact,
            comments=args.comments,
            decision=args.decision,
        )
        print(outcome.to_summary())
        print_outbox(services)

    elif args.command == "classify":
        result = services.classifier.classify(args.text)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(f"Category:   {result.label} ({result.category})")
            print(f"Confidence: {result.confidence:.0f}%")
            print(f"Tags:       {', '.join(result.tags) or '-'}")

    return 0


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "config":
        show_config()
        return 0

    try:
        services = create_services(backend=args.backend)
        if args.demo:
            seed_demo_data(services.storage)
            seed_demo_users(services.identity)
        return run_command(args, services)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except (IdeasCentralError, ValueError) as e:
        print(f"❌ {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
