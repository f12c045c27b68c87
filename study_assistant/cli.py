"""
Command-line interface for the study assistant.

Usage:
    python -m study_assistant analyze "What is Newton's second law?"
    python -m study_assistant repair --question "..." --file response.md
    python -m study_assistant verify-db
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from study_assistant.config import get_settings
from study_assistant.db.supabase_client import get_supabase_client, verify_tables
from study_assistant.routers.analysis import analyze_message
from study_assistant.services.response_template import ensure_template, is_template_compliant
from study_assistant.services.subject_detector import parse_educational_query


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="study-assistant",
        description="Study Assistant CLI - classify questions and repair answers locally"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Classify a message (educational, subject, topic, category)"
    )
    analyze_parser.add_argument("text", type=str, help="The message to classify")
    analyze_parser.add_argument(
        "--response",
        "-r",
        type=str,
        default="",
        help="Assistant response, used for the concept card category"
    )

    repair_parser = subparsers.add_parser(
        "repair",
        help="Rewrite a model response into the structured answer template"
    )
    repair_parser.add_argument(
        "--question",
        "-q",
        type=str,
        required=True,
        help="The user's question the response answers"
    )
    repair_parser.add_argument(
        "--file",
        "-f",
        type=str,
        default=None,
        help="File holding the response (default: read stdin)"
    )

    subparsers.add_parser(
        "verify-db",
        help="Check that the Supabase tables exist"
    )

    return parser


def analyze_command(args: argparse.Namespace) -> int:
    analysis = analyze_message(args.text, args.response)
    print(json.dumps(analysis.model_dump(), indent=2, ensure_ascii=False))
    return 0


def repair_command(args: argparse.Namespace) -> int:
    """
    Execute the repair command.

    Prints the templated response to stdout and a one-line verdict to stderr.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    if args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as f:
                response = f.read()
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
            return 1
    else:
        response = sys.stdin.read()

    query = parse_educational_query(args.question)
    was_compliant = is_template_compliant(response)
    content, repaired = ensure_template(response, query)

    print(content)
    verdict = "repaired" if repaired else ("compliant" if was_compliant else "unchanged")
    print(f"[{query.subject} / {query.topic}] {verdict}", file=sys.stderr)
    return 0


async def verify_db_command(args: argparse.Namespace) -> int:
    """
    Check every required table.

    Returns:
        int: Exit code (0 when all tables exist, 1 otherwise)
    """
    try:
        get_settings()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nMake sure you have a .env file with:")
        print("  GEMINI_API_KEY=your_api_key")
        print("  SUPABASE_URL=https://your-project.supabase.co")
        print("  SUPABASE_KEY=your_anon_key")
        return 1

    results = await verify_tables(get_supabase_client())
    for table, ok in results.items():
        print(f"  {'OK     ' if ok else 'MISSING'} {table}")

    if not all(results.values()):
        print("\nRun migrations/001_initial_schema.sql in the Supabase SQL editor.")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Route to command handler
    if args.command == "analyze":
        return analyze_command(args)
    elif args.command == "repair":
        return repair_command(args)
    elif args.command == "verify-db":
        return asyncio.run(verify_db_command(args))
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
