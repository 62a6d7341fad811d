"""
Command-line entry point.

Usage:
    copy-reviewer analyze --subject "quick q" "Hi Maya, ..."
    copy-reviewer review --subject "quick q" --file email.txt
    copy-reviewer improve --subject "quick q" --review-file review.json < email.txt
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from copy_reviewer.config import Settings, load_environment
from copy_reviewer.errors import CopyReviewError
from copy_reviewer.models import CombinedResult, ImproveResult, ReviewResult
from copy_reviewer.service import CopyReviewService


def _resolve_body(args) -> str:
    if args.file:
        return Path(args.file).read_text()
    if args.body:
        return args.body
    print("Enter email body (Ctrl+D to finish):", file=sys.stderr)
    return sys.stdin.read()


def print_review(review: ReviewResult) -> None:
    print(f"\nScore: {review.overall_score}/100")
    for section in review.sections:
        print(f"\n== {section.title} ==")
        if section.content:
            print(section.content)
        for item in section.items:
            print(f"  - {item}")


def print_improved(improved: ImproveResult) -> None:
    print(f"\nSubject: {improved.improved_subject}\n")
    print(improved.improved_body.replace("\\n", "\n"))
    if improved.changes:
        print("\nChanges:")
        for change in improved.changes:
            if isinstance(change, dict):
                print(f"  - {change.get('category', '')}: {change.get('summary') or change.get('reason', '')}")
            else:
                print(f"  - {change}")
    if improved.further_tips:
        print("\nFurther tips:")
        for tip in improved.further_tips:
            print(f"  - {tip}")
    if improved.expected_impact:
        print(f"\nExpected impact: {improved.expected_impact}")


def print_combined(result: CombinedResult) -> None:
    print(f"\nOriginal score: {result.review.score}/100 -> estimated {result.improved.score}/100")
    print(f"\nSubject: {result.improved.subject_line}\n")
    print(result.improved.body.replace("\\n", "\n"))
    if result.further_tips:
        print("\nFurther tips:")
        for tip in result.further_tips:
            print(f"  - {tip}")


def run(args, service: CopyReviewService) -> None:
    body = _resolve_body(args)

    if args.command == "review":
        result = service.review_copy(args.subject, body, args.model)
        printer = print_review
    elif args.command == "improve":
        review = json.loads(Path(args.review_file).read_text())
        result = service.improve_copy(args.subject, body, review, args.model)
        printer = print_improved
    else:
        result = service.analyze_and_improve(args.subject, body, args.model)
        printer = print_combined

    if args.json:
        print(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))
    else:
        printer(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Review and rewrite cold email copy using an LLM")
    parser.add_argument("--model", "-m", help="Model id; 'vendor/model' ids go through OpenRouter")
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")
    for name, help_text in (
        ("review", "Score the copy"),
        ("improve", "Rewrite the copy from a saved review"),
        ("analyze", "Review, then rewrite"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("body", nargs="?", help="Email body text (or use --file / stdin)")
        sub.add_argument("--subject", "-s", required=True, help="Subject line")
        sub.add_argument("--file", "-f", help="Read email body from file")
        if name == "improve":
            sub.add_argument("--review-file", required=True, help="JSON file holding a review result")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    load_environment()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    service = CopyReviewService(settings)
    try:
        run(args, service)
    except (CopyReviewError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
