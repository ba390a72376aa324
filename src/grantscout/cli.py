"""Command-line interface for grantscout."""

import argparse
import asyncio
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import load_settings
from .drafting import APPLICATION_SECTIONS, ApplicationContext, ApplicationDrafter
from .finder import GrantFinder
from .gateway import CompletionFailure, build_gateway, options_from_settings
from .models import ClientProfile, FundingRange, GrantRecord, SearchQuery, SearchResult, is_clarification

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging."""
    if quiet:
        level = logging.ERROR
    else:
        level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )
    # Quiet down HTTP and SDK libraries
    for name in ("httpx", "httpcore", "openai", "google.genai", "google_genai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def print_grants(grants: list[GrantRecord]):
    if not grants:
        print("No matching grants found.")
        return

    for i, grant in enumerate(grants, 1):
        print(f"\n{i}. {grant.title}")
        print(f"   Opportunity Number: {grant.opportunity_number}")
        print(f"   Category: {grant.category_of_funding}")
        print(f"   Posted: {grant.posted_date} | Closes: {grant.deadline}")
        print(f"   Total Funding: {grant.total_funding} | Expected Awards: {grant.expected_awards}")
        if grant.eligibility:
            print(f"   Eligibility: {grant.eligibility[0]}")
        print(f"   {grant.description}")
        link = grant.more_info_url or grant.application_link
        if link:
            print(f"   More info: {link}")


def print_result(result: SearchResult):
    if is_clarification(result):
        print("\nThe grant finder needs more information:\n")
        print(result.message)
    else:
        print_grants(result)


def write_csv(grants: list[GrantRecord], output_path: Path) -> int:
    """Write grants to CSV file."""
    fieldnames = [
        "title", "agency", "opportunity_number", "category_of_funding",
        "posted_date", "deadline", "total_funding", "expected_awards",
        "eligibility", "description", "more_info_url", "application_link",
    ]

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()
        for grant in grants:
            row = grant.to_dict()
            row["eligibility"] = "; ".join(grant.eligibility)
            writer.writerow(row)

    return len(grants)


def write_json(result: SearchResult, output_path: Path):
    """Write a search result to JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if is_clarification(result):
        data = result.to_dict()
    else:
        data = {"grants": [g.to_dict() for g in result], "total": len(result)}

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def save_result(result: SearchResult, output_path: Path, fmt: str) -> Path:
    if fmt == "json":
        if output_path.suffix != ".json":
            output_path = output_path.with_suffix(".json")
        write_json(result, output_path)
    else:
        if is_clarification(result):
            raise ValueError("Cannot write a clarification question as CSV; use --format json")
        if output_path.suffix != ".csv":
            output_path = output_path.with_suffix(".csv")
        write_csv(result, output_path)
    return output_path


def query_from_args(args) -> SearchQuery:
    funding = None
    if args.min_funding or args.max_funding:
        funding = FundingRange(min=args.min_funding, max=args.max_funding)
    return SearchQuery(
        search_term=args.term,
        organization=args.organization,
        focus_area=args.focus_area,
        location=args.location,
        eligibility_type=args.eligibility,
        funding_range=funding,
    )


async def run_search(args, finder: GrantFinder) -> SearchResult:
    if args.command == "suggest":
        return await finder.get_grant_suggestions(args.organization, args.mission or "", args.focus_areas)
    return await finder.search(query_from_args(args))


async def run_draft(args, drafter: ApplicationDrafter):
    client = ClientProfile(
        name=args.client,
        mission_statement=args.mission or "",
        focus_areas=args.focus_areas or [],
        location=args.location,
    )
    grant = GrantRecord(title=args.grant_title) if args.grant_title else None
    context = ApplicationContext(
        client=client,
        grant=grant,
        project_title=args.project_title or "",
        project_summary=args.summary or "",
        requested_amount=args.amount,
    )
    return await drafter.draft_application(context, section_ids=args.sections)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grantscout",
        description="Find grant opportunities and draft applications with an LLM"
    )
    parser.add_argument(
        "--provider",
        choices=["openai", "gemini"],
        help="Completion provider (default: GRANTSCOUT_PROVIDER or openai)"
    )
    parser.add_argument("--model", help="Model name override")
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Quiet mode (errors only)")

    subparsers = parser.add_subparsers(dest="command")

    search_parser = subparsers.add_parser("search", help="Search for grants")
    search_parser.add_argument("term", help="What to find grants for (e.g. 'climate resilience')")
    search_parser.add_argument("--organization", help="Organization applying")
    search_parser.add_argument("--focus-area", help="Focus area of the work")
    search_parser.add_argument("--location", help="City, state or region")
    search_parser.add_argument("--eligibility", help="Eligibility type (e.g. 'nonprofits')")
    search_parser.add_argument("--min-funding", type=int, help="Minimum funding in dollars")
    search_parser.add_argument("--max-funding", type=int, help="Maximum funding in dollars")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest grants for an organization")
    suggest_parser.add_argument("organization", help="Organization name")
    suggest_parser.add_argument("--mission", help="Mission statement")
    suggest_parser.add_argument(
        "--focus-area", dest="focus_areas", action="append", required=True,
        help="Focus area (repeatable)"
    )

    for sub in (search_parser, suggest_parser):
        sub.add_argument("-o", "--output", type=Path, help="Save results to this file")
        sub.add_argument(
            "--format", choices=["csv", "json"], default="json",
            help="Output file format (default: json)"
        )

    draft_parser = subparsers.add_parser("draft", help="Draft a grant application")
    draft_parser.add_argument("--client", required=True, help="Organization name")
    draft_parser.add_argument("--mission", help="Mission statement")
    draft_parser.add_argument("--focus-area", dest="focus_areas", action="append", help="Focus area (repeatable)")
    draft_parser.add_argument("--location", help="Where the organization works")
    draft_parser.add_argument("--grant-title", help="Grant being applied for")
    draft_parser.add_argument("--project-title", help="Project title")
    draft_parser.add_argument("--summary", help="Short project summary")
    draft_parser.add_argument("--amount", type=int, help="Requested amount in dollars")
    draft_parser.add_argument(
        "--section", dest="sections", action="append",
        choices=[sid for sid, _ in APPLICATION_SECTIONS],
        help="Only draft this section (repeatable)"
    )
    draft_parser.add_argument("-o", "--output", type=Path, help="Save the draft as markdown")

    return parser


def main(argv: Optional[list[str]] = None, gateway=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        settings = load_settings(args.env_file, provider=args.provider, model=args.model)
        if gateway is None:
            gateway = build_gateway(settings)

        if args.command == "draft":
            drafter = ApplicationDrafter(gateway)
            draft = asyncio.run(run_draft(args, drafter))
            markdown = draft.to_markdown()
            if args.output:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(markdown, encoding="utf-8")
                print(f"Draft saved to: {args.output}")
            else:
                print(markdown)
            return

        finder = GrantFinder(gateway, options=options_from_settings(settings))
        result = asyncio.run(run_search(args, finder))

        if not args.quiet:
            print_result(result)

        if args.output:
            saved = save_result(result, args.output, args.format)
            if not args.quiet:
                print(f"\nOutput: {saved}")
    except CompletionFailure as e:
        print(f"Error: {e}. Please try again.", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
