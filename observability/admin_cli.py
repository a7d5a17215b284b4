"""Administrative CLI for inspecting interview data integrity."""
from __future__ import annotations

import argparse
import json
from typing import List, Optional

from consistency.validator import find_orphaned_records, validate_data, validation_summary
from services.repositories import Repositories, open_repositories
from services.stats import interview_stats


def show_validation(repos: Repositories) -> bool:
    result = validate_data(repos)
    print(validation_summary(result))
    return result.is_valid


def show_orphans(repos: Repositories) -> int:
    orphans = find_orphaned_records(repos)
    print(f"Sessions: {repos.sessions.count()}")
    print(f"Reports: {repos.reports.count()}")
    print(f"Comments: {repos.comments.count()}")
    if not orphans.total():
        print("No orphaned records found.")
        return 0
    print("Orphaned records found:")
    for label, records in (
        ("Orphaned Reports", orphans.orphaned_reports),
        ("Orphaned Comments", orphans.orphaned_comments),
        ("Orphaned Versions", orphans.orphaned_versions),
        ("Orphaned Shares", orphans.orphaned_shares),
        ("Sessions Without Reports", orphans.sessions_without_reports),
    ):
        if records:
            print(f"  - {label}: {len(records)}")
            for record in records:
                print(f"      {record.id}")
    return orphans.total()


def show_stats(repos: Repositories) -> None:
    print(json.dumps(interview_stats(repos), indent=2, sort_keys=True))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect interview session and report data")
    parser.add_argument("--db", help="SQLite database path (defaults to DB_PATH)")
    parser.add_argument("--validate", action="store_true", help="Run the integrity validator")
    parser.add_argument("--orphans", action="store_true", help="List orphaned records")
    parser.add_argument("--stats", action="store_true", help="Print interview statistics")
    args = parser.parse_args(argv)

    if not (args.validate or args.orphans or args.stats):
        parser.print_help()
        return 0

    repos = open_repositories(args.db)
    exit_code = 0
    if args.validate and not show_validation(repos):
        exit_code = 1
    if args.orphans:
        show_orphans(repos)
    if args.stats:
        show_stats(repos)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
