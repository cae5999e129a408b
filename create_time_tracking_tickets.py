"""
Create this month's time tracking tickets in Jira.

One parent Story per month ("Time Tracking <Month> for <Identity>") and one
Sub-task per working day (summary DD.MM.YYYY). Existing tickets are reused,
so the script can be re-run safely.

Usage:
    # Dry-run (default) - shows what would happen
    python create_time_tracking_tickets.py

    # Execute - actually creates tickets
    python create_time_tracking_tickets.py --execute

    # Only the first 3 working days
    python create_time_tracking_tickets.py --limit 3 --execute
"""

import argparse
import logging
from datetime import date

from clients import ApiError, JiraClient
from date_utils import format_date, get_working_days, month_name
from models import CreationReport, ItemOutcome
from mutations import PLACEHOLDER_KEY, get_mutations
from patterns import Patterns
from payloads import child_fields, child_query, parent_fields, parent_query
from utils import ConfigurationError, load_config_safe, validate_limit


class CreationSynchronizer:
    """Ensures the month's parent ticket and one child per working day exist."""

    def __init__(self, client: JiraClient, mutations, config: dict, today: date):
        self.client = client
        self.mutations = mutations
        self.project_key = config["tracking"]["project_key"]
        self.assignee = config["tracking"]["assignee"]
        self.identity = config["tracking"]["identity"]
        self.today = today

    def _report(self, report: CreationReport, outcome: ItemOutcome) -> None:
        report.outcomes.append(outcome)
        print(outcome.line())

    def resolve_parent(self, report: CreationReport) -> str:
        """Find the month's parent ticket, creating it if missing."""
        today_label = format_date(self.today)
        existing = self.client.find_issue(
            parent_query(self.project_key, self.today, self.identity)
        )
        if existing:
            report.existing += 1
            self._report(report, ItemOutcome(today_label, existing, "exists"))
            return existing

        fields = parent_fields(self.project_key, self.today, self.identity, self.assignee)
        key = self.mutations.create_issue(fields)
        if self.mutations.live:
            report.created += 1
            self._report(report, ItemOutcome(today_label, key, "created"))
        else:
            self._report(report, ItemOutcome(today_label, key, "would create", fields["summary"]))
        return key

    def run(self, limit: int | None = None) -> CreationReport:
        """Create missing tickets for the first `limit` working days (all if None).

        Raises:
            ConfigurationError: if limit is not positive (before any request).
            ApiError: on any Jira failure; the run stops at the first one.
        """
        validate_limit(limit)
        report = CreationReport()

        working_days = get_working_days(self.today)
        report.working_days = len(working_days)
        print(f"[*] Found {len(working_days)} working days in {month_name(self.today)} {self.today.year}")

        parent_key = self.resolve_parent(report)
        report.parent_key = parent_key
        # A dry-run placeholder parent has no children to look up
        parent_exists = parent_key != PLACEHOLDER_KEY

        days = working_days[:limit] if limit else working_days
        if limit:
            print(f"[*] Creating tickets for {len(days)} days (limited to {limit})")
        else:
            print(f"[*] Creating tickets for all {len(days)} working days")

        for day in days:
            label = format_date(day)
            existing = self.client.find_issue(child_query(parent_key, day)) if parent_exists else None
            if existing:
                report.existing += 1
                report.child_keys.append(existing)
                self._report(report, ItemOutcome(label, existing, "exists"))
                continue

            key = self.mutations.create_issue(
                child_fields(self.project_key, parent_key, day, self.assignee)
            )
            if self.mutations.live:
                report.created += 1
                report.child_keys.append(key)
                self._report(report, ItemOutcome(label, key, "created"))
            else:
                self._report(report, ItemOutcome(label, key, "would create"))

        return report


def sync(config: dict, today: date, limit: int | None, execute: bool) -> CreationReport:
    client = JiraClient(config)
    mutations = get_mutations(client, dry_run=not execute)
    report = CreationSynchronizer(client, mutations, config, today).run(limit)

    print()
    if execute:
        print(f"[*] Done. Created {report.created}, already existing {report.existing}.")
    else:
        print("[DRY-RUN] This was a dry run - no tickets were created.")
        print("Run with --execute to apply changes.")
    return report


# ============================================================================
# CLI
# ============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Create this month's time tracking tickets in Jira",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Dry-run (default) - shows what would happen
    python create_time_tracking_tickets.py

    # Execute - actually creates tickets
    python create_time_tracking_tickets.py --execute

    # Only the first 3 working days
    python create_time_tracking_tickets.py --limit 3 --execute
        """,
    )
    parser.add_argument("--limit", type=int, help="Only process the first N working days")
    parser.add_argument(
        "--execute", action="store_true", help="Actually create tickets (default: dry-run)"
    )
    parser.add_argument("--date", help="Reference date (YYYY-MM-DD), default: today")
    parser.add_argument("--verbose", action="store_true", help="Log every Jira request")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    # Validate date format
    if args.date and not Patterns.DATE_FORMAT.match(args.date):
        print(f"Error: Invalid date format '{args.date}'. Expected YYYY-MM-DD")
        return 1

    try:
        validate_limit(args.limit)
        today = date.fromisoformat(args.date) if args.date else date.today()
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    except ValueError:
        print(f"Error: Invalid date '{args.date}'")
        return 1

    config = load_config_safe()
    if config is None:
        return 1

    try:
        sync(config, today, args.limit, args.execute)
    except ApiError as e:
        print(f"[!] ERROR: {e}")
        if e.body:
            print(f"    {e.body[:500]}")
        return 1
    return 0


if __name__ == "__main__":
    exit(main())
