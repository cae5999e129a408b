"""
Complete this month's time tracking tickets in Jira.

For every child ticket of the month's parent dated today or earlier:
transition it to Done and log 8h on its date. Tickets that already carry
a worklog for their date are skipped, so the script can be re-run safely.

Usage:
    # Dry-run (default) - shows what would happen
    python update_time_tracking_tickets.py

    # Execute - actually transitions tickets and logs work
    python update_time_tracking_tickets.py --execute
    python update_time_tracking_tickets.py --dry-run=false
"""

import argparse
import logging
from datetime import date

from clients import ApiError, JiraClient, StaleTransitionError
from date_utils import format_date, parse_date, worklog_started
from models import CompletionReport, Issue, ItemOutcome, WorkLogEntry
from mutations import get_mutations
from patterns import Patterns
from payloads import WORKLOG_DURATION, children_query, parent_query
from utils import load_config_safe

CHILDREN_PAGE_SIZE = 100


class CompletionSynchronizer:
    """Transitions past and current child tickets to Done and logs their work."""

    def __init__(self, client: JiraClient, mutations, config: dict, today: date):
        self.client = client
        self.mutations = mutations
        self.project_key = config["tracking"]["project_key"]
        self.identity = config["tracking"]["identity"]
        self.done_transition = config["tracking"].get("done_transition", "Done")
        self.today = today

    def _report(self, report: CompletionReport, outcome: ItemOutcome) -> None:
        report.outcomes.append(outcome)
        print(outcome.line())

    def run(self) -> CompletionReport:
        """Process every child of the month's parent in key order.

        Raises:
            ApiError: on any Jira failure; the run stops at the first one.
        """
        report = CompletionReport()

        parent_key = self.client.find_issue(
            parent_query(self.project_key, self.today, self.identity)
        )
        if not parent_key:
            print("[*] No parent ticket found for the current month - nothing to do")
            return report
        report.parent_key = parent_key

        children = self.client.search_issues(
            children_query(parent_key), max_results=CHILDREN_PAGE_SIZE
        )
        report.children = len(children)
        print(f"[*] Found {len(children)} child tickets under {parent_key}")

        for child in children:
            ticket_date = parse_date(child.summary)
            if ticket_date is None:
                self._report(
                    report,
                    ItemOutcome(
                        child.key,
                        child.status or "?",
                        "skipped",
                        f"Could not extract date from summary: {child.summary!r}",
                    ),
                )
                report.skipped += 1
                continue

            if ticket_date > self.today:
                self._report(
                    report, ItemOutcome(format_date(ticket_date), child.key, "skipped", "Future date")
                )
                report.skipped += 1
                continue

            if not self.complete(report, child, ticket_date):
                report.skipped += 1

        return report

    def complete(self, report: CompletionReport, child: Issue, ticket_date: date) -> bool:
        """Transition one child to Done, then log work unless already logged.

        Returns:
            False if the child was left unchanged (nothing applied or planned).
        """
        changed = False
        label = format_date(ticket_date)
        updated = "updated" if self.mutations.live else "would update"

        transitions = self.client.get_transitions(child.key)
        done = next((t for t in transitions if t.name == self.done_transition), None)
        if done is None:
            self._report(
                report,
                ItemOutcome(label, child.key, "skipped", f"No '{self.done_transition}' transition available"),
            )
        else:
            try:
                self.mutations.transition_issue(child.key, done.id)
            except StaleTransitionError as e:
                self._report(report, ItemOutcome(label, child.key, "skipped", f"Transition rejected: {e}"))
            else:
                changed = True
                if self.mutations.live:
                    report.transitioned += 1
                self._report(
                    report, ItemOutcome(label, child.key, updated, f"Status: {self.done_transition}")
                )

        worklogs = self.client.get_worklogs(child.key)
        if any(wl.start_date == ticket_date for wl in worklogs):
            self._report(report, ItemOutcome(label, child.key, "skipped", "Worklog already exists"))
            return changed

        entry = WorkLogEntry(
            started=worklog_started(ticket_date),
            time_spent=WORKLOG_DURATION,
            comment=f"Time tracking for {label}",
        )
        self.mutations.add_worklog(child.key, entry)
        if self.mutations.live:
            report.logged += 1
        self._report(
            report, ItemOutcome(label, child.key, updated, f"Added new worklog: {WORKLOG_DURATION}")
        )
        return True


def sync(config: dict, today: date, execute: bool) -> CompletionReport:
    client = JiraClient(config)
    mutations = get_mutations(client, dry_run=not execute)
    report = CompletionSynchronizer(client, mutations, config, today).run()

    print()
    if execute:
        print(
            f"[*] Done. Transitioned {report.transitioned}, logged {report.logged}, "
            f"skipped {report.skipped}."
        )
    else:
        print("[DRY-RUN] This was a dry run - no tickets were updated.")
        print("Run with --execute to apply changes.")
    return report


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


# ============================================================================
# CLI
# ============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Transition past time tracking tickets to Done and log 8h",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Dry-run (default) - shows what would happen
    python update_time_tracking_tickets.py

    # Execute - actually updates tickets
    python update_time_tracking_tickets.py --execute
        """,
    )
    parser.add_argument(
        "--execute", action="store_true", help="Actually update tickets (default: dry-run)"
    )
    parser.add_argument(
        "--dry-run",
        type=parse_bool,
        default=True,
        metavar="true|false",
        help="Same as --execute when false (default: true)",
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
        today = date.fromisoformat(args.date) if args.date else date.today()
    except ValueError:
        print(f"Error: Invalid date '{args.date}'")
        return 1

    config = load_config_safe()
    if config is None:
        return 1

    execute = args.execute or not args.dry_run
    try:
        sync(config, today, execute)
    except ApiError as e:
        print(f"[!] ERROR: {e}")
        if e.body:
            print(f"    {e.body[:500]}")
        return 1
    return 0


if __name__ == "__main__":
    exit(main())
