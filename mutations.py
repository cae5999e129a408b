"""Mutation executors: the only code paths that change state in Jira.

The synchronizers never call create/transition/add-worklog on the client
directly. They go through LiveMutations, or DryRunMutations for a dry run.
"""

from clients import JiraClient
from models import WorkLogEntry

PLACEHOLDER_KEY = "DRY-RUN"


class LiveMutations:
    """Forwards every mutation to Jira."""

    live = True

    def __init__(self, client: JiraClient):
        self.client = client

    def create_issue(self, fields: dict) -> str:
        return self.client.create_issue(fields)

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        self.client.transition_issue(issue_key, transition_id)

    def add_worklog(self, issue_key: str, entry: WorkLogEntry) -> None:
        self.client.add_worklog(issue_key, entry)


class DryRunMutations:
    """Records what would be changed without calling Jira."""

    live = False

    def __init__(self):
        self.skipped: list[tuple[str, str, object]] = []

    def create_issue(self, fields: dict) -> str:
        self.skipped.append(("create_issue", fields.get("summary", ""), fields))
        return PLACEHOLDER_KEY

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        self.skipped.append(("transition_issue", issue_key, transition_id))

    def add_worklog(self, issue_key: str, entry: WorkLogEntry) -> None:
        self.skipped.append(("add_worklog", issue_key, entry))


def get_mutations(client: JiraClient, dry_run: bool):
    if dry_run:
        return DryRunMutations()
    return LiveMutations(client)
