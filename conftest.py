"""Shared fixtures: an in-memory Jira standing in for JiraClient."""

from datetime import date

import pytest

from models import Issue, IssueQuery, Transition, WorkLogEntry


class FakeJira:
    """Deterministic search-before-create collaborator.

    Implements the JiraClient methods used by the synchronizers against a
    dict of issues. Every call is recorded in `calls`.
    """

    def __init__(self, project_key: str = "TT"):
        self.project_key = project_key
        self.issues: dict[str, dict] = {}
        self.worklogs: dict[str, list[WorkLogEntry]] = {}
        self.calls: list[tuple] = []
        self._next_id = 1
        # Creation date stamped on new issues
        self.today = date(2024, 3, 1)

    # Test helpers ------------------------------------------------------------

    def add_issue(self, summary, issue_type, parent=None, status="To Do", created=None) -> str:
        key = f"{self.project_key}-{self._next_id}"
        self._next_id += 1
        self.issues[key] = {
            "summary": summary,
            "type": issue_type,
            "parent": parent,
            "project": self.project_key,
            "status": status,
            "created": created or self.today,
        }
        self.worklogs[key] = []
        return key

    def mutations(self) -> list[tuple]:
        names = ("create_issue", "transition_issue", "add_worklog")
        return [c for c in self.calls if c[0] in names]

    def children_of(self, parent_key: str) -> list[str]:
        return [k for k, i in self.issues.items() if i["parent"] == parent_key]

    # JiraClient interface ----------------------------------------------------

    def search_issues(self, query: IssueQuery, max_results: int = 100) -> list[Issue]:
        self.calls.append(("search_issues", query))
        found = []
        for key, issue in self.issues.items():
            if issue["type"] != query.issue_type:
                continue
            if query.project and issue["project"] != query.project:
                continue
            if query.parent and issue["parent"] != query.parent:
                continue
            if query.summary and query.summary not in issue["summary"]:
                continue
            if query.created_after and issue["created"] < query.created_after:
                continue
            found.append(Issue(key=key, summary=issue["summary"], status=issue["status"]))
        found.sort(key=lambda i: int(i.key.split("-")[1]))
        return found[:max_results]

    def find_issue(self, query: IssueQuery) -> str | None:
        issues = self.search_issues(query, max_results=1)
        return issues[0].key if issues else None

    def create_issue(self, fields: dict) -> str:
        self.calls.append(("create_issue", fields))
        parent = fields.get("parent", {}).get("key")
        return self.add_issue(fields["summary"], fields["issuetype"]["name"], parent=parent)

    def get_transitions(self, issue_key: str) -> list[Transition]:
        self.calls.append(("get_transitions", issue_key))
        if self.issues[issue_key]["status"] == "Done":
            return [Transition(id="11", name="Reopen")]
        return [Transition(id="21", name="In Progress"), Transition(id="31", name="Done")]

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        self.calls.append(("transition_issue", issue_key, transition_id))
        if transition_id == "31":
            self.issues[issue_key]["status"] = "Done"

    def get_worklogs(self, issue_key: str) -> list[WorkLogEntry]:
        self.calls.append(("get_worklogs", issue_key))
        return list(self.worklogs[issue_key])

    def add_worklog(self, issue_key: str, entry: WorkLogEntry) -> None:
        self.calls.append(("add_worklog", issue_key, entry))
        self.worklogs[issue_key].append(entry)


@pytest.fixture
def config():
    return {
        "jira": {
            "domain": "acme.atlassian.net",
            "username": "jane@example.com",
            "api_token": "secret-token",
            "api_version": "3",
            "search_path": "/search",
        },
        "tracking": {
            "project_key": "TT",
            "assignee": "557058:abc",
            "identity": "Jane D",
            "done_transition": "Done",
        },
    }


@pytest.fixture
def fake_jira():
    return FakeJira()
