"""Data models for time tracking tickets."""

from dataclasses import dataclass, field
from datetime import date

from date_utils import started_date


@dataclass
class Issue:
    """A Jira issue as returned by search."""

    key: str
    summary: str
    status: str | None = None


@dataclass
class Transition:
    """A workflow transition available for an issue."""

    id: str
    name: str


@dataclass
class WorkLogEntry:
    """A worklog on a Jira issue."""

    started: str  # yyyy-MM-dd'T'HH:mm:ss.SSSZ
    time_spent: str  # e.g. "8h"
    comment: str = ""

    @property
    def start_date(self) -> date | None:
        return started_date(self.started)


@dataclass
class IssueQuery:
    """Structured issue search, rendered to JQL by payloads.build_jql()."""

    issue_type: str
    project: str | None = None
    summary: str | None = None  # matched with ~ (contains)
    parent: str | None = None
    created_after: date | None = None  # created >= this date
    order_by: str | None = None  # e.g. "key ASC"


@dataclass
class ItemOutcome:
    """Result of processing one issue, printed as one progress line."""

    label: str  # formatted date, or issue key when no date is known
    key: str  # issue key, or DRY-RUN
    outcome: str  # created, exists, updated, skipped, would create, ...
    detail: str = ""

    def line(self) -> str:
        text = f"[{self.label}] [{self.key}] [{self.outcome}]"
        if self.detail:
            text += f" {self.detail}"
        return text


@dataclass
class CreationReport:
    """State tracking for a ticket creation run."""

    parent_key: str | None = None
    working_days: int = 0
    child_keys: list[str] = field(default_factory=list)
    outcomes: list[ItemOutcome] = field(default_factory=list)
    created: int = 0
    existing: int = 0


@dataclass
class CompletionReport:
    """State tracking for a ticket completion run."""

    parent_key: str | None = None
    children: int = 0
    outcomes: list[ItemOutcome] = field(default_factory=list)
    transitioned: int = 0
    logged: int = 0
    skipped: int = 0  # children left unchanged
