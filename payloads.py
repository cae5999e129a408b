"""JQL queries and Jira request bodies."""

from datetime import date, timedelta

from date_utils import format_date, month_name
from models import IssueQuery

PARENT_TYPE = "Story"
CHILD_TYPE = "Sub-task"
WORKLOG_DURATION = "8h"


def jql_string(value: str) -> str:
    """Quote a value for use in JQL."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_jql(query: IssueQuery) -> str:
    """Render an IssueQuery, e.g.

    project = TT AND summary ~ "Time Tracking March for Jane D" AND type = Story
    """
    clauses = []
    if query.project:
        clauses.append(f"project = {query.project}")
    if query.parent:
        clauses.append(f"parent = {query.parent}")
    if query.summary:
        clauses.append(f"summary ~ {jql_string(query.summary)}")
    if query.created_after:
        clauses.append(f"created >= {jql_string(query.created_after.isoformat())}")
    clauses.append(f"type = {jql_string(query.issue_type)}")

    jql = " AND ".join(clauses)
    if query.order_by:
        jql += f" ORDER BY {query.order_by}"
    return jql


def adf_document(text: str) -> dict:
    """Wrap plain text in an Atlassian Document Format body."""
    return {
        "version": 1,
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }


def adf_text(doc) -> str:
    """Extract plain text from an ADF body (or pass a plain string through)."""
    if not doc:
        return ""
    if isinstance(doc, str):
        return doc
    parts = []
    for block in doc.get("content", []):
        for node in block.get("content", []):
            if node.get("type") == "text":
                parts.append(node.get("text", ""))
    return " ".join(parts)


# ----------------------------------------------------------------------------
# Parent (monthly Story)
# ----------------------------------------------------------------------------


def parent_summary(month: date, identity: str) -> str:
    return f"Time Tracking {month_name(month)} for {identity}"


def parent_created_after(month: date) -> date:
    """First day of the month before month; parents may be created ahead of time."""
    previous = month.replace(day=1) - timedelta(days=1)
    return previous.replace(day=1)


def parent_query(project_key: str, month: date, identity: str) -> IssueQuery:
    # Last year's parent for the same month has the same summary
    return IssueQuery(
        issue_type=PARENT_TYPE,
        project=project_key,
        summary=parent_summary(month, identity),
        created_after=parent_created_after(month),
        order_by="created DESC",
    )


def parent_fields(project_key: str, month: date, identity: str, assignee: str) -> dict:
    return {
        "project": {"key": project_key},
        "summary": parent_summary(month, identity),
        "description": adf_document(
            f"Time tracking tickets for {month_name(month)} {month.year}"
        ),
        "issuetype": {"name": PARENT_TYPE},
        "assignee": {"accountId": assignee},
    }


# ----------------------------------------------------------------------------
# Children (one Sub-task per working day)
# ----------------------------------------------------------------------------


def child_query(parent_key: str, day: date) -> IssueQuery:
    return IssueQuery(issue_type=CHILD_TYPE, parent=parent_key, summary=format_date(day))


def children_query(parent_key: str) -> IssueQuery:
    return IssueQuery(issue_type=CHILD_TYPE, parent=parent_key, order_by="key ASC")


def child_fields(project_key: str, parent_key: str, day: date, assignee: str) -> dict:
    formatted = format_date(day)
    return {
        "project": {"key": project_key},
        "summary": formatted,
        "description": adf_document(f"Time tracking for {formatted}"),
        "issuetype": {"name": CHILD_TYPE},
        "parent": {"key": parent_key},
        "assignee": {"accountId": assignee},
    }
