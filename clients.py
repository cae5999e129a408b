"""API client for Jira."""

import logging

import requests

from models import Issue, IssueQuery, Transition, WorkLogEntry
from payloads import adf_document, adf_text, build_jql

logger = logging.getLogger(__name__)

SEARCH_FIELDS = "key,summary,status"
TIMEOUT = 30


class ApiError(Exception):
    """User-friendly API error."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CreationError(ApiError):
    """Jira rejected a new issue (validation or permissions)."""


class StaleTransitionError(ApiError):
    """The transition is no longer valid for the issue's workflow state."""


def _handle_api_error(response: requests.Response, service: str) -> str:
    """Convert HTTP errors to user-friendly messages."""
    status = response.status_code

    messages = {
        400: f"{service}: Bad request. Jira rejected the request payload.",
        401: f"{service}: Authentication failed. Check JIRA_USERNAME and JIRA_API_TOKEN!",
        403: f"{service}: Access denied. Check your project permissions!",
        404: f"{service}: Resource not found. Check JIRA_DOMAIN and JIRA_PROJECT_KEY!",
        429: f"{service}: Too many requests. Wait a moment and try again.",
        500: f"{service}: Server error. The service may be temporarily unavailable.",
        502: f"{service}: Bad gateway. The service may be temporarily unavailable.",
        503: f"{service}: Service unavailable. Try again later.",
    }

    return messages.get(status, f"{service}: HTTP {status} - {response.reason}")


class JiraClient:
    """Client for Jira REST API."""

    def __init__(self, config: dict):
        jira = config["jira"]
        self.domain = jira["domain"]
        self.base_url = f"https://{self.domain}/rest/api/{jira.get('api_version', '3')}"
        self.username = jira["username"]
        self.token = jira["api_token"]
        self.search_path = jira.get("search_path", "/search")

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        payload: dict | None = None,
        error_cls: type[ApiError] = ApiError,
        error_statuses: tuple[int, ...] = (),
    ):
        """Send an authenticated request and return the decoded JSON body.

        Raises:
            ApiError: on transport failures, a non-2xx response or a non-JSON
                body. Statuses listed in error_statuses raise error_cls instead.
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            r = requests.request(
                method,
                url,
                auth=(self.username, self.token),
                headers={"Accept": "application/json", "Content-Type": "application/json"},
                params=params,
                json=payload,
                timeout=TIMEOUT,
            )
        except requests.exceptions.ConnectionError:
            raise ApiError(f"Jira: Cannot connect to {self.domain}. Check your network!")
        except requests.exceptions.Timeout:
            raise ApiError("Jira: Connection timed out. The server may be slow.")
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Jira: Request failed: {e}")

        logger.debug("%s %s -> %s", method, url, r.status_code)
        if not r.ok:
            cls = error_cls if r.status_code in error_statuses else ApiError
            raise cls(_handle_api_error(r, "Jira"), r.status_code, r.text or None)
        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            raise ApiError(
                f"Jira: Expected JSON but got {r.headers.get('Content-Type') or 'no content type'}. Check JIRA_DOMAIN!",
                r.status_code,
                r.text,
            )

    # ------------------------------------------------------------------------
    # Account / project
    # ------------------------------------------------------------------------

    def get_myself(self) -> dict:
        """Get the current user (accountId, displayName, emailAddress)."""
        return self._request("GET", "/myself")

    def get_project(self, project_key: str) -> dict:
        return self._request("GET", f"/project/{project_key}")

    # ------------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------------

    def search_issues(self, query: IssueQuery, max_results: int = 100) -> list[Issue]:
        """Run a JQL search, requesting only key, summary and status."""
        data = self._request(
            "GET",
            self.search_path,
            params={"jql": build_jql(query), "maxResults": max_results, "fields": SEARCH_FIELDS},
        )
        issues = []
        for raw in (data or {}).get("issues", []):
            fields = raw.get("fields") or {}
            status = fields.get("status")
            issues.append(
                Issue(
                    key=raw["key"],
                    summary=fields.get("summary", ""),
                    status=status.get("name") if isinstance(status, dict) else status,
                )
            )
        return issues

    def find_issue(self, query: IssueQuery) -> str | None:
        """Return the key of the first issue matching query, or None."""
        issues = self.search_issues(query, max_results=1)
        if issues:
            return issues[0].key
        return None

    def create_issue(self, fields: dict) -> str:
        """Create an issue and return its key.

        Raises:
            CreationError: if Jira rejects the fields or the credentials.
        """
        data = self._request(
            "POST",
            "/issue",
            payload={"fields": fields},
            error_cls=CreationError,
            error_statuses=(400, 401, 403),
        )
        return data["key"]

    # ------------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------------

    def get_transitions(self, issue_key: str) -> list[Transition]:
        data = self._request("GET", f"/issue/{issue_key}/transitions")
        return [
            Transition(id=str(t["id"]), name=t.get("name", ""))
            for t in (data or {}).get("transitions", [])
        ]

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        """Apply a transition.

        Raises:
            StaleTransitionError: if the issue already moved to another state.
        """
        self._request(
            "POST",
            f"/issue/{issue_key}/transitions",
            payload={"transition": {"id": transition_id}},
            error_cls=StaleTransitionError,
            error_statuses=(400, 409),
        )

    # ------------------------------------------------------------------------
    # Worklogs
    # ------------------------------------------------------------------------

    def get_worklogs(self, issue_key: str) -> list[WorkLogEntry]:
        data = self._request("GET", f"/issue/{issue_key}/worklog")
        return [
            WorkLogEntry(
                started=wl.get("started", ""),
                time_spent=wl.get("timeSpent", ""),
                comment=adf_text(wl.get("comment")),
            )
            for wl in (data or {}).get("worklogs", [])
        ]

    def add_worklog(self, issue_key: str, entry: WorkLogEntry) -> None:
        self._request(
            "POST",
            f"/issue/{issue_key}/worklog",
            payload={
                "timeSpent": entry.time_spent,
                "started": entry.started,
                "comment": adf_document(entry.comment),
            },
        )
