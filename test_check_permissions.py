"""Tests for the connectivity check CLI."""

import pytest

import check_permissions
from clients import ApiError


class StubClient:
    project = {
        "name": "Time Tracking",
        "lead": {"displayName": "Jane D"},
        "issueTypes": [{"name": "Story"}, {"name": "Task"}],
    }
    error = None

    def __init__(self, config):
        self.config = config

    def get_project(self, project_key):
        if self.error:
            raise self.error
        return self.project

    def get_myself(self):
        return {"displayName": "Jane D", "emailAddress": "jane@example.com", "accountId": "557058:abc"}


@pytest.fixture
def run(monkeypatch, config):
    monkeypatch.setattr(check_permissions, "ENV_FILE", "does-not-exist.env")
    monkeypatch.setattr(check_permissions, "load_config_safe", lambda: config)
    monkeypatch.setattr(check_permissions, "JiraClient", StubClient)
    monkeypatch.setenv("JIRA_API_TOKEN", "secret-token")
    return check_permissions.main


def test_prints_project_and_user(run, capsys):
    assert run() == 0
    out = capsys.readouterr().out
    assert "Name: Time Tracking" in out
    assert "Account ID: 557058:abc" in out
    assert "Issue type 'Sub-task' is not available" in out
    assert "secret-token" not in out
    assert "JIRA_ASSIGNEE differs" not in out


def test_api_error(run, monkeypatch, capsys):
    monkeypatch.setattr(StubClient, "error", ApiError("Jira: Access denied.", 403, "forbidden"))
    assert run() == 1
    out = capsys.readouterr().out
    assert "[!] ERROR: Jira: Access denied." in out


def test_missing_config(monkeypatch):
    monkeypatch.setattr(check_permissions, "ENV_FILE", "does-not-exist.env")
    monkeypatch.setattr(check_permissions, "load_config_safe", lambda: None)
    assert check_permissions.main() == 1
