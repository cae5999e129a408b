"""Check Jira connectivity, project access and the configured user."""

import os

from dotenv import load_dotenv

from clients import ApiError, JiraClient
from utils import ENV_FILE, load_config_safe


def print_environment() -> None:
    """Show which variables are set, without revealing secrets."""
    print("[*] Environment check:")
    print(f"    Domain: {os.environ.get('JIRA_DOMAIN') or 'Not set'}")
    print(f"    Project Key: {os.environ.get('JIRA_PROJECT_KEY') or 'Not set'}")
    print(f"    Identity: {os.environ.get('TIME_TRACKING_IDENTITY') or 'Not set'}")
    print(f"    Username is set: {bool(os.environ.get('JIRA_USERNAME'))}")
    print(f"    API Token is set: {bool(os.environ.get('JIRA_API_TOKEN'))}")
    print(f"    Assignee is set: {bool(os.environ.get('JIRA_ASSIGNEE'))}")


def main():
    if os.path.exists(ENV_FILE):
        load_dotenv(ENV_FILE, override=False)
    print_environment()
    print()

    config = load_config_safe()
    if config is None:
        return 1

    client = JiraClient(config)
    project_key = config["tracking"]["project_key"]

    try:
        # Test 1: Project details
        print(f"[*] Fetching project {project_key}...")
        project = client.get_project(project_key)
        print(f"    Name: {project.get('name', '?')}")
        print(f"    Lead: {project.get('lead', {}).get('displayName', '?')}")
        issue_types = [t.get("name") for t in project.get("issueTypes", [])]
        print(f"    Issue types: {', '.join(issue_types) or '?'}")
        for required in ("Story", "Sub-task"):
            if issue_types and required not in issue_types:
                print(f"    [!] Issue type '{required}' is not available in this project")

        # Test 2: Current user
        print()
        print("[*] Fetching current user...")
        myself = client.get_myself()
        print(f"    User: {myself.get('displayName', '?')}")
        print(f"    Email: {myself.get('emailAddress', '?')}")
        print(f"    Account ID: {myself.get('accountId', '?')}")
        if myself.get("accountId") != config["tracking"]["assignee"]:
            print("    Note: JIRA_ASSIGNEE differs from your own account ID")
    except ApiError as e:
        print(f"[!] ERROR: {e}")
        if e.body:
            print(f"    {e.body[:300]}")
        return 1

    print()
    print("[*] Done.")
    return 0


if __name__ == "__main__":
    exit(main())
