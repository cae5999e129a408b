"""Centralized regex patterns for time tracking tickets."""

import re


class Patterns:
    """Regex patterns used throughout the ticket sync."""

    # Child ticket summary: 05.03.2024
    TICKET_DATE = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})")

    # Jira project key: ABC, MY_PROJ
    PROJECT_KEY = re.compile(r"^[A-Z][A-Z0-9_]+$")

    # CLI reference date: YYYY-MM-DD
    DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")
