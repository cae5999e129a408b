"""Date helpers for time tracking tickets."""

import calendar
from datetime import date, datetime, time, timedelta

from patterns import Patterns

# Fixed English names, summaries must not depend on the system locale
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WORKLOG_START = time(9, 0)
JIRA_TIMESTAMP = "%Y-%m-%dT%H:%M:%S.%f%z"


def format_date(d: date) -> str:
    """Format a date as DD.MM.YYYY."""
    return f"{d.day:02d}.{d.month:02d}.{d.year:04d}"


def parse_date(text: str) -> date | None:
    """Extract the first DD.MM.YYYY date from text.

    Returns:
        The date, or None if text holds no valid calendar date.
    """
    m = Patterns.TICKET_DATE.search(text or "")
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def month_name(d: date) -> str:
    return MONTH_NAMES[d.month - 1]


def get_working_days(reference: date | None = None) -> list[date]:
    """Get all Mon-Fri dates of the month containing reference (default: today)."""
    reference = reference or date.today()
    first = reference.replace(day=1)
    days_in_month = calendar.monthrange(reference.year, reference.month)[1]

    working_days = []
    for offset in range(days_in_month):
        day = first + timedelta(days=offset)
        if day.weekday() < 5:
            working_days.append(day)
    return working_days


def worklog_started(d: date) -> str:
    """Jira 'started' timestamp for a worklog on the given date.

    Uses 09:00 in the local timezone with an explicit offset,
    e.g. 2024-03-05T09:00:00.000+0100.
    """
    started = datetime.combine(d, WORKLOG_START).astimezone()
    return started.strftime("%Y-%m-%dT%H:%M:%S.000%z")


def started_date(started: str) -> date | None:
    """Calendar date (local time) of a Jira 'started' timestamp."""
    if not started:
        return None
    try:
        return datetime.strptime(started, JIRA_TIMESTAMP).astimezone().date()
    except ValueError:
        pass
    # Fall back to the date prefix: 2024-03-05T...
    try:
        return date.fromisoformat(started[:10])
    except ValueError:
        return None
