from datetime import date

from ..constants import ISSUE_DATE_FORMAT


def fmt_issue_date(value: date | None = None) -> str:
    """Format an issue date the Turkish way, ``DD.MM.YYYY`` (today by default)."""
    return (value or date.today()).strftime(ISSUE_DATE_FORMAT)
