from __future__ import annotations

import re
from datetime import date, datetime

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_date(value: str | None) -> date | None:
    if not value or not _DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def duration_from_dates(start: date, end: date) -> int:
    """Whole months between two dates, a started month counting as a full one. Never below 1."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day > start.day:
        months += 1
    return max(months, 1)


def duration_from_date_strings(start: str | None, end: str | None) -> int | None:
    """Month override from caller dates, or ``None`` when either date is missing or malformed."""
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return None
    return duration_from_dates(start_date, end_date)
