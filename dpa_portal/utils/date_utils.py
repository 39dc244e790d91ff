"""Date manipulation utilities"""

from datetime import date, datetime

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_record_date(value: date | datetime | str | None) -> date | None:
    """
    Normalize a record date to a calendar date.

    Accepts date/datetime objects, ISO dates ("2024-11-05") and ISO
    datetimes ("2024-11-05T00:00:00", trailing "Z" allowed).
    Anything else yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def month_label(day: date) -> str:
    """Short English month name, independent of the process locale"""
    return MONTH_ABBREVIATIONS[day.month - 1]
