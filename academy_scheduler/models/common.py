# File: academy_scheduler/models/common.py

import datetime
from typing import Optional, Union

DateLike = Union[str, datetime.date, None]


def parse_date(value: DateLike) -> Optional[datetime.date]:
    """Parse 'YYYY-MM-DD' (or a full ISO timestamp) into a date. Returns None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value).strip()
    # Backend sometimes sends full timestamps for date fields
    if 'T' in text:
        text = text.split('T')[0]
    try:
        return datetime.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_time(value: Union[str, datetime.time, None]) -> Optional[datetime.time]:
    """Parse 'HH:MM' or 'HH:MM:SS' into a time. Returns None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.time):
        return value
    text = str(value).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


def format_date(value: datetime.date) -> str:
    """Format a date the way the backend stores it."""
    return value.strftime("%Y-%m-%d")


def format_time(value: datetime.time) -> str:
    """Format a time-of-day the way the backend stores it."""
    return value.strftime("%H:%M")


def format_display_date(value: datetime.date) -> str:
    """Human label, e.g. 'Jun 10, 2024'."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"
