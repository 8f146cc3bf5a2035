"""
Date helpers for scheduling and recurrence arithmetic.
"""
import calendar
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

from app.exceptions import ValidationError

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Default time of day for tasks generated from recommendations
DEFAULT_TASK_TIME = time(9, 0)


def start_of_day(moment: datetime) -> datetime:
    """Midnight at the start of the given moment's calendar day."""
    return datetime.combine(moment.date(), time.min)


def day_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """
    Get the half-open interval [00:00, next day 00:00) containing a moment.
    """
    start = start_of_day(moment)
    return start, start + timedelta(days=1)


def at_time(day: Union[date, datetime], at: time = DEFAULT_TASK_TIME) -> datetime:
    """Combine a calendar day with a time of day."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, at)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Add calendar months, clamping the day to the target month's length
    (Jan 31 + 1 month -> Feb 28/29).

    Args:
        moment: Starting datetime
        months: Number of months to add (may be negative)

    Returns:
        Shifted datetime with the same time of day
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_iso_date(value: Optional[Union[str, date]]) -> Optional[date]:
    """
    Parse a YYYY-MM-DD date.

    Supports:
    - ISO date strings: 2026-02-22
    - ISO datetime strings (the date part is kept)
    - date/datetime objects
    - None / empty string

    Raises:
        ValidationError: if the value is not a valid date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if ISO_DATE_PATTERN.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    else:
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass

    logger.warning(f"Could not parse date: '{text}'")
    raise ValidationError(f"Invalid date: {text}")
