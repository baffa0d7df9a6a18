"""
Date utility functions for weekday-only scheduling.

All scheduling dates cross module boundaries as ISO strings (YYYY-MM-DD);
these helpers parse, normalize and step through them.
"""
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union

from jobscheduler.logging_config import get_logger

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"

DateLike = Union[date, datetime, str, None]


def parse_iso_date(value: DateLike) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string (or date/datetime) into a date.
    
    Args:
        value: date, datetime, ISO date string, or None
        
    Returns:
        date, or None if the value is missing or unparsable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except (ValueError, TypeError):
        return None


def format_iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


def is_weekday(value: date) -> bool:
    """Monday through Friday (Monday=0, Sunday=6)."""
    return value.weekday() < 5


def next_weekday(value: date) -> date:
    """Return the following Monday for a weekend date, otherwise the date unchanged."""
    if isinstance(value, datetime):
        value = value.date()
    weekday = value.weekday()
    if weekday >= 5:
        return value + timedelta(days=7 - weekday)
    return value


def step_to_next_calendar_day(value: date) -> date:
    """Return the next calendar day. May land on a weekend."""
    return value + timedelta(days=1)


def add_business_days(start_date: date, business_days: int) -> date:
    """
    Calculate the date that is a specified number of business days after the start date.
    
    Args:
        start_date: The start date (date or datetime object)
        business_days: Number of business days to add
    
    Returns:
        date: The calculated date that is business_days after start_date
    """
    if isinstance(start_date, datetime):
        current_date = start_date.date()
    else:
        current_date = start_date
    
    days_forward = 0
    business_days_counted = 0
    
    while business_days_counted < business_days:
        days_forward += 1
        if is_weekday(current_date + timedelta(days=days_forward)):
            business_days_counted += 1
    
    return current_date + timedelta(days=days_forward)


def resolve_date_or_today(value: DateLike, today: Optional[date] = None) -> date:
    """
    Parse a caller-supplied date and snap it to a weekday.
    
    Unparsable input falls back to today (also snapped to a weekday)
    and is logged as a warning.
    
    Args:
        value: date, datetime, ISO date string, or None
        today: Override for the current date (defaults to date.today())
        
    Returns:
        date: A weekday
    """
    parsed = parse_iso_date(value)
    if parsed is None:
        fallback = today or date.today()
        logger.warning(
            "Invalid date, falling back to today",
            value=str(value),
            fallback=format_iso_date(next_weekday(fallback)),
        )
        parsed = fallback
    return next_weekday(parsed)


class WeekdayRange:
    """
    Lazy, finite, restartable sequence of weekday ISO date strings.
    
    Starts at next_weekday(start) and emits exactly num_weekdays dates,
    skipping Saturdays and Sundays.
    """
    
    def __init__(self, start: DateLike, num_weekdays: int, today: Optional[date] = None):
        self.start = resolve_date_or_today(start, today=today)
        self.num_weekdays = max(0, int(num_weekdays))
    
    def __iter__(self) -> Iterator[str]:
        current = self.start
        emitted = 0
        while emitted < self.num_weekdays:
            if is_weekday(current):
                yield format_iso_date(current)
                emitted += 1
            current = step_to_next_calendar_day(current)
    
    def __len__(self) -> int:
        return self.num_weekdays
    
    def __repr__(self) -> str:
        return f"WeekdayRange(start={format_iso_date(self.start)!r}, num_weekdays={self.num_weekdays})"


def weekday_range(start: DateLike, num_weekdays: int, today: Optional[date] = None) -> WeekdayRange:
    """Weekday-only date strings beginning at the weekday-normalized start."""
    return WeekdayRange(start, num_weekdays, today=today)
