"""
Capacity resolution for a single date.
"""
from datetime import date
from typing import Union

from jobscheduler.brain.scheduling.models import ScheduleSettings
from jobscheduler.datetime_utils import format_iso_date, is_weekday, parse_iso_date


def capacity_for(target_date: Union[date, str], settings: ScheduleSettings) -> float:
    """
    Effective labor-hour capacity for a date.
    
    Resolution order:
    - invalid date or weekend → 0
    - capacity override for the date → override hours (even 0)
    - otherwise → the configured default for that weekday
    
    Args:
        target_date: date or YYYY-MM-DD string
        settings: Capacity configuration
        
    Returns:
        float: Hours available on that date (never negative)
    """
    parsed = parse_iso_date(target_date)
    if parsed is None or not is_weekday(parsed):
        return 0.0
    
    override_hours = settings.override_for(format_iso_date(parsed))
    if override_hours is not None:
        return max(0.0, float(override_hours))
    
    return max(0.0, settings.default_for_weekday(parsed.weekday()))
