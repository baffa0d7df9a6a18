"""
Demo data for a fresh scheduling session.
"""
from datetime import date
from typing import List, Optional

from jobscheduler.brain.scheduling.models import Job, ScheduleSettings
from jobscheduler.datetime_utils import add_business_days, format_iso_date


def default_settings(daily_capacity: float = 8.0) -> ScheduleSettings:
    """Uniform weekday capacity with no overrides."""
    return ScheduleSettings.uniform(daily_capacity)


def demo_jobs(today: Optional[date] = None) -> List[Job]:
    """Three sample shop orders starting today and the next business day, one of them urgent."""
    today = today or date.today()
    return [
        Job(
            id='job-1',
            name='Order #001 - Alpha Parts',
            required_hours=16,
            is_urgent=False,
            activity_type='Cut & Prep',
            color='bg-sky-500',
            preferred_start_date=format_iso_date(today),
        ),
        Job(
            id='job-2',
            name='Order #002 - Beta Assembly',
            required_hours=8,
            is_urgent=True,
            activity_type='Fab',
            color='bg-rose-500',
            preferred_start_date=format_iso_date(today),
        ),
        Job(
            id='job-3',
            name='Order #003 - Gamma Components',
            required_hours=24,
            is_urgent=False,
            activity_type='Screens',
            color='bg-emerald-500',
            preferred_start_date=format_iso_date(add_business_days(today, 1)),
        ),
    ]
