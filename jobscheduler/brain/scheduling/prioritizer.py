"""
Processing order for the allocator.

Urgent jobs first, then by effective preferred start date (jobs with a
date before jobs without), then by id.
"""
from datetime import date
from typing import List, Optional, Tuple

from jobscheduler.brain.scheduling.models import Job
from jobscheduler.datetime_utils import next_weekday, parse_iso_date


def effective_preferred_date(job: Job) -> Optional[date]:
    """
    The job's preferred start date snapped forward to a weekday.
    
    Returns:
        date, or None when the job has no (parsable) preference
    """
    preferred = parse_iso_date(job.preferred_start_date)
    if preferred is None:
        return None
    return next_weekday(preferred)


def priority_key(job: Job) -> Tuple[bool, bool, date, str]:
    """Sort key implementing urgency → preferred date → id."""
    preferred = effective_preferred_date(job)
    return (
        not job.is_urgent,
        preferred is None,
        preferred or date.max,
        job.id,
    )


def prioritize(jobs: List[Job]) -> List[Job]:
    """
    Return the jobs in allocation order.
    
    The input list is not reordered; a new list holding the same job
    objects is returned.
    """
    return sorted(jobs, key=priority_key)
