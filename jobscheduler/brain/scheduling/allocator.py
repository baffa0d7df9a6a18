"""
Greedy day-by-day allocation of job hours onto weekday capacity.

Each job, in priority order, is poured into the earliest weekdays from its
effective start date, taking only what earlier jobs left on each day.
Placed segments are never moved to make room for later jobs.
"""
import copy
from datetime import date
from typing import Dict, List, Optional

from jobscheduler.brain.scheduling.capacity import capacity_for
from jobscheduler.brain.scheduling.config import SchedulingConfig
from jobscheduler.brain.scheduling.models import (
    AllocationResult,
    AllocationWarning,
    DailyAssignment,
    DayData,
    Job,
    ScheduleSettings,
    Segment,
)
from jobscheduler.brain.scheduling.prioritizer import prioritize
from jobscheduler.datetime_utils import (
    DateLike,
    format_iso_date,
    next_weekday,
    parse_iso_date,
    resolve_date_or_today,
    step_to_next_calendar_day,
)
from jobscheduler.logging_config import get_logger

logger = get_logger(__name__)


def effective_start_date(job: Job, planning_start_date: date) -> date:
    """
    Date the allocator starts placing a job.
    
    The preferred start date wins when it is on or after the planning
    start date; otherwise the planning start date is used. The result
    is snapped forward to a weekday.
    
    Args:
        job: Job being allocated
        planning_start_date: Weekday the plan begins on
        
    Returns:
        date: A weekday
    """
    start = planning_start_date
    preferred = parse_iso_date(job.preferred_start_date)
    if preferred is not None and preferred >= planning_start_date:
        start = preferred
    return next_weekday(start)


def _allocate_job(
    job: Job,
    settings: ScheduleSettings,
    planning_start_date: date,
    schedule: Dict[str, DayData],
    max_days: int,
) -> Optional[AllocationWarning]:
    tolerance = SchedulingConfig.HOURS_TOLERANCE
    job.scheduled_segments = []
    remaining_hours = float(job.required_hours)
    
    current_date = effective_start_date(job, planning_start_date)
    date_str = format_iso_date(current_date)
    iterations = 0
    
    while remaining_hours > 0 and iterations < max_days:
        iterations += 1
        
        current_date = next_weekday(current_date)
        date_str = format_iso_date(current_date)
        
        day_data = schedule.get(date_str) or DayData(date=date_str)
        available = max(0.0, capacity_for(current_date, settings) - day_data.total_hours_assigned)
        grant = min(remaining_hours, available)
        
        # A grant that finishes the job is always placed, however small
        if grant > tolerance or grant >= remaining_hours:
            job.scheduled_segments.append(Segment(date=date_str, hours=grant))
            day_data.add(DailyAssignment.from_job(job, date_str, grant))
            remaining_hours -= grant
            schedule[date_str] = day_data
            if remaining_hours <= tolerance:
                remaining_hours = 0.0
                break
        
        current_date = step_to_next_calendar_day(current_date)
    
    if remaining_hours > 0:
        warning = AllocationWarning(
            job_id=job.id,
            job_name=job.name,
            remaining_hours=remaining_hours,
            last_attempted_date=date_str,
        )
        logger.warning(
            "Job could not be fully scheduled",
            job_id=job.id,
            job_name=job.name,
            remaining_hours=remaining_hours,
            max_scheduling_days=max_days,
            last_attempted_date=date_str,
        )
        return warning
    return None


def allocate(
    jobs: List[Job],
    settings: ScheduleSettings,
    planning_start_date: DateLike,
    today: Optional[date] = None,
    max_days: Optional[int] = None,
) -> AllocationResult:
    """
    Allocate every job's required hours onto weekday capacity.
    
    The input jobs are not modified; the result carries deep copies with
    their scheduled_segments recomputed. The schedule map is built fresh
    for this call.
    
    Args:
        jobs: Jobs to place
        settings: Capacity configuration
        planning_start_date: Date (or YYYY-MM-DD string) the plan starts on.
            Weekends snap to Monday; unparsable values fall back to today.
        today: Override for the current date (defaults to date.today())
        max_days: Iteration bound per job (defaults to SchedulingConfig.MAX_SCHEDULING_DAYS)
        
    Returns:
        AllocationResult: schedule keyed by ISO date, updated jobs in
        priority order, and warnings for partially scheduled jobs
    """
    if max_days is None:
        max_days = SchedulingConfig.MAX_SCHEDULING_DAYS
    
    planning_date = resolve_date_or_today(planning_start_date, today=today)
    updated_jobs = prioritize(copy.deepcopy(list(jobs)))
    schedule: Dict[str, DayData] = {}
    warnings: List[AllocationWarning] = []
    
    for job in updated_jobs:
        warning = _allocate_job(job, settings, planning_date, schedule, max_days)
        if warning is not None:
            warnings.append(warning)
    
    logger.debug(
        "Allocation complete",
        planning_start_date=format_iso_date(planning_date),
        jobs=len(updated_jobs),
        scheduled_days=len(schedule),
        warnings=len(warnings),
    )
    
    return AllocationResult(schedule=schedule, jobs=updated_jobs, warnings=warnings)
