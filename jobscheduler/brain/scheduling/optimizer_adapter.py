"""
Translation between the scheduling models and the optimizer's JSON shape.
"""
import copy
from typing import Any, Dict, List, Optional

from jobscheduler.ai import OptimizerError
from jobscheduler.brain.scheduling.models import Job, ScheduleSettings, Segment
from jobscheduler.datetime_utils import DateLike, format_iso_date, is_weekday, next_weekday, parse_iso_date


def _normalized_date(value: Optional[str]) -> Optional[str]:
    parsed = parse_iso_date(value)
    if parsed is None:
        return None
    return format_iso_date(next_weekday(parsed))


def to_optimizer_input(jobs: List[Job], settings: ScheduleSettings, current_date: DateLike) -> Dict[str, Any]:
    """
    Serialize jobs and capacity settings for the optimizer.
    
    Preferred start dates are snapped to weekdays and weekend overrides
    are dropped, so the optimizer only ever sees weekday dates.
    
    Args:
        jobs: Current jobs
        settings: Capacity configuration
        current_date: Planning start date
        
    Returns:
        dict: {"jobs": [...], "resources": {...}, "currentDate": "YYYY-MM-DD"}
    """
    parsed_current = parse_iso_date(current_date)
    settings_dict = settings.to_dict()
    
    return {
        'jobs': [
            {
                'id': job.id,
                'name': job.name,
                'requiredHours': job.required_hours,
                'isUrgent': job.is_urgent,
                'activityType': job.activity_type,
                'activityOther': job.activity_other,
                'quoteNumber': job.quote_number,
                'currentAssignments': [segment.to_dict() for segment in job.scheduled_segments],
                'preferredStartDate': _normalized_date(job.preferred_start_date),
            }
            for job in jobs
        ],
        'resources': {
            'dailyCapacityByDay': settings_dict['dailyCapacityByDay'],
            'capacityOverrides': [
                override for override in settings_dict['capacityOverrides']
                if _normalized_date(override["date"]) == override["date"]
            ],
        },
        'currentDate': format_iso_date(parsed_current) if parsed_current else str(current_date),
    }


def _weekday_segments(raw_segments: Any, job_id: str) -> List[Segment]:
    if raw_segments is None:
        return []
    if not isinstance(raw_segments, list):
        raise OptimizerError(f"scheduledSegments for job {job_id} is not a list")
    
    segments = []
    for raw in raw_segments:
        if not isinstance(raw, dict):
            raise OptimizerError(f"Malformed segment for job {job_id}: {raw!r}")
        try:
            hours = float(raw.get('hours'))
        except (TypeError, ValueError) as exc:
            raise OptimizerError(f"Non-numeric hours for job {job_id}: {raw!r}") from exc
        parsed = parse_iso_date(raw.get('date'))
        if parsed is None or not is_weekday(parsed):
            continue
        segments.append(Segment(date=format_iso_date(parsed), hours=hours))
    return segments


def merge_optimizer_jobs(jobs: List[Job], optimized_jobs: List[Dict[str, Any]]) -> List[Job]:
    """
    Merge the optimizer's job list into the current jobs by id.
    
    For each job the optimizer mentions, scheduled_segments is replaced by
    the returned weekday segments and preferred_start_date moves to the
    first remaining segment's date, falling back to the optimizer's own
    preferredStartDate, else left unchanged. Jobs it does not mention are
    untouched. The whole response is validated before anything is merged.
    
    Args:
        jobs: Current jobs (not modified)
        optimized_jobs: Raw job dicts from the optimizer
        
    Returns:
        list: New job list in the original order
        
    Raises:
        OptimizerError: If any returned job is malformed
    """
    updates: Dict[str, Dict[str, Any]] = {}
    for raw in optimized_jobs:
        if not isinstance(raw, dict) or not raw.get('id'):
            raise OptimizerError(f"Optimizer returned a job without an id: {raw!r}")
        job_id = str(raw['id'])
        updates[job_id] = {
            'segments': _weekday_segments(raw.get('scheduledSegments'), job_id),
            'preferred': _normalized_date(raw.get('preferredStartDate')),
        }
    
    merged = []
    for job in jobs:
        job = copy.deepcopy(job)
        update = updates.get(job.id)
        if update is not None:
            job.scheduled_segments = update['segments']
            if job.scheduled_segments:
                job.preferred_start_date = _normalized_date(job.scheduled_segments[0].date)
            elif update['preferred']:
                job.preferred_start_date = update['preferred']
        merged.append(job)
    return merged
