"""
Value objects for the allocation engine.

Python attributes are snake_case; to_dict()/from_dict() use the camelCase
keys of the JSON surface consumed by the calendar UI and the optimizer.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jobscheduler.brain.scheduling.config import SchedulingConfig


@dataclass
class Segment:
    """Portion of a job's hours placed on one date."""
    date: str
    hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'hours': self.hours}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Segment':
        return cls(date=str(data.get('date', '')), hours=float(data.get('hours', 0) or 0))


@dataclass
class Job:
    """A unit of shop work with a number of required labor hours."""
    id: str
    name: str
    required_hours: float
    is_urgent: bool = False
    activity_type: str = SchedulingConfig.DEFAULT_ACTIVITY_TYPE
    activity_other: Optional[str] = None
    quote_number: Optional[str] = None
    preferred_start_date: Optional[str] = None
    color: str = SchedulingConfig.JOB_COLORS[0]
    scheduled_segments: List[Segment] = field(default_factory=list)

    @property
    def scheduled_hours(self) -> float:
        return sum(segment.hours for segment in self.scheduled_segments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'requiredHours': self.required_hours,
            'isUrgent': self.is_urgent,
            'activityType': self.activity_type,
            'activityOther': self.activity_other,
            'quoteNumber': self.quote_number,
            'preferredStartDate': self.preferred_start_date,
            'color': self.color,
            'scheduledSegments': [segment.to_dict() for segment in self.scheduled_segments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Job':
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            required_hours=float(data.get('requiredHours', 0) or 0),
            is_urgent=bool(data.get('isUrgent', False)),
            activity_type=data.get('activityType') or SchedulingConfig.DEFAULT_ACTIVITY_TYPE,
            activity_other=data.get('activityOther'),
            quote_number=data.get('quoteNumber'),
            preferred_start_date=data.get('preferredStartDate'),
            color=data.get('color') or SchedulingConfig.JOB_COLORS[0],
            scheduled_segments=[
                Segment.from_dict(s) for s in (data.get('scheduledSegments') or [])
            ],
        )


@dataclass
class CapacityOverride:
    """Date-specific capacity replacing the weekday default."""
    date: str
    hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'hours': self.hours}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CapacityOverride':
        return cls(date=str(data.get('date', '')), hours=float(data.get('hours', 0) or 0))


@dataclass
class ScheduleSettings:
    """Per-weekday default capacity plus date overrides."""
    daily_capacity_by_day: Dict[str, float]
    capacity_overrides: List[CapacityOverride] = field(default_factory=list)

    @classmethod
    def uniform(cls, hours: float, overrides: Optional[List[CapacityOverride]] = None) -> 'ScheduleSettings':
        """Same default hours on every weekday."""
        return cls(
            daily_capacity_by_day={key: float(hours) for key in SchedulingConfig.WEEKDAY_KEYS},
            capacity_overrides=list(overrides or []),
        )

    def override_for(self, date_str: str) -> Optional[float]:
        for override in self.capacity_overrides:
            if override.date == date_str:
                return override.hours
        return None

    def default_for_weekday(self, weekday_index: int) -> float:
        key = SchedulingConfig.weekday_key(weekday_index)
        return float(self.daily_capacity_by_day.get(key, 0) or 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dailyCapacityByDay': {
                key: self.daily_capacity_by_day.get(key, 0.0) for key in SchedulingConfig.WEEKDAY_KEYS
            },
            'capacityOverrides': [override.to_dict() for override in self.capacity_overrides],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduleSettings':
        """
        Build settings from the JSON shape.
        
        Accepts the legacy shape with a single 'dailyCapacityHours' number,
        which is expanded to all five weekdays.
        """
        overrides = [CapacityOverride.from_dict(o) for o in (data.get('capacityOverrides') or [])]
        by_day = data.get('dailyCapacityByDay')
        if by_day is None:
            return cls.uniform(float(data.get('dailyCapacityHours', 0) or 0), overrides)
        return cls(
            daily_capacity_by_day={
                key: float(by_day.get(key, 0) or 0) for key in SchedulingConfig.WEEKDAY_KEYS
            },
            capacity_overrides=overrides,
        )


@dataclass
class DailyAssignment:
    """Snapshot of one job's hours on one date, with display fields copied from the job."""
    date: str
    job_id: str
    job_name: str
    hours_assigned: float
    color: str
    is_urgent: bool
    activity_type: str
    activity_other: Optional[str] = None
    quote_number: Optional[str] = None

    @classmethod
    def from_job(cls, job: Job, date_str: str, hours: float) -> 'DailyAssignment':
        return cls(
            date=date_str,
            job_id=job.id,
            job_name=job.name,
            hours_assigned=hours,
            color=job.color,
            is_urgent=job.is_urgent,
            activity_type=job.activity_type,
            activity_other=job.activity_other,
            quote_number=job.quote_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'jobId': self.job_id,
            'jobName': self.job_name,
            'hoursAssigned': self.hours_assigned,
            'color': self.color,
            'isUrgent': self.is_urgent,
            'activityType': self.activity_type,
            'activityOther': self.activity_other,
            'quoteNumber': self.quote_number,
        }


@dataclass
class DayData:
    """All assignments on one weekday."""
    date: str
    assignments: List[DailyAssignment] = field(default_factory=list)
    total_hours_assigned: float = 0.0

    def add(self, assignment: DailyAssignment) -> None:
        self.assignments.append(assignment)
        self.total_hours_assigned += assignment.hours_assigned

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'assignments': [a.to_dict() for a in self.assignments],
            'totalHoursAssigned': self.total_hours_assigned,
        }


@dataclass
class AllocationWarning:
    """A job that still had hours left when the iteration bound ran out."""
    job_id: str
    job_name: str
    remaining_hours: float
    last_attempted_date: str

    @property
    def message(self) -> str:
        return (
            f"Job {self.job_id} ({self.job_name}) could not be fully scheduled "
            f"({self.remaining_hours:g}h remaining). Last attempted date: {self.last_attempted_date}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'jobId': self.job_id,
            'jobName': self.job_name,
            'remainingHours': self.remaining_hours,
            'lastAttemptedDate': self.last_attempted_date,
            'message': self.message,
        }


@dataclass
class AllocationResult:
    """Output of one allocator run."""
    schedule: Dict[str, DayData]
    jobs: List[Job]
    warnings: List[AllocationWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schedule': {date_str: day.to_dict() for date_str, day in sorted(self.schedule.items())},
            'jobs': [job.to_dict() for job in self.jobs],
            'warnings': [w.to_dict() for w in self.warnings],
        }
