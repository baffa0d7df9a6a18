"""
Service layer for the scheduling board.

Holds the session's jobs, settings and planning date in memory and
re-runs the allocator from scratch after every change. All state changes
and allocation runs are serialized by a reentrant lock.
"""
import copy
import threading
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from jobscheduler.ai import OptimizerResponse, optimize_schedule
from jobscheduler.brain.scheduling.allocator import allocate
from jobscheduler.brain.scheduling.capacity import capacity_for
from jobscheduler.brain.scheduling.config import SchedulingConfig
from jobscheduler.brain.scheduling.models import AllocationResult, Job, ScheduleSettings
from jobscheduler.brain.scheduling.optimizer_adapter import merge_optimizer_jobs, to_optimizer_input
from jobscheduler.brain.scheduling.validation import SchedulingValidator
from jobscheduler.datetime_utils import DateLike, format_iso_date, resolve_date_or_today, weekday_range
from jobscheduler.logging_config import OperationContext, get_logger

logger = get_logger(__name__)

MIN_CONSTRAINTS_LENGTH = 10


class SchedulerService:
    """In-memory scheduling session: jobs, capacity settings, planning date."""
    
    def __init__(
        self,
        settings: Optional[ScheduleSettings] = None,
        jobs: Optional[List[Job]] = None,
        planning_date: DateLike = None,
        display_weekdays: int = 10,
        optimizer_url: str = "http://localhost:11434",
        optimizer_model: str = "mistral",
        optimizer_timeout: float = 60,
        today: Optional[date] = None,
    ):
        self._lock = threading.RLock()
        self._today = today
        self._settings = settings or ScheduleSettings.uniform(8.0)
        self._jobs: List[Job] = list(jobs or [])
        self._planning_date = resolve_date_or_today(planning_date or self._current_day(), today=today)
        self._result: Optional[AllocationResult] = None
        self._optimizing = False
        self.display_weekdays = display_weekdays
        self.optimizer_url = optimizer_url
        self.optimizer_model = optimizer_model
        self.optimizer_timeout = optimizer_timeout
        self.reallocate()
    
    @classmethod
    def from_config(cls, config: Dict[str, Any], jobs: Optional[List[Job]] = None) -> 'SchedulerService':
        """Build a service from a Flask config mapping."""
        return cls(
            settings=ScheduleSettings.uniform(config.get('DEFAULT_DAILY_CAPACITY', 8.0)),
            jobs=jobs,
            display_weekdays=config.get('DISPLAY_WEEKDAYS', 10),
            optimizer_url=config.get('OPTIMIZER_URL', "http://localhost:11434"),
            optimizer_model=config.get('OPTIMIZER_MODEL', "mistral"),
            optimizer_timeout=config.get('OPTIMIZER_TIMEOUT', 60),
        )
    
    def _current_day(self) -> date:
        return self._today or date.today()
    
    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    
    @property
    def jobs(self) -> List[Job]:
        """Copies of the jobs; edit them through the service methods."""
        with self._lock:
            return copy.deepcopy(self._jobs)
    
    @property
    def settings(self) -> ScheduleSettings:
        with self._lock:
            return copy.deepcopy(self._settings)
    
    @property
    def planning_date(self) -> str:
        with self._lock:
            return format_iso_date(self._planning_date)
    
    @property
    def result(self) -> AllocationResult:
        with self._lock:
            return copy.deepcopy(self._result)
    
    def get_job(self, job_id: str) -> Job:
        with self._lock:
            return copy.deepcopy(self._find_job(job_id))
    
    def _find_job(self, job_id: str) -> Job:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise KeyError(job_id)
    
    def visible_dates(self) -> List[str]:
        with self._lock:
            return list(weekday_range(self._planning_date, self.display_weekdays))
    
    def snapshot(self) -> Dict[str, Any]:
        """
        Everything the calendar needs to render.
        
        Returns:
            dict with jobs, settings, planningDate, dates, days (one entry
            per visible date with capacity/remaining hours) and warnings
        """
        with self._lock:
            days = []
            for date_str in self.visible_dates():
                day = self._result.schedule.get(date_str)
                capacity = capacity_for(date_str, self._settings)
                assigned = day.total_hours_assigned if day else 0.0
                days.append({
                    'date': date_str,
                    'capacity': capacity,
                    'totalHoursAssigned': assigned,
                    'remainingHours': max(0.0, capacity - assigned),
                    'assignments': [a.to_dict() for a in day.assignments] if day else [],
                })
            return {
                'planningDate': self.planning_date,
                'dates': [d['date'] for d in days],
                'days': days,
                'jobs': [job.to_dict() for job in self._jobs],
                'settings': self._settings.to_dict(),
                'warnings': [w.to_dict() for w in self._result.warnings],
            }
    
    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    
    def reallocate(self) -> AllocationResult:
        """Recompute the whole schedule and every job's segments."""
        with self._lock:
            result = allocate(self._jobs, self._settings, self._planning_date, today=self._today)
            by_id = {job.id: job for job in result.jobs}
            self._jobs = [by_id[job.id] for job in self._jobs]
            self._result = result
            return result
    
    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------
    
    def add_job(self, data: Dict[str, Any]) -> Tuple[Job, List[str]]:
        """
        Create a job from a form payload and reallocate.
        
        Returns:
            (job, notices)
            
        Raises:
            ValueError: If the payload is invalid
        """
        is_valid, fields, error, notices = SchedulingValidator.validate_job(data)
        if not is_valid:
            raise ValueError(error)
        
        with self._lock:
            fields.setdefault('color', SchedulingConfig.next_job_color(len(self._jobs)))
            job = Job(id=f"job-{uuid.uuid4().hex[:8]}", **fields)
            self._jobs.append(job)
            self.reallocate()
            logger.info("Job added", job_id=job.id, job_name=job.name, required_hours=job.required_hours)
            return self.get_job(job.id), notices
    
    def update_job(self, job_id: str, data: Dict[str, Any]) -> Tuple[Job, List[str]]:
        """
        Apply edited fields to an existing job and reallocate.
        
        Fields missing from data keep their current values.
        
        Raises:
            KeyError: Unknown job id
            ValueError: If the merged job is invalid
        """
        with self._lock:
            existing = self._find_job(job_id)
            merged = {**existing.to_dict(), **(data or {})}
            is_valid, fields, error, notices = SchedulingValidator.validate_job(merged)
            if not is_valid:
                raise ValueError(error)
            
            fields.setdefault('color', existing.color)
            updated = Job(id=existing.id, **fields)
            self._jobs = [updated if job.id == job_id else job for job in self._jobs]
            self.reallocate()
            logger.info("Job updated", job_id=job_id, job_name=updated.name)
            return self.get_job(job_id), notices
    
    def delete_job(self, job_id: str) -> None:
        with self._lock:
            self._find_job(job_id)
            self._jobs = [job for job in self._jobs if job.id != job_id]
            self.reallocate()
            logger.info("Job deleted", job_id=job_id)
    
    def move_job(self, job_id: str, target_date: str) -> Tuple[Job, Optional[str]]:
        """
        Drag-and-drop reschedule: the drop date becomes the preferred start.
        
        Weekend targets are moved to the following Monday.
        
        Returns:
            (job, notice)
            
        Raises:
            KeyError: Unknown job id
            ValueError: If target_date is missing or unparsable
        """
        is_valid, normalized, error = SchedulingValidator.validate_date(target_date, 'date')
        if not is_valid:
            raise ValueError(error)
        if not normalized:
            raise ValueError("date is required")
        normalized, notice = SchedulingValidator.snap_to_weekday(normalized)
        
        with self._lock:
            job = self._find_job(job_id)
            job.preferred_start_date = normalized
            self.reallocate()
            logger.info("Job moved", job_id=job_id, preferred_start_date=normalized)
            return self.get_job(job_id), notice
    
    # ------------------------------------------------------------------
    # Settings and planning window
    # ------------------------------------------------------------------
    
    def update_settings(self, data: Dict[str, Any]) -> ScheduleSettings:
        """
        Replace capacity settings and reallocate.
        
        Raises:
            ValueError: If the payload is invalid
        """
        is_valid, settings, error = SchedulingValidator.validate_settings(data)
        if not is_valid:
            raise ValueError(error)
        with self._lock:
            self._settings = settings
            self.reallocate()
            logger.info(
                "Settings updated",
                daily_capacity_by_day=settings.daily_capacity_by_day,
                overrides=len(settings.capacity_overrides),
            )
            return copy.deepcopy(settings)
    
    def set_planning_date(self, value: DateLike) -> str:
        """Set the planning start date (weekday-normalized, invalid → today) and reallocate."""
        with self._lock:
            self._planning_date = resolve_date_or_today(value, today=self._today)
            self.reallocate()
            return self.planning_date
    
    def shift_planning_date(self, days: int) -> str:
        """Move the planning window by a number of calendar days (±7 for next/previous week)."""
        with self._lock:
            return self.set_planning_date(self._planning_date + timedelta(days=int(days)))
    
    # ------------------------------------------------------------------
    # Optimizer
    # ------------------------------------------------------------------
    
    def optimizer_payload(self) -> Dict[str, Any]:
        with self._lock:
            return to_optimizer_input(self._jobs, self._settings, self._planning_date)
    
    def apply_optimizer_result(self, optimized_jobs: List[Dict[str, Any]]) -> AllocationResult:
        """
        Merge an optimizer job list and reallocate.
        
        Optimizer segments are treated as preferred-start hints: the
        allocator pass that follows recomputes every segment against
        capacity.
        
        Raises:
            OptimizerError: If the job list is malformed (nothing is merged)
        """
        with self._lock:
            self._jobs = merge_optimizer_jobs(self._jobs, optimized_jobs)
            return self.reallocate()
    
    def optimize(self, constraints: str) -> OptimizerResponse:
        """
        Run the external optimizer with free-text constraints.
        
        The request is made without holding the state lock; only one
        request may be in flight at a time.
        
        Raises:
            ValueError: Constraints not text or too short
            RuntimeError: Another optimization is in progress
            OptimizerError: The call failed; state is left unchanged
        """
        if constraints is not None and not isinstance(constraints, str):
            raise ValueError("constraints must be text")
        constraints = (constraints or '').strip()
        if len(constraints) < MIN_CONSTRAINTS_LENGTH:
            raise ValueError("Please provide some optimization constraints.")
        
        with self._lock:
            if self._optimizing:
                raise RuntimeError("Optimization already in progress")
            self._optimizing = True
            payload = self.optimizer_payload()
        
        try:
            with OperationContext("optimize_schedule"):
                response = optimize_schedule(
                    payload,
                    constraints,
                    base_url=self.optimizer_url,
                    model=self.optimizer_model,
                    timeout=self.optimizer_timeout,
                )
                self.apply_optimizer_result(response.jobs)
            logger.info("Optimizer result applied", jobs_returned=len(response.jobs))
            return response
        finally:
            with self._lock:
                self._optimizing = False
