"""
Allocation engine for weekday job scheduling.

Capacity resolution, job prioritization, greedy hour allocation and the
optimizer payload adapter. These modules work on plain dataclasses and
have no Flask dependencies.
"""

from jobscheduler.brain.scheduling.config import SchedulingConfig
from jobscheduler.brain.scheduling.models import (
    AllocationResult,
    AllocationWarning,
    CapacityOverride,
    DailyAssignment,
    DayData,
    Job,
    ScheduleSettings,
    Segment,
)
from jobscheduler.brain.scheduling.capacity import capacity_for
from jobscheduler.brain.scheduling.prioritizer import prioritize
from jobscheduler.brain.scheduling.allocator import allocate
from jobscheduler.brain.scheduling.optimizer_adapter import (
    merge_optimizer_jobs,
    to_optimizer_input,
)

__all__ = [
    'SchedulingConfig',
    'AllocationResult',
    'AllocationWarning',
    'CapacityOverride',
    'DailyAssignment',
    'DayData',
    'Job',
    'ScheduleSettings',
    'Segment',
    'capacity_for',
    'prioritize',
    'allocate',
    'merge_optimizer_jobs',
    'to_optimizer_input',
]
