"""
Scheduling configuration module.

Fixed parameters for the allocation engine and the job ingestion surface.
"""

from typing import List, Tuple


class SchedulingConfig:
    """
    Configuration for scheduling calculations.
    """
    
    # Monday..Friday, in weekday() order (Monday=0)
    WEEKDAY_KEYS: Tuple[str, ...] = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday')
    
    # Closed set of activity tags; 'Other' carries free-text detail
    ACTIVITY_TYPES: List[str] = ['Cut & Prep', 'Fab', 'Screens', 'Other']
    OTHER_ACTIVITY_TYPE: str = 'Other'
    DEFAULT_ACTIVITY_TYPE: str = 'Fab'
    
    # Iteration bound for one job's allocation loop (~two years of weekdays)
    MAX_SCHEDULING_DAYS: int = 365 * 2
    
    # Remaining hours at or below this count as fully scheduled
    HOURS_TOLERANCE: float = 1e-9
    
    # Display tags assigned round-robin to new jobs
    JOB_COLORS: List[str] = [
        'bg-red-500',
        'bg-orange-500',
        'bg-yellow-400',
        'bg-lime-500',
        'bg-green-600',
        'bg-teal-500',
        'bg-cyan-500',
        'bg-blue-600',
        'bg-indigo-500',
        'bg-purple-600',
        'bg-fuchsia-500',
        'bg-pink-500',
    ]
    
    @classmethod
    def next_job_color(cls, index: int) -> str:
        """
        Get the display colour for the job at the given position.
        
        Args:
            index: Number of jobs that already exist
            
        Returns:
            str: Colour tag from JOB_COLORS, cycling when exhausted
        """
        return cls.JOB_COLORS[index % len(cls.JOB_COLORS)]
    
    @classmethod
    def weekday_key(cls, weekday_index: int) -> str:
        """Map date.weekday() (0..4) to its settings key."""
        return cls.WEEKDAY_KEYS[weekday_index]
