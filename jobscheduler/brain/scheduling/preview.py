"""
Preview of an allocation as a date × job grid.

Runs the allocator over jobs/settings loaded from a JSON file (or the demo
seed), prints the grid and optionally writes it to an Excel workbook.
"""
import json
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from jobscheduler.brain.scheduling.allocator import allocate
from jobscheduler.brain.scheduling.capacity import capacity_for
from jobscheduler.brain.scheduling.models import AllocationResult, Job, ScheduleSettings
from jobscheduler.datetime_utils import resolve_date_or_today
from jobscheduler.logging_config import OperationContext, get_logger
from jobscheduler.seed import default_settings, demo_jobs

logger = get_logger(__name__)


def _column_labels(jobs: List[Job]) -> Dict[str, str]:
    """Job id → column label; jobs sharing a name are told apart by id."""
    name_counts = Counter(job.name for job in jobs)
    return {
        job.id: job.name if name_counts[job.name] == 1 else f"{job.name} ({job.id})"
        for job in jobs
    }


def schedule_frame(result: AllocationResult, settings: ScheduleSettings) -> pd.DataFrame:
    """
    Build a grid of assigned hours.
    
    Rows are scheduled dates (ascending), one column per job in
    allocation order, followed by 'Total' and 'Capacity'. Columns are
    labelled with job names; a name used by more than one job gets the
    job id appended.
    
    Args:
        result: Allocator output
        settings: Capacity configuration used for the run
        
    Returns:
        pd.DataFrame indexed by date string
    """
    rows = [
        {'date': assignment.date, 'job_id': assignment.job_id, 'hours': assignment.hours_assigned}
        for day in result.schedule.values()
        for assignment in day.assignments
    ]
    labels = _column_labels(result.jobs)
    job_ids = [job.id for job in result.jobs]
    
    if not rows:
        frame = pd.DataFrame(columns=[labels[job_id] for job_id in job_ids] + ['Total', 'Capacity'])
        frame.index.name = 'date'
        return frame
    
    frame = pd.DataFrame(rows).pivot_table(
        index='date', columns='job_id', values='hours', aggfunc='sum', fill_value=0.0
    )
    frame = frame.reindex(columns=[job_id for job_id in job_ids if job_id in frame.columns])
    frame = frame.rename(columns=labels).sort_index()
    frame['Total'] = frame.sum(axis=1)
    frame['Capacity'] = [capacity_for(date_str, settings) for date_str in frame.index]
    frame.columns.name = None
    return frame


def load_session_file(path: str) -> Tuple[List[Job], ScheduleSettings]:
    """
    Load jobs and settings from a JSON file shaped like
    {"jobs": [...], "settings": {...}} (camelCase keys).
    """
    with open(path, 'r', encoding='utf-8') as fh:
        data: Dict[str, Any] = json.load(fh)
    
    jobs = [Job.from_dict(raw) for raw in data.get('jobs', [])]
    settings_data = data.get('settings')
    settings = ScheduleSettings.from_dict(settings_data) if settings_data else default_settings()
    return jobs, settings


def print_preview(result: AllocationResult, frame: pd.DataFrame, planning_date: str):
    """Print the grid, each job's segments and any allocation warnings."""
    print("\n" + "=" * 80)
    print(f"SCHEDULE PREVIEW - planning from {planning_date}")
    print("=" * 80)
    
    if frame.empty:
        print("\nNothing scheduled.")
    else:
        print()
        print(frame.to_string(float_format=lambda v: f"{v:.2f}"))
    
    print("\n" + "-" * 80)
    for job in result.jobs:
        urgent = " [URGENT]" if job.is_urgent else ""
        print(f"{job.id}: {job.name}{urgent} - {job.scheduled_hours:.2f}/{job.required_hours:.2f}h")
        for segment in job.scheduled_segments:
            print(f"    {segment.date}  {segment.hours:.2f}h")
    
    if result.warnings:
        print("\n" + "-" * 80)
        for warning in result.warnings:
            print(f"WARNING: {warning.message}")
    
    print("\n" + "=" * 80)


def run_preview_script(
    planning_date_str: Optional[str] = None,
    session_file: Optional[str] = None,
    excel_path: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Run the preview from the command line.
    
    Args:
        planning_date_str: Optional ISO date string (YYYY-MM-DD); invalid → today
        session_file: Optional JSON file with jobs and settings; demo data if omitted
        excel_path: Optional .xlsx path to write the grid to
        today: Override for the current date
        
    Returns:
        dict with the allocation result and the grid
    """
    if session_file:
        jobs, settings = load_session_file(session_file)
    else:
        jobs, settings = demo_jobs(today), default_settings()
    
    planning_date = resolve_date_or_today(planning_date_str, today=today)
    result = allocate(jobs, settings, planning_date, today=today)
    frame = schedule_frame(result, settings)
    
    print_preview(result, frame, planning_date.isoformat())
    
    if excel_path:
        with OperationContext("export_schedule"):
            frame.to_excel(excel_path, sheet_name='Schedule', engine='openpyxl')
            logger.info("Preview workbook written", path=excel_path, rows=len(frame))
        print(f"Wrote {excel_path}")
    
    return {'result': result, 'frame': frame}
