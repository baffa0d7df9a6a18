#!/usr/bin/env python3
"""
Command-line script to preview an allocation run.

Usage:
    python -m jobscheduler.scripts.preview_schedule [--planning-date YYYY-MM-DD] [--session FILE] [--excel OUT.xlsx]
    
Options:
    --planning-date YYYY-MM-DD  Planning start date (defaults to today)
    --session FILE              JSON file with "jobs" and "settings" (defaults to demo jobs)
    --excel OUT.xlsx            Also write the grid to an Excel workbook
"""

import sys
import argparse

from jobscheduler.brain.scheduling.preview import run_preview_script
from jobscheduler.config import get_config
from jobscheduler.logging_config import configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Preview the day-by-day job allocation'
    )
    parser.add_argument(
        '--planning-date',
        type=str,
        help='Planning start date (YYYY-MM-DD format, defaults to today)'
    )
    parser.add_argument(
        '--session',
        type=str,
        help='JSON file with "jobs" and "settings"'
    )
    parser.add_argument(
        '--excel',
        type=str,
        help='Write the schedule grid to this .xlsx file'
    )
    
    args = parser.parse_args(argv)
    configure_logging(log_level=get_config().LOG_LEVEL)
    
    try:
        preview_results = run_preview_script(
            planning_date_str=args.planning_date,
            session_file=args.session,
            excel_path=args.excel,
        )
    except Exception as e:
        print(f"\nFatal error: {e}", file=sys.stderr)
        return 1
    
    warnings = preview_results['result'].warnings
    if warnings:
        print(f"{len(warnings)} job(s) only partially scheduled", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
