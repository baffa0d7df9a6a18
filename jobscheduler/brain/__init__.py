"""
Scheduling Brain Module
Flask Blueprint for the job scheduling board.

This module provides routes for managing shop jobs and capacity settings,
viewing the day-by-day allocation, and running the external optimizer.
"""
from flask import Blueprint

brain_bp = Blueprint("brain", __name__)

from jobscheduler.brain.scheduling import routes  # noqa: E402,F401
