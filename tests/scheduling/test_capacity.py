"""
Tests for capacity resolution (weekday defaults and date overrides).
"""
from datetime import date

from jobscheduler.brain.scheduling.capacity import capacity_for
from jobscheduler.brain.scheduling.models import CapacityOverride, ScheduleSettings


def make_settings(overrides=None):
    return ScheduleSettings(
        daily_capacity_by_day={
            'monday': 8, 'tuesday': 7, 'wednesday': 6, 'thursday': 5, 'friday': 4,
        },
        capacity_overrides=overrides or [],
    )


class TestCapacityFor:
    """Tests for capacity_for."""

    def test_weekday_defaults_map_monday_to_friday(self):
        """Test that each weekday returns its configured default."""
        settings = make_settings()
        assert capacity_for('2024-01-01', settings) == 8
        assert capacity_for('2024-01-02', settings) == 7
        assert capacity_for('2024-01-03', settings) == 6
        assert capacity_for('2024-01-04', settings) == 5
        assert capacity_for('2024-01-05', settings) == 4

    def test_weekends_have_zero_capacity(self):
        """Test that Saturday and Sunday carry no capacity."""
        settings = make_settings()
        assert capacity_for('2024-01-06', settings) == 0
        assert capacity_for('2024-01-07', settings) == 0

    def test_invalid_date_has_zero_capacity(self):
        """Test that malformed dates carry no capacity."""
        assert capacity_for('2024-13-45', make_settings()) == 0
        assert capacity_for(None, make_settings()) == 0

    def test_override_replaces_default(self):
        """Test that an override wins over the weekday default."""
        settings = make_settings([CapacityOverride(date='2024-01-03', hours=12)])
        assert capacity_for('2024-01-03', settings) == 12
        assert capacity_for('2024-01-10', settings) == 6

    def test_zero_override_is_authoritative(self):
        """Test that an override of 0 closes the day."""
        settings = make_settings([CapacityOverride(date='2024-01-01', hours=0)])
        assert capacity_for('2024-01-01', settings) == 0

    def test_weekend_override_is_ignored(self):
        """Test that a weekend override still yields zero capacity."""
        settings = make_settings([CapacityOverride(date='2024-01-06', hours=8)])
        assert capacity_for('2024-01-06', settings) == 0

    def test_accepts_date_objects(self):
        """Test that date objects resolve like strings."""
        assert capacity_for(date(2024, 1, 1), make_settings()) == 8
