"""
Tests for ingestion-boundary validation.
"""
from jobscheduler.brain.scheduling.validation import SchedulingValidator


class TestValidateHours:
    """Tests for SchedulingValidator.validate_hours."""

    def test_accepts_numbers_and_numeric_strings(self):
        """Test that numeric input is normalized to float."""
        assert SchedulingValidator.validate_hours('7.5', 'hours') == (True, 7.5, None)

    def test_rejects_negative(self):
        """Test that negative hours are rejected."""
        is_valid, _, error = SchedulingValidator.validate_hours(-1, 'hours')
        assert is_valid is False
        assert 'negative' in error

    def test_zero_rejected_when_positive_required(self):
        """Test that required hours must be above zero."""
        is_valid, _, error = SchedulingValidator.validate_hours(0, 'requiredHours', allow_zero=False)
        assert is_valid is False
        assert error == 'requiredHours must be positive'

    def test_sub_tolerance_hours_rejected_when_positive_required(self):
        """Test that a vanishingly small required-hours value is treated as zero."""
        is_valid, _, error = SchedulingValidator.validate_hours(1e-10, 'requiredHours', allow_zero=False)
        assert is_valid is False
        assert error == 'requiredHours must be positive'
        assert SchedulingValidator.validate_hours(1e-10, 'hours') == (True, 1e-10, None)

    def test_rejects_booleans_and_text(self):
        """Test that non-numbers are rejected."""
        assert SchedulingValidator.validate_hours(True, 'hours')[0] is False
        assert SchedulingValidator.validate_hours('eight', 'hours')[0] is False


class TestValidateJob:
    """Tests for SchedulingValidator.validate_job."""

    def test_valid_job(self):
        """Test that a complete payload produces Job fields."""
        is_valid, fields, error, notices = SchedulingValidator.validate_job({
            'name': '  Stair rails ',
            'requiredHours': 12,
            'isUrgent': True,
            'activityType': 'Fab',
            'quoteNumber': ' Q-100 ',
            'preferredStartDate': '2024-01-03',
        })
        assert is_valid is True
        assert error is None
        assert notices == []
        assert fields['name'] == 'Stair rails'
        assert fields['required_hours'] == 12.0
        assert fields['is_urgent'] is True
        assert fields['quote_number'] == 'Q-100'
        assert fields['preferred_start_date'] == '2024-01-03'
        assert 'color' not in fields

    def test_name_required(self):
        """Test that a blank name is rejected."""
        is_valid, _, error, _ = SchedulingValidator.validate_job({'name': ' ', 'requiredHours': 4})
        assert is_valid is False
        assert error == 'Job name is required'

    def test_unknown_activity_rejected(self):
        """Test that activity types outside the closed set are rejected."""
        is_valid, _, error, _ = SchedulingValidator.validate_job(
            {'name': 'x', 'requiredHours': 4, 'activityType': 'Welding'}
        )
        assert is_valid is False
        assert 'activityType' in error

    def test_other_detail_only_kept_for_other(self):
        """Test that activityOther is dropped unless the type is Other."""
        _, fields, _, _ = SchedulingValidator.validate_job(
            {'name': 'x', 'requiredHours': 4, 'activityType': 'Screens', 'activityOther': 'ignored'}
        )
        assert fields['activity_other'] is None

        _, fields, _, _ = SchedulingValidator.validate_job(
            {'name': 'x', 'requiredHours': 4, 'activityType': 'Other', 'activityOther': ' Powder coat '}
        )
        assert fields['activity_other'] == 'Powder coat'

    def test_weekend_preferred_date_snaps_with_notice(self):
        """Test that a Sunday preference moves to Monday and says so."""
        is_valid, fields, _, notices = SchedulingValidator.validate_job(
            {'name': 'x', 'requiredHours': 4, 'preferredStartDate': '2024-01-07'}
        )
        assert is_valid is True
        assert fields['preferred_start_date'] == '2024-01-08'
        assert len(notices) == 1
        assert '2024-01-08' in notices[0]

    def test_bad_preferred_date_rejected(self):
        """Test that a malformed preferred date is rejected."""
        is_valid, _, error, _ = SchedulingValidator.validate_job(
            {'name': 'x', 'requiredHours': 4, 'preferredStartDate': '01/07/2024'}
        )
        assert is_valid is False
        assert 'YYYY-MM-DD' in error


class TestValidateSettings:
    """Tests for SchedulingValidator.validate_settings."""

    def test_per_weekday_capacities(self):
        """Test that five weekday values are accepted."""
        is_valid, settings, error = SchedulingValidator.validate_settings({
            'dailyCapacityByDay': {'monday': 8, 'tuesday': 8, 'wednesday': 6, 'thursday': 8, 'friday': 4},
        })
        assert is_valid is True
        assert settings.daily_capacity_by_day['wednesday'] == 6
        assert settings.capacity_overrides == []

    def test_legacy_single_capacity(self):
        """Test that dailyCapacityHours expands to every weekday."""
        is_valid, settings, _ = SchedulingValidator.validate_settings({'dailyCapacityHours': 10})
        assert is_valid is True
        assert set(settings.daily_capacity_by_day.values()) == {10.0}

    def test_missing_weekday_rejected(self):
        """Test that all five weekdays are required."""
        is_valid, _, error = SchedulingValidator.validate_settings({
            'dailyCapacityByDay': {'monday': 8, 'tuesday': 8, 'wednesday': 8, 'thursday': 8},
        })
        assert is_valid is False
        assert 'friday' in error

    def test_weekend_override_rejected(self):
        """Test that overrides on Saturday are rejected."""
        is_valid, _, error = SchedulingValidator.validate_settings({
            'dailyCapacityHours': 8,
            'capacityOverrides': [{'date': '2024-01-06', 'hours': 4}],
        })
        assert is_valid is False
        assert 'weekend' in error

    def test_duplicate_override_rejected(self):
        """Test that override dates must be unique."""
        is_valid, _, error = SchedulingValidator.validate_settings({
            'dailyCapacityHours': 8,
            'capacityOverrides': [{'date': '2024-01-03', 'hours': 4}, {'date': '2024-01-03', 'hours': 2}],
        })
        assert is_valid is False
        assert 'Duplicate' in error

    def test_negative_override_rejected(self):
        """Test that override hours cannot be negative."""
        is_valid, _, _ = SchedulingValidator.validate_settings({
            'dailyCapacityHours': 8,
            'capacityOverrides': [{'date': '2024-01-03', 'hours': -2}],
        })
        assert is_valid is False

    def test_overrides_sorted_by_date(self):
        """Test that accepted overrides come back in date order."""
        _, settings, _ = SchedulingValidator.validate_settings({
            'dailyCapacityHours': 8,
            'capacityOverrides': [{'date': '2024-01-05', 'hours': 4}, {'date': '2024-01-02', 'hours': 0}],
        })
        assert [o.date for o in settings.capacity_overrides] == ['2024-01-02', '2024-01-05']
