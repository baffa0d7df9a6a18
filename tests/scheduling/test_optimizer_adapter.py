"""
Tests for the optimizer payload adapter (outbound serialization and inbound merge).
"""
import pytest

from jobscheduler.ai import OptimizerError
from jobscheduler.brain.scheduling.models import CapacityOverride, Job, ScheduleSettings, Segment
from jobscheduler.brain.scheduling.optimizer_adapter import merge_optimizer_jobs, to_optimizer_input


@pytest.fixture
def jobs():
    return [
        Job(
            id='job-1', name='Alpha', required_hours=16, is_urgent=True,
            activity_type='Other', activity_other='Galvanize', quote_number='Q-1',
            preferred_start_date='2024-01-06',
            scheduled_segments=[Segment(date='2024-01-08', hours=8), Segment(date='2024-01-09', hours=8)],
        ),
        Job(id='job-2', name='Beta', required_hours=8, preferred_start_date='2024-01-02'),
        Job(id='job-3', name='Gamma', required_hours=4),
    ]


@pytest.fixture
def settings():
    return ScheduleSettings.uniform(8, [
        CapacityOverride(date='2024-01-03', hours=4),
        CapacityOverride(date='2024-01-06', hours=8),
    ])


class TestToOptimizerInput:
    """Tests for to_optimizer_input."""

    def test_serializes_job_fields(self, jobs, settings):
        """Test that each job carries id, hours, urgency, activity and segments."""
        payload = to_optimizer_input(jobs, settings, '2024-01-01')
        first = payload['jobs'][0]

        assert first['id'] == 'job-1'
        assert first['name'] == 'Alpha'
        assert first['requiredHours'] == 16
        assert first['isUrgent'] is True
        assert first['activityType'] == 'Other'
        assert first['activityOther'] == 'Galvanize'
        assert first['quoteNumber'] == 'Q-1'
        assert first['currentAssignments'] == [
            {'date': '2024-01-08', 'hours': 8},
            {'date': '2024-01-09', 'hours': 8},
        ]

    def test_preferred_dates_are_weekday_normalized(self, jobs, settings):
        """Test that a Saturday preference is sent as Monday."""
        payload = to_optimizer_input(jobs, settings, '2024-01-01')
        assert payload['jobs'][0]['preferredStartDate'] == '2024-01-08'
        assert payload['jobs'][1]['preferredStartDate'] == '2024-01-02'
        assert payload['jobs'][2]['preferredStartDate'] is None

    def test_weekend_overrides_are_dropped(self, jobs, settings):
        """Test that only weekday overrides reach the optimizer."""
        payload = to_optimizer_input(jobs, settings, '2024-01-01')
        assert payload['resources']['capacityOverrides'] == [{'date': '2024-01-03', 'hours': 4}]
        assert payload['resources']['dailyCapacityByDay']['friday'] == 8
        assert payload['currentDate'] == '2024-01-01'


class TestMergeOptimizerJobs:
    """Tests for merge_optimizer_jobs."""

    def test_replaces_segments_and_moves_preferred_date(self, jobs):
        """Test that returned segments replace the job's and set its preferred start."""
        merged = merge_optimizer_jobs(jobs, [
            {'id': 'job-2', 'scheduledSegments': [{'date': '2024-01-04', 'hours': 5}, {'date': '2024-01-05', 'hours': 3}]},
        ])
        job = merged[1]

        assert [(s.date, s.hours) for s in job.scheduled_segments] == [('2024-01-04', 5), ('2024-01-05', 3)]
        assert job.preferred_start_date == '2024-01-04'

    def test_weekend_segments_are_filtered(self, jobs):
        """Test that segments on weekends are dropped before choosing the start date."""
        merged = merge_optimizer_jobs(jobs, [
            {'id': 'job-3', 'scheduledSegments': [{'date': '2024-01-06', 'hours': 4}, {'date': '2024-01-09', 'hours': 4}]},
        ])
        assert [s.date for s in merged[2].scheduled_segments] == ['2024-01-09']
        assert merged[2].preferred_start_date == '2024-01-09'

    def test_falls_back_to_suggested_preferred_date(self, jobs):
        """Test that with no usable segments the optimizer's preferred date is used."""
        merged = merge_optimizer_jobs(jobs, [
            {'id': 'job-3', 'scheduledSegments': [{'date': '2024-01-07', 'hours': 4}], 'preferredStartDate': '2024-01-13'},
        ])
        assert merged[2].scheduled_segments == []
        assert merged[2].preferred_start_date == '2024-01-15'

    def test_keeps_preferred_date_without_hint(self, jobs):
        """Test that the preferred date is unchanged when nothing usable comes back."""
        merged = merge_optimizer_jobs(jobs, [{'id': 'job-2', 'scheduledSegments': []}])
        assert merged[1].preferred_start_date == '2024-01-02'

    def test_unmentioned_jobs_untouched(self, jobs):
        """Test that jobs missing from the response keep their state."""
        merged = merge_optimizer_jobs(jobs, [{'id': 'job-2', 'scheduledSegments': []}])
        assert merged[0] == jobs[0]
        assert merged[2] == jobs[2]

    def test_unknown_ids_are_ignored(self, jobs):
        """Test that jobs the board does not know are not added."""
        merged = merge_optimizer_jobs(jobs, [{'id': 'job-99', 'scheduledSegments': []}])
        assert [j.id for j in merged] == ['job-1', 'job-2', 'job-3']

    def test_does_not_mutate_input(self, jobs):
        """Test that the original job objects are unchanged."""
        merge_optimizer_jobs(jobs, [{'id': 'job-1', 'scheduledSegments': []}])
        assert len(jobs[0].scheduled_segments) == 2

    def test_malformed_job_raises(self, jobs):
        """Test that a job without an id is rejected."""
        with pytest.raises(OptimizerError):
            merge_optimizer_jobs(jobs, [{'scheduledSegments': []}])

    def test_non_numeric_hours_raise(self, jobs):
        """Test that malformed hours reject the whole response."""
        with pytest.raises(OptimizerError):
            merge_optimizer_jobs(jobs, [
                {'id': 'job-1', 'scheduledSegments': [{'date': '2024-01-08', 'hours': 'lots'}]},
            ])
