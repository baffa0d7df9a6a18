"""
Tests for the schedule grid preview.
"""
import json
from datetime import date

from jobscheduler.brain.scheduling.allocator import allocate
from jobscheduler.brain.scheduling.models import Job, ScheduleSettings
from jobscheduler.brain.scheduling.preview import run_preview_script, schedule_frame


class TestScheduleFrame:
    """Tests for schedule_frame."""

    def test_grid_rows_columns_and_totals(self):
        """Test that the grid has one row per date and Total/Capacity columns."""
        settings = ScheduleSettings.uniform(8)
        jobs = [
            Job(id='a', name='Alpha', required_hours=10, is_urgent=True),
            Job(id='b', name='Beta', required_hours=4),
        ]
        frame = schedule_frame(allocate(jobs, settings, '2024-01-01'), settings)

        assert list(frame.index) == ['2024-01-01', '2024-01-02']
        assert list(frame.columns) == ['Alpha', 'Beta', 'Total', 'Capacity']
        assert frame.loc['2024-01-01', 'Alpha'] == 8
        assert frame.loc['2024-01-02', 'Alpha'] == 2
        assert frame.loc['2024-01-02', 'Beta'] == 4
        assert frame.loc['2024-01-02', 'Total'] == 6
        assert frame.loc['2024-01-02', 'Capacity'] == 8

    def test_jobs_sharing_a_name_keep_separate_columns(self):
        """Test that same-named jobs are not merged into one column."""
        settings = ScheduleSettings.uniform(8)
        jobs = [
            Job(id='a', name='Rails', required_hours=3, is_urgent=True),
            Job(id='b', name='Rails', required_hours=5),
        ]
        frame = schedule_frame(allocate(jobs, settings, '2024-01-01'), settings)

        assert list(frame.columns) == ['Rails (a)', 'Rails (b)', 'Total', 'Capacity']
        assert frame.loc['2024-01-01', 'Rails (a)'] == 3
        assert frame.loc['2024-01-01', 'Rails (b)'] == 5
        assert frame.loc['2024-01-01', 'Total'] == 8

    def test_empty_schedule(self):
        """Test that nothing scheduled yields an empty grid."""
        settings = ScheduleSettings.uniform(0)
        result = allocate([Job(id='a', name='Alpha', required_hours=1)], settings, '2024-01-01', max_days=5)
        frame = schedule_frame(result, settings)

        assert frame.empty
        assert 'Total' in frame.columns


class TestRunPreviewScript:
    """Tests for run_preview_script."""

    def test_demo_data(self, capsys):
        """Test that the demo seed is used when no session file is given."""
        results = run_preview_script('2024-01-01', today=date(2024, 1, 1))

        assert len(results['result'].jobs) == 3
        assert 'SCHEDULE PREVIEW' in capsys.readouterr().out

    def test_session_file_and_excel_export(self, tmp_path, capsys):
        """Test that jobs/settings load from JSON and the grid is written to Excel."""
        session = tmp_path / 'session.json'
        session.write_text(json.dumps({
            'jobs': [{'id': 'job-1', 'name': 'Alpha', 'requiredHours': 12}],
            'settings': {'dailyCapacityHours': 6},
        }))
        workbook = tmp_path / 'schedule.xlsx'

        results = run_preview_script('2024-01-06', session_file=str(session), excel_path=str(workbook))

        assert [s.date for s in results['result'].jobs[0].scheduled_segments] == ['2024-01-08', '2024-01-09']
        assert workbook.exists()
        assert 'Alpha' in capsys.readouterr().out
