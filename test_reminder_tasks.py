from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from medreminder.reminders.celery_app import celery_app
from medreminder.reminders.schemas import ScheduleRunResult
from medreminder.reminders.tasks import schedule_reminders_task


def test_beat_runs_scheduler_every_scan_interval():
    entry = celery_app.conf.beat_schedule["schedule-reminders"]
    assert entry["task"] == "reminders.schedule"
    assert entry["schedule"] == 60


def test_task_returns_run_summary():
    scheduler = MagicMock()
    scheduler.run.return_value = ScheduleRunResult(
        timestamp=datetime(2026, 10, 16, 8, 3, tzinfo=timezone.utc),
        remindersProcessed=2,
        remindersSent=1,
        errors=["Failed to send reminder for Aspirin: rejected: mailbox unavailable"],
    )
    with patch("medreminder.reminders.tasks.get_scheduler", return_value=scheduler):
        summary = schedule_reminders_task()

    scheduler.run.assert_called_once_with()
    assert summary["success"] is True
    assert summary["remindersSent"] == 1
    assert summary["errors"] == ["Failed to send reminder for Aspirin: rejected: mailbox unavailable"]
