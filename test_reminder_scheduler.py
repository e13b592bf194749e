from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from medreminder.core.config import Settings, settings as core_settings
from medreminder.db.session import SessionLocal
from medreminder.models import ReminderLog
from medreminder.reminders.config import ReminderSettings
from medreminder.reminders.dispatcher import ReminderDispatcher
from medreminder.reminders import scheduler as scheduler_module
from medreminder.reminders.scheduler import ReminderScheduler, first_matching_time
from medreminder.reminders.schemas import ReminderRequest
from medreminder.reminders.transport import Delivered, Rejected
from medreminder.utils.timezone import now_local, wall_clock_now

NOW = datetime(2026, 10, 16, 8, 3, tzinfo=timezone.utc)
TODAY = NOW.date()


class RecordingTransport:
    def __init__(self, fail_for=None, exc=None):
        self.sent = []
        self.fail_for = fail_for or set()
        self.exc = exc

    def send(self, notification):
        if self.exc is not None and (not self.fail_for or notification.to_email in self.fail_for):
            raise self.exc
        self.sent.append(notification)
        return Delivered()


class RejectingTransport:
    def send(self, notification):
        return Rejected(reason="mailbox unavailable")


def make_scheduler(transport, settings=None):
    settings = settings or ReminderSettings()
    return ReminderScheduler(settings, ReminderDispatcher(settings, transport), SessionLocal)


def logs(db):
    db.expire_all()
    return db.query(ReminderLog).all()


def test_due_dose_is_dispatched_and_logged_as_sent(db, make_medication):
    med = make_medication(["08:00"])
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert result.success is True
    assert result.remindersProcessed == 1
    assert result.remindersSent == 1
    assert result.errors is None
    assert len(transport.sent) == 1
    assert transport.sent[0].to_email == "mom@example.com"
    assert "Lisinopril" in transport.sent[0].subject

    (log,) = logs(db)
    assert log.medication_id == med.id
    assert log.recipient_id == med.recipient_id
    assert log.scheduled_time == datetime(2026, 10, 16, 8, 0, 0)
    assert log.status == "sent"
    assert log.method == "email"
    assert log.sent_time is not None


@pytest.mark.parametrize("dose_time, expected", [
    ("07:58", 1),
    ("08:08", 1),
    ("07:57", 0),
    ("08:09", 0),
])
def test_tolerance_window_is_inclusive(db, make_medication, dose_time, expected):
    # now is 08:03: 07:58 and 08:08 are exactly five minutes away
    make_medication([dose_time])
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert len(transport.sent) == expected
    assert result.remindersSent == expected


def test_no_dispatch_when_every_time_is_outside_window(db, make_medication):
    make_medication(["06:00", "12:00", "20:00"])
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert result.remindersProcessed == 0
    assert result.remindersSent == 0
    assert transport.sent == []
    assert logs(db) == []


def test_second_run_for_same_now_is_skipped(db, make_medication):
    make_medication(["08:00"])
    transport = RecordingTransport()
    scheduler = make_scheduler(transport)

    first = scheduler.run(now=NOW)
    second = scheduler.run(now=NOW + timedelta(minutes=1))

    assert first.remindersSent == 1
    assert second.remindersProcessed == 1
    assert second.remindersSent == 0
    assert len(transport.sent) == 1
    assert len(logs(db)) == 1


def test_only_first_matching_time_fires(db, make_medication):
    make_medication(["08:00", "08:02"])
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW.replace(minute=1))

    assert result.remindersSent == 1
    assert len(transport.sent) == 1
    (log,) = logs(db)
    assert log.scheduled_time == datetime(2026, 10, 16, 8, 0, 0)


def test_end_date_today_is_still_eligible(db, make_medication):
    make_medication(["08:00"], start_date=TODAY - timedelta(days=3), end_date=TODAY)
    transport = RecordingTransport()

    assert make_scheduler(transport).run(now=NOW).remindersSent == 1


def test_day_after_end_date_is_not_eligible(db, make_medication):
    make_medication(["08:00"], start_date=TODAY - timedelta(days=3), end_date=TODAY - timedelta(days=1))
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert result.remindersProcessed == 0
    assert transport.sent == []


def test_future_start_and_inactive_medications_are_ignored(db, make_medication):
    make_medication(["08:00"], start_date=TODAY + timedelta(days=1), end_date=TODAY + timedelta(days=5))
    make_medication(["08:00"], name="Paused", is_active=False)
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert result.remindersProcessed == 0
    assert transport.sent == []


def test_transport_exception_is_reported_and_run_continues(db, make_medication, make_recipient):
    make_medication(["08:00"], name="Metformin", recipient=make_recipient(email="dad@example.com", name="Dad"))
    make_medication(["08:00"], name="Aspirin", recipient=make_recipient(email="mom@example.com"))
    transport = RecordingTransport(fail_for={"dad@example.com"}, exc=RuntimeError("SMTP connection refused"))

    result = make_scheduler(transport).run(now=NOW)

    assert result.success is True
    assert result.remindersProcessed == 2
    assert result.remindersSent == 1
    assert len(result.errors) == 1
    assert "Metformin" in result.errors[0]
    assert "SMTP connection refused" in result.errors[0]

    statuses = {log.medication.name: log for log in logs(db)}
    assert statuses["Aspirin"].status == "sent"
    assert statuses["Metformin"].status == "failed"
    assert "SMTP connection refused" in statuses["Metformin"].error_message


def test_rejected_delivery_is_logged_as_failed(db, make_medication):
    make_medication(["08:00"])

    result = make_scheduler(RejectingTransport()).run(now=NOW)

    assert result.remindersSent == 0
    assert result.errors == ["Failed to send reminder for Lisinopril: rejected: mailbox unavailable"]
    (log,) = logs(db)
    assert log.status == "failed"
    assert log.error_message == "rejected: mailbox unavailable"


def test_concurrent_claim_does_not_send_twice(db, make_medication):
    med = make_medication(["08:00"])
    scheduled = datetime(2026, 10, 16, 8, 0, 0)
    # Another run already claimed the occurrence after this run's existence check
    db.add(ReminderLog(medication_id=med.id, recipient_id=med.recipient_id, scheduled_time=scheduled, status="pending"))
    db.commit()
    transport = RecordingTransport()
    settings = ReminderSettings()
    dispatcher = ReminderDispatcher(settings, transport)

    request = ReminderRequest(
        medicationId=med.id,
        recipientEmail="mom@example.com",
        recipientName="Mom",
        medicationName="Lisinopril",
        dosage="10mg",
        scheduledTime="2026-10-16T08:00:00",
    )
    with SessionLocal() as session:
        outcome = dispatcher.dispatch(session, request)

    assert outcome.duplicate
    assert transport.sent == []
    assert len(logs(db)) == 1


def test_fetch_failure_aborts_the_run():
    broken = MagicMock()
    broken.execute.side_effect = RuntimeError("database unavailable")
    settings = ReminderSettings()
    scheduler = ReminderScheduler(settings, ReminderDispatcher(settings, RecordingTransport()), lambda: broken)

    with pytest.raises(RuntimeError, match="database unavailable"):
        scheduler.run(now=NOW)
    broken.close.assert_called_once()


def test_first_matching_time_skips_malformed_entries():
    assert first_matching_time(["bad", "08:04"], 8 * 60, 5) == "08:04"
    assert first_matching_time(["08:10", "07:55"], 8 * 60, 5) == "07:55"
    assert first_matching_time([], 8 * 60, 5) is None


def test_window_must_cover_scan_interval():
    with pytest.raises(ValidationError):
        ReminderSettings(TOLERANCE_MINUTES=1, SCAN_INTERVAL_SECONDS=120)


def test_smtp_transport_requires_credentials():
    with pytest.raises(ValidationError):
        ReminderSettings(EMAIL_TRANSPORT="smtp", SMTP_SERVER=None, SMTP_USERNAME=None, SMTP_PASSWORD=None)


def test_custom_window_is_honoured(db, make_medication):
    make_medication(["08:12"])
    transport = RecordingTransport()
    settings = ReminderSettings(TOLERANCE_MINUTES=10)

    assert make_scheduler(transport, settings).run(now=NOW).remindersSent == 1


def test_existence_check_failure_is_isolated(db, make_medication, make_recipient, monkeypatch):
    broken = make_medication(["08:00"], name="Metformin", recipient=make_recipient(email="dad@example.com", name="Dad"))
    make_medication(["08:00"], name="Aspirin")
    real_exists = scheduler_module.reminder_log_exists

    def flaky_exists(session, medication_id, scheduled_time):
        if medication_id == broken.id:
            raise RuntimeError("lock timeout")
        return real_exists(session, medication_id, scheduled_time)

    monkeypatch.setattr(scheduler_module, "reminder_log_exists", flaky_exists)
    transport = RecordingTransport()

    result = make_scheduler(transport).run(now=NOW)

    assert result.success is True
    assert result.remindersProcessed == 2
    assert result.remindersSent == 1
    assert result.errors == ["Error sending reminder for Metformin: lock timeout"]
    assert [n.subject for n in transport.sent] == ["Medicine Reminder: Aspirin"]


def test_unknown_default_timezone_is_rejected():
    with pytest.raises(ValidationError, match="Mars/Olympus"):
        Settings(DEFAULT_TIMEZONE="Mars/Olympus")


def test_now_follows_configured_timezone(monkeypatch):
    monkeypatch.setattr(core_settings, "DEFAULT_TIMEZONE", "Asia/Tokyo")

    assert now_local().utcoffset() == timedelta(hours=9)
    assert wall_clock_now().tzinfo is None
