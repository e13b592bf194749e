import smtplib
from datetime import datetime
from unittest.mock import MagicMock, patch

from medreminder.reminders.config import ReminderSettings
from medreminder.reminders.dispatcher import format_scheduled_time, render_reminder_email
from medreminder.reminders.schemas import ReminderRequest
from medreminder.reminders.transport import (
    Delivered,
    EmailNotification,
    LoggingTransport,
    Rejected,
    SmtpTransport,
    TransportError,
    build_transport,
)


def _request(**overrides):
    data = {
        "medicationId": "5b7f3a7e-2f0a-4d3c-9a57-3f4a0a7f2c11",
        "recipientEmail": "mom@example.com",
        "recipientName": "Mom",
        "medicationName": "Lisinopril",
        "dosage": "10mg with water",
        "scheduledTime": "2026-10-16T08:00:00",
    }
    data.update(overrides)
    return ReminderRequest.model_validate(data)


def _smtp_settings():
    return ReminderSettings(
        EMAIL_TRANSPORT="smtp",
        SMTP_SERVER="smtp.example.com",
        SMTP_USERNAME="mailer",
        SMTP_PASSWORD="secret",
    )


def _notification():
    return EmailNotification(to_email="mom@example.com", subject="Hi", html="<p>Hi</p>", text="Hi")


def test_rendered_email_contains_reminder_details():
    notification = render_reminder_email(_request())

    assert notification.to_email == "mom@example.com"
    assert notification.subject == "Medicine Reminder: Lisinopril"
    for part in ("Mom", "Lisinopril", "10mg with water", "Friday, October 16, 2026 at 08:00 AM"):
        assert part in notification.html
        assert part in notification.text


def test_scheduled_time_offset_is_dropped_not_converted():
    request = _request(scheduledTime="2026-10-16T08:00:00+05:30")

    assert request.scheduled_time == datetime(2026, 10, 16, 8, 0)
    assert format_scheduled_time(request.scheduled_time) == "Friday, October 16, 2026 at 08:00 AM"


def test_default_transport_only_logs():
    transport = build_transport(ReminderSettings())

    assert isinstance(transport, LoggingTransport)
    assert isinstance(transport.send(_notification()), Delivered)


def test_smtp_transport_delivers():
    server = MagicMock()
    server.sendmail.return_value = {}
    with patch("medreminder.reminders.transport.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value = server
        result = build_transport(_smtp_settings()).send(_notification())

    assert isinstance(result, Delivered)
    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=30)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "secret")
    assert server.sendmail.call_args[0][1] == ["mom@example.com"]


def test_smtp_refused_recipient_is_rejected():
    server = MagicMock()
    server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({"mom@example.com": (550, b"no such user")})
    with patch("medreminder.reminders.transport.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value = server
        result = SmtpTransport(_smtp_settings()).send(_notification())

    assert isinstance(result, Rejected)
    assert "mom@example.com" in result.reason


def test_smtp_connection_failure_is_transport_error():
    with patch("medreminder.reminders.transport.smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
        result = SmtpTransport(_smtp_settings()).send(_notification())

    assert isinstance(result, TransportError)
    assert result.reason == "refused"


def test_html_body_escapes_caregiver_input():
    notification = render_reminder_email(
        _request(
            medicationName='<a href="http://evil.example">Click</a>',
            recipientName="Mom & Dad",
            dosage="<b>2</b> tablets",
        )
    )

    assert "<a href" not in notification.html
    assert "&lt;a href=&quot;http://evil.example&quot;&gt;Click&lt;/a&gt;" in notification.html
    assert "Mom &amp; Dad" in notification.html
    assert "&lt;b&gt;2&lt;/b&gt; tablets" in notification.html
    assert '<a href="http://evil.example">Click</a>' in notification.text
    assert "Mom & Dad" in notification.text
