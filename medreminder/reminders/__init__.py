"""Reminder scheduling and dispatch (scheduler, dispatcher, email transport).

The scheduler runs on a timer (Celery beat or an external cron hitting the
trigger endpoint), matches active medications against the current time and
hands each due dose to the dispatcher, which emails the recipient and records
the outcome in ``reminder_logs``.
"""
