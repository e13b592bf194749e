from prometheus_client import Counter


scheduler_runs_total = Counter(
    "reminder_scheduler_runs_total",
    "Total scheduler runs",
)

scheduler_matched_total = Counter(
    "reminder_scheduler_matched_total",
    "Medications with a dose time inside the tolerance window",
)

scheduler_skipped_total = Counter(
    "reminder_scheduler_skipped_total",
    "Due reminders skipped because a log already exists",
)

reminders_dispatch_success_total = Counter(
    "reminders_dispatch_success_total",
    "Total delivered reminder emails",
)

reminders_dispatch_failed_total = Counter(
    "reminders_dispatch_failed_total",
    "Total failed reminder emails",
)
