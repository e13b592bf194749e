from celery import Celery
from .config import settings


celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND or None,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    # Runs must not overlap, one worker process is enough
    worker_concurrency=1,
    task_default_queue=settings.CELERY_QUEUE,
    include=["medreminder.reminders.tasks"],
)

# Celery Beat schedule for the periodic scan
celery_app.conf.beat_schedule = {
    "schedule-reminders": {
        "task": "reminders.schedule",
        "schedule": settings.SCAN_INTERVAL_SECONDS,
        # A run that waited longer than one interval is superseded by the next
        "options": {"expires": settings.SCAN_INTERVAL_SECONDS},
    },
}
