import logging

from celery import shared_task

from .service import get_scheduler

logger = logging.getLogger(__name__)


@shared_task(name="reminders.schedule")
def schedule_reminders_task() -> dict:
    """Run one scheduling pass and return the run summary."""
    result = get_scheduler().run()
    if result.errors:
        logger.warning("Scheduler run finished with %d errors", len(result.errors))
    return result.model_dump(mode="json", exclude_none=True)
