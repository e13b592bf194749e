from functools import lru_cache

from medreminder.db.session import SessionLocal
from .config import settings
from .dispatcher import ReminderDispatcher
from .scheduler import ReminderScheduler
from .transport import build_transport


@lru_cache
def get_dispatcher() -> ReminderDispatcher:
    return ReminderDispatcher(settings, build_transport(settings))


@lru_cache
def get_scheduler() -> ReminderScheduler:
    return ReminderScheduler(settings, get_dispatcher(), SessionLocal)
