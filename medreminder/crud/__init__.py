from .user import user
from .recipient import recipient
from .medication import medication
from .reminder_log import reminder_log

__all__ = ["user", "recipient", "medication", "reminder_log"]
