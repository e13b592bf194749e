from .user import User
from .recipient import Recipient
from .medication import Medication, MedicationFrequency, FREQUENCY_DEFAULT_TIMES
from .reminder_log import ReminderLog, ReminderStatus, ReminderMethod

__all__ = [
    "User", "Recipient", "Medication", "MedicationFrequency", "FREQUENCY_DEFAULT_TIMES",
    "ReminderLog", "ReminderStatus", "ReminderMethod",
]
