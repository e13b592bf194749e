from .user import User, UserCreate, Token, TokenPayload
from .recipient import Recipient, RecipientCreate, RecipientUpdate
from .medication import Medication, MedicationCreate, MedicationUpdate, FrequencyOption
from .reminder_log import ReminderLog
from .dashboard import DashboardStats
