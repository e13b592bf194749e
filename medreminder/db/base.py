# Import all the models, so that Base has them before being
# imported by Alembic or used for create_all
from medreminder.db.base_class import Base  # noqa: F401
from medreminder.models.user import User  # noqa: F401
from medreminder.models.recipient import Recipient  # noqa: F401
from medreminder.models.medication import Medication  # noqa: F401
from medreminder.models.reminder_log import ReminderLog  # noqa: F401
