from pydantic import BaseModel


class DashboardStats(BaseModel):
    totalRecipients: int = 0
    totalMedications: int = 0
    remindersToday: int = 0
    remindersSent: int = 0
    remindersSuccess: int = 0
