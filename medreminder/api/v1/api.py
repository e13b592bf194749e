from fastapi import APIRouter

from medreminder.api.v1.endpoints import auth
from medreminder.api.v1.endpoints import recipients
from medreminder.api.v1.endpoints import medications
from medreminder.api.v1.endpoints import reminder_logs
from medreminder.api.v1.endpoints import dashboard

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(recipients.router, prefix="/recipients", tags=["recipients"])
api_router.include_router(medications.router, prefix="/medications", tags=["medications"])
api_router.include_router(reminder_logs.router, prefix="/reminder-logs", tags=["reminder-logs"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
