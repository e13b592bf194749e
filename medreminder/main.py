from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
import logging
import sys

from medreminder.core.config import settings
from medreminder.db.session import SessionLocal

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting up Medicine Reminder backend...")

    # Check database tables
    try:
        from sqlalchemy import inspect
        from medreminder.db.base import Base

        with SessionLocal() as db:
            existing_tables = inspect(db.get_bind()).get_table_names()
            missing_tables = [t for t in Base.metadata.tables if t not in existing_tables]
            if missing_tables:
                logger.warning(f"Missing database tables: {missing_tables}")
                logger.warning("Run `alembic upgrade head` before starting the server")
            else:
                logger.info("All required database tables exist")
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")

    yield

    logger.info("Shutting down Medicine Reminder backend...")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    # Reminder settings are validated on import; a bad configuration stops start-up here
    from medreminder.reminders.config import settings as reminder_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "x-api-key", "content-type"],
    )

    from medreminder.api.v1.api import api_router
    from medreminder.reminders.api import router as functions_router

    app.include_router(api_router, prefix=settings.API_V1_STR)
    app.include_router(functions_router, prefix=settings.FUNCTIONS_V1_STR, tags=["functions"])

    if settings.METRICS_ENABLED:
        from prometheus_fastapi_instrumentator import Instrumentator
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    logger.info(
        f"Application configured ({settings.ENVIRONMENT.value}); reminder window "
        f"{reminder_settings.TOLERANCE_MINUTES} min, scan every {reminder_settings.SCAN_INTERVAL_SECONDS}s, "
        f"transport={reminder_settings.EMAIL_TRANSPORT}"
    )
    return app


# Create the FastAPI app instance
app = create_application()


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint that redirects to API documentation"""
    return RedirectResponse(url=f"{settings.API_V1_STR}/docs")


@app.get("/health", tags=["Health Check"])
def health_check():
    """Health check endpoint"""
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        db_status = "unhealthy"
    status_code = 200 if db_status == "healthy" else 503
    return JSONResponse(
        status_code=status_code,
        content={"status": "healthy" if status_code == 200 else "degraded", "database": db_status, "version": settings.VERSION},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("medreminder.main:app", host="0.0.0.0", port=8000)
