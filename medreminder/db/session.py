from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from medreminder.core.config import settings

_engine_kwargs = {"pool_pre_ping": True, "echo": False}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    # Local/test databases: one shared connection so an in-memory database survives across sessions
    _engine_kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
else:
    # PostgreSQL configuration with connection pooling
    _engine_kwargs.update(
        pool_size=10,
        max_overflow=20,
        pool_recycle=300,  # Recycle connections every 5 minutes
        pool_timeout=30,
    )

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
