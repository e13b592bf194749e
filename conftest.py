import os
import uuid
from datetime import date, timedelta

import pytest

# Configuration must be in place before medreminder settings are imported
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SERVICE_API_KEY"] = "test-service-key"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["DEFAULT_TIMEZONE"] = "UTC"
os.environ["REMINDER_EMAIL_TRANSPORT"] = "log"
os.environ["REMINDER_TOLERANCE_MINUTES"] = "5"
os.environ["REMINDER_SCAN_INTERVAL_SECONDS"] = "60"

from fastapi.testclient import TestClient  # noqa: E402

from medreminder.core.security import get_password_hash  # noqa: E402
from medreminder.db.base import Base  # noqa: E402
from medreminder.db.session import SessionLocal, engine  # noqa: E402
from medreminder.models import Medication, Recipient, User  # noqa: E402



@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from medreminder.main import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(email=None, password="password123"):
        user = User(
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            hashed_password=get_password_hash(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_recipient(db, make_user):
    def _make(user=None, name="Mom", email="mom@example.com"):
        recipient = Recipient(user_id=(user or make_user()).id, name=name, email=email, timezone="America/New_York")
        db.add(recipient)
        db.commit()
        db.refresh(recipient)
        return recipient
    return _make


@pytest.fixture
def make_medication(db, make_recipient):
    def _make(
        times,
        recipient=None,
        name="Lisinopril",
        start_date=None,
        end_date=None,
        is_active=True,
    ):
        today = date(2026, 10, 16)
        medication = Medication(
            recipient_id=(recipient or make_recipient()).id,
            name=name,
            dosage="10mg",
            frequency="custom",
            times=times,
            start_date=start_date or today - timedelta(days=7),
            end_date=end_date or today + timedelta(days=7),
            is_active=is_active,
        )
        db.add(medication)
        db.commit()
        db.refresh(medication)
        return medication
    return _make


@pytest.fixture
def auth_headers(client):
    def _login(email="caregiver@example.com", password="password123"):
        client.post("/api/v1/auth/register", json={"email": email, "password": password})
        r = client.post("/api/v1/auth/login", data={"username": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}
    return _login
