import os

# Must be set before the app modules are imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers every table
from app import app
from database import Base, get_db
from services import notification_service

# Use a test database URL (set this in your environment or hardcode for local dev)
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite:///./test_buddhaceo.db")
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    # Create tables before any tests
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    # Drop tables after all tests
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture
def client(db):
    # Override get_db dependency to use the test DB; the db fixture owns cleanup
    def override_get_db():
        yield db
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Capture outgoing email instead of talking to SMTP."""
    sent = []

    def fake_deliver(to_email, subject, text, html):
        sent.append({"to": to_email, "subject": subject, "text": text, "html": html})

    monkeypatch.setattr(notification_service, "_deliver", fake_deliver)
    return sent


@pytest.fixture
def broken_mail(monkeypatch):
    """Make every email delivery fail."""
    def failing_deliver(to_email, subject, text, html):
        raise notification_service.NotificationError("smtp unavailable")

    monkeypatch.setattr(notification_service, "_deliver", failing_deliver)


