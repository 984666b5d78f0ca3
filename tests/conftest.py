import os

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["RESEND_API_KEY"] = ""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, get_db
from app.dependencies import get_notifier
from app.main import app
from app.services.store import ReminderStore
from app.services.tokens import generate_magic_hash


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return ReminderStore(db_session)


@pytest.fixture
def notifier():
    """Notifier double that reports successful delivery."""
    mock_notifier = MagicMock()
    mock_notifier.send.return_value = (True, "email-123", None)
    return mock_notifier


@pytest.fixture
def client(db_session, notifier):
    """Create a test client with database session and notifier overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_reminder(store):
    """Insert a pending reminder whose trigger is `trigger_in` from now."""
    def _make_reminder(
        service_name="Netflix",
        user_email="test@example.com",
        trigger_in=timedelta(minutes=-1),
        trial_end_in=timedelta(hours=47),
        timezone_offset=0,
    ):
        now = datetime.now(timezone.utc)
        return store.create(
            user_email=user_email,
            service_name=service_name,
            trial_end_utc=now + trial_end_in,
            egress_trigger_utc=now + trigger_in,
            timezone_offset=timezone_offset,
            magic_hash=generate_magic_hash(),
        )

    return _make_reminder
