"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client (with every sub-application's dependencies overridden)
- In-memory storage backend and notification dispatcher
- Admin accounts and auth headers
"""

import os
import tempfile

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="recruiting-uploads-"))
os.environ["RESEND_API_KEY"] = ""
os.environ["LOCK_TERMINAL_STATUSES"] = "false"

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recruiting.core.database import Base, get_db
from recruiting.core.deps import get_notifier, get_storage, get_transition_policy
from recruiting.core.security import get_password_hash
from recruiting.core.storage import StorageBackend, StorageError, StorageKeyExistsError
from recruiting.models.admin_user import AdminUser
from recruiting.models.application import Application
from recruiting.services.lifecycle import TransitionPolicy
from recruiting.services.notifications import NotificationDispatcher
from main import api_app, app, functions_app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123!"


class InMemoryStorage(StorageBackend):
    """Storage backend that keeps uploads in a dict and records every call."""

    def __init__(self):
        self.objects = {}
        self.content_types = {}
        self.fail_with = None

    def upload_file(self, key, file, content_type):
        if self.fail_with is not None:
            raise self.fail_with
        if key in self.objects:
            raise StorageKeyExistsError(f"Object already exists: {key}")
        self.objects[key] = file.read()
        self.content_types[key] = content_type
        return self.public_url(key)

    def file_exists(self, key):
        return key in self.objects

    def public_url(self, key):
        return f"https://storage.test/application-videos/{key}"

    def check_access(self):
        if self.fail_with is not None:
            raise StorageError("storage unavailable")


class RecordingNotifier(NotificationDispatcher):
    """Dispatcher that records payloads instead of queueing Celery tasks."""

    def __init__(self, result=True):
        super().__init__(enabled=True)
        self.result = result
        self.payloads = []

    def dispatch_new_application(self, payload):
        self.payloads.append(payload)
        return self.result


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def transition_policy():
    return TransitionPolicy.FREE


@pytest.fixture
def client(db_session, storage, notifier, transition_policy):
    """
    FastAPI test client with overridden dependencies.

    Routes live on three applications (root, /functions/v1 and /api/v1), and
    each resolves overrides against its own app.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    overrides = {
        get_db: override_get_db,
        get_storage: lambda: storage,
        get_notifier: lambda: notifier,
        get_transition_policy: lambda: transition_policy,
    }
    for target in (app, functions_app, api_app):
        target.dependency_overrides.update(overrides)

    with TestClient(app) as test_client:
        yield test_client

    for target in (app, functions_app, api_app):
        target.dependency_overrides.clear()


def create_admin_user(db_session, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, is_admin=True, is_active=True):
    """Helper to create a dashboard account"""
    user = AdminUser(
        id=uuid.uuid4(),
        email=email,
        hashed_password=get_password_hash(password),
        full_name="Test Admin",
        is_admin=is_admin,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    return create_admin_user(db_session)


@pytest.fixture
def auth_headers(client, admin_user):
    """Authorization header for the admin_user fixture, obtained via /login"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_application(db_session):
    """
    Factory inserting applications directly into the database.

    created_at defaults to one minute apart per call so sort order is
    deterministic.
    """
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        values = {
            "name": f"Applicant {counter['n']}",
            "phone": f"555-010{counter['n']}",
            "email": f"applicant{counter['n']}@example.com",
            "message": "I'd like to join the sales team.",
            "status": "new",
            "created_at": base_time + timedelta(minutes=counter["n"]),
        }
        values.update(fields)
        values.setdefault("updated_at", values["created_at"])
        application = Application(**values)
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return application

    return _make
