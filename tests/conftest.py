import os

# Must be set before catalog.db.database is imported so the in-memory engine is used
os.environ["PYTEST_RUNNING"] = "1"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SEND_EMAILS", "false")
os.environ.setdefault("DOMAIN", "http://testserver")

import pytest
from fastapi.testclient import TestClient

import catalog.db.database as db_module
from catalog.api.main import app
from catalog.api.rate_limit import limiter
from catalog.db import models
from catalog.db.repositories import users as user_repo
from catalog.services.mail_service import get_mail_service
from catalog.utils.jwt_tokens import create_access_token
from catalog.utils.passwords import hash_password


class RecordingMailService:
    """Stands in for MailService; records what would have been sent."""

    def __init__(self):
        self.sent = []

    async def send_login_mail(self, email):
        self.sent.append({"kind": "login", "email": email})
        return {"success": True}

    async def send_verify_mail(self, email, link):
        self.sent.append({"kind": "verify", "email": email, "link": link})
        return {"success": True}

    async def send_reset_password_mail(self, email, code):
        self.sent.append({"kind": "reset", "email": email, "code": code})
        return {"success": True}

    def last(self, kind):
        for item in reversed(self.sent):
            if item["kind"] == kind:
                return item
        return None


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture(autouse=True)
def _storage_dirs(tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "images"))
    monkeypatch.setenv("PROFILE_IMAGE_DIR", str(tmp_path / "images" / "profile"))
    yield tmp_path


# Per-test session; tables are emptied afterwards since the app commits
@pytest.fixture
def db_session():
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(models.Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture
def mailer():
    return RecordingMailService()


@pytest.fixture
def client(db_session, mailer):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[db_module.get_db] = _override_get_db
    app.dependency_overrides[get_mail_service] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(
        email=None,
        password="secret123",
        name="Test User",
        user_type=models.UserType.NORMAL_USER,
        verified=True,
        age=30,
    ):
        counter["n"] += 1
        user = user_repo.create_user(
            db_session,
            email=email or f"user{counter['n']}@example.com",
            name=name,
            password_hash=hash_password(password),
            age=age,
            user_type=user_type,
        )
        if verified:
            user_repo.mark_verified(db_session, user=user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(str(user.id), user.email)}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", name="Admin", user_type=models.UserType.ADMIN)


@pytest.fixture
def member(make_user):
    return make_user(email="member@example.com", name="Member")
