import uuid

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from catalog.api.deps import get_current_payload, require_admin, require_member, require_roles
from catalog.db import models
from catalog.db.database import get_db
from catalog.utils.jwt_tokens import create_access_token


@pytest.fixture
def guarded_client(db_session):
    app = FastAPI()

    @app.get("/me")
    def me(payload=Depends(get_current_payload)):
        return {"id": payload.id, "email": payload.email}

    @app.get("/admin")
    def admin_only(payload=Depends(require_admin)):
        return {"ok": True}

    @app.get("/members")
    def members(payload=Depends(require_member)):
        return {"ok": True}

    @app.get("/nobody")
    def nobody(payload=Depends(require_roles())):
        return {"ok": True}

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)


def _bearer(user_id, email="x@example.com"):
    return {"Authorization": f"Bearer {create_access_token(str(user_id), email)}"}


def test_missing_header_is_rejected(guarded_client):
    r = guarded_client.get("/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "No token provided"


@pytest.mark.parametrize("header", ["Token abc", "Bearer", "bearer abc", "Bearer  "])
def test_malformed_header_is_rejected(guarded_client, header):
    r = guarded_client.get("/me", headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json()["detail"] == "No token provided"


def test_invalid_token_is_rejected(guarded_client):
    r = guarded_client.get("/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"


def test_valid_token_returns_payload(guarded_client):
    uid = uuid.uuid4()
    r = guarded_client.get("/me", headers=_bearer(uid, "me@example.com"))
    assert r.status_code == 200
    assert r.json() == {"id": str(uid), "email": "me@example.com"}


def test_role_guard_admits_admin(guarded_client, make_user):
    admin = make_user(user_type=models.UserType.ADMIN)
    assert guarded_client.get("/admin", headers=_bearer(admin.id)).status_code == 200
    assert guarded_client.get("/members", headers=_bearer(admin.id)).status_code == 200


def test_role_guard_denies_normal_user_on_admin_route(guarded_client, make_user):
    user = make_user()
    r = guarded_client.get("/admin", headers=_bearer(user.id))
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied"
    assert guarded_client.get("/members", headers=_bearer(user.id)).status_code == 200


def test_role_guard_reads_role_from_database(guarded_client, make_user, db_session):
    user = make_user(user_type=models.UserType.ADMIN)
    headers = _bearer(user.id)
    assert guarded_client.get("/admin", headers=headers).status_code == 200

    user.user_type = models.UserType.NORMAL_USER
    db_session.commit()
    assert guarded_client.get("/admin", headers=headers).status_code == 403


def test_role_guard_rejects_deleted_user(guarded_client):
    r = guarded_client.get("/members", headers=_bearer(uuid.uuid4()))
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"


def test_role_guard_rejects_non_uuid_subject(guarded_client):
    r = guarded_client.get("/members", headers=_bearer("not-a-uuid"))
    assert r.status_code == 401


def test_role_guard_without_roles_denies_everyone(guarded_client, make_user):
    admin = make_user(user_type=models.UserType.ADMIN)
    r = guarded_client.get("/nobody", headers=_bearer(admin.id))
    assert r.status_code == 403
