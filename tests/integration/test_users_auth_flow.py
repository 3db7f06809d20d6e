from datetime import datetime, timedelta, timezone

import pytest

from catalog.db import models
from catalog.db.repositories import users as user_repo


def _register(client, **overrides):
    body = {"name": "Ada Lovelace", "email": "ada@example.com", "password": "secret123", "age": 36}
    body.update(overrides)
    return client.post("/api/users/auth/register", json=body)


def test_register_creates_unverified_user_and_sends_link(client, mailer, db_session):
    r = _register(client)
    assert r.status_code == 201
    body = r.json()
    assert body["user"]["email"] == "ada@example.com"
    assert "accessToken" not in body

    user = user_repo.get_by_email(db_session, email="ada@example.com")
    assert user.is_account_verified is False
    assert user.password != "secret123"
    assert user.user_type == models.UserType.NORMAL_USER

    sent = mailer.last("verify")
    assert sent["email"] == "ada@example.com"
    assert sent["link"] == f"http://testserver/api/users/verify-email/{user.id}/{user.verification_token}"


def test_register_ignores_requested_user_type(client, db_session):
    r = _register(client, userType="ADMIN")
    assert r.status_code == 201
    user = user_repo.get_by_email(db_session, email="ada@example.com")
    assert user.user_type == models.UserType.NORMAL_USER


def test_register_strips_surrounding_whitespace_from_name(client, db_session):
    assert _register(client, name="  Ada Lovelace  ").status_code == 201
    user = user_repo.get_by_email(db_session, email="ada@example.com")
    assert user.name == "Ada Lovelace"


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201
    r = _register(client, email="ADA@example.com")
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid email, user already exists"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": "1"}, "name"),
        ({"name": "12345"}, "name"),
        ({"email": "not-an-email"}, "email"),
        ({"password": "123"}, "password"),
        ({"age": 130}, "age"),
        ({"name": " a "}, "name"),
        ({"name": "   "}, "name"),
    ],
)
def test_register_validation_errors(client, overrides, field):
    r = _register(client, **overrides)
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Validation failed"
    assert field in [e["field"] for e in body["errors"]]


def test_full_verification_and_login_flow(client, mailer, db_session):
    _register(client)

    r = client.post("/api/users/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert r.status_code == 400
    assert r.json()["message"] == (
        "Verification token has been sent to your email, please verify your email address"
    )
    link = mailer.last("verify")["link"]
    path = link.replace("http://testserver", "")

    r = client.get(path)
    assert r.status_code == 200

    user = user_repo.get_by_email(db_session, email="ada@example.com")
    db_session.refresh(user)
    assert user.is_account_verified is True
    assert user.verification_token is None

    r = client.get(path)
    assert r.status_code == 400
    assert r.json()["message"] == "There is no verification token"

    r = client.post("/api/users/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert r.status_code == 200
    body = r.json()
    assert body["accessToken"]
    assert body["user"]["email"] == "ada@example.com"
    assert mailer.last("login")["email"] == "ada@example.com"

    r = client.get("/api/users/current-user", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert r.status_code == 200
    data = r.json()["userData"]
    assert data["email"] == "ada@example.com"
    assert data["isAccountVerified"] is True
    assert data["userType"] == "NORMAL_USER"
    assert "password" not in data


def test_login_reissues_verification_token(client, mailer, db_session):
    _register(client)
    first = mailer.last("verify")["link"]
    client.post("/api/users/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    second = mailer.last("verify")["link"]
    assert first != second

    r = client.get(first.replace("http://testserver", ""))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid link"


def test_verify_email_unknown_user(client):
    r = client.get("/api/users/verify-email/00000000-0000-0000-0000-000000000000/abc")
    assert r.status_code == 404


def test_verify_email_malformed_user_id(client):
    r = client.get("/api/users/verify-email/not-a-uuid/abc")
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_login_unknown_user_and_wrong_password(client, member):
    r = client.post("/api/users/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid email or password"

    r = client.post("/api/users/auth/login", json={"email": member.email, "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid email or password"


def test_forgot_and_reset_password(client, mailer, member):
    r = client.post("/api/users/forgot-password", json={"email": member.email})
    assert r.status_code == 200
    code = mailer.last("reset")["code"]
    assert len(code) == 6 and code.isdigit()

    wrong = "000000" if code != "000000" else "111111"
    r = client.post("/api/users/reset-password", json={"email": member.email, "code": wrong, "password": "newpass1"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid or expired reset code"

    r = client.post("/api/users/reset-password", json={"email": member.email, "code": code, "password": "newpass1"})
    assert r.status_code == 200

    # single use
    r = client.post("/api/users/reset-password", json={"email": member.email, "code": code, "password": "newpass2"})
    assert r.status_code == 400

    r = client.post("/api/users/auth/login", json={"email": member.email, "password": "newpass1"})
    assert r.status_code == 200


def test_forgot_password_does_not_reveal_unknown_email(client, mailer, member):
    known = client.post("/api/users/forgot-password", json={"email": member.email})
    unknown = client.post("/api/users/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert [m["email"] for m in mailer.sent if m["kind"] == "reset"] == [member.email]


def test_reset_password_expired_code(client, mailer, member, db_session):
    client.post("/api/users/forgot-password", json={"email": member.email})
    code = mailer.last("reset")["code"]
    db_session.refresh(member)
    member.reset_password_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()

    r = client.post("/api/users/reset-password", json={"email": member.email, "code": code, "password": "newpass1"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid or expired reset code"


def test_reset_password_rejects_malformed_code(client, member):
    r = client.post("/api/users/reset-password", json={"email": member.email, "code": "12ab56", "password": "newpass1"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "code"
