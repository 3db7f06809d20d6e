from unittest.mock import AsyncMock, MagicMock

import pytest

from catalog.services.email_service import EmailService
from catalog.services.mail_service import (
    MailService,
    TEMPLATE_LOGIN,
    TEMPLATE_RESET_PASSWORD,
    TEMPLATE_VERIFY_EMAIL,
)


def _service():
    email_service = EmailService()
    email_service.send_email = AsyncMock(return_value={"success": True, "message_id": "m1"})
    return MailService(email_service=email_service), email_service


@pytest.mark.asyncio
async def test_send_verify_mail_includes_link():
    mail, email_service = _service()
    out = await mail.send_verify_mail("a@example.com", "http://testserver/api/users/verify-email/1/tok")
    assert out["success"] is True
    kwargs = email_service.send_email.await_args.kwargs
    assert kwargs["to_email"] == "a@example.com"
    assert "http://testserver/api/users/verify-email/1/tok" in kwargs["html_content"]
    assert "http://testserver/api/users/verify-email/1/tok" in kwargs["text_content"]


@pytest.mark.asyncio
async def test_send_reset_password_mail_includes_code_and_lifetime(monkeypatch):
    monkeypatch.setenv("RESET_CODE_TTL_MINUTES", "15")
    mail, email_service = _service()
    await mail.send_reset_password_mail("a@example.com", "042917")
    kwargs = email_service.send_email.await_args.kwargs
    assert "042917" in kwargs["html_content"]
    assert "15" in kwargs["text_content"]


@pytest.mark.asyncio
async def test_send_login_mail_mentions_date():
    mail, email_service = _service()
    await mail.send_login_mail("a@example.com")
    kwargs = email_service.send_email.await_args.kwargs
    assert kwargs["subject"] == "New Login to Your Account"
    assert "UTC" in kwargs["text_content"]


@pytest.mark.asyncio
async def test_render_failure_is_swallowed():
    email_service = MagicMock()
    email_service.render_template.side_effect = RuntimeError("boom")
    email_service.send_email = AsyncMock()
    mail = MailService(email_service=email_service)

    out = await mail.send_login_mail("a@example.com")

    assert out["success"] is False
    assert TEMPLATE_LOGIN in out["error"]
    email_service.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_failure_is_returned_not_raised():
    email_service = EmailService()
    email_service.send_email = AsyncMock(return_value={"success": False, "error": "smtp down"})
    mail = MailService(email_service=email_service)

    out = await mail.send_verify_mail("a@example.com", "http://link")
    assert out == {"success": False, "error": "smtp down"}


def test_template_names_exist():
    svc = EmailService()
    for name in (TEMPLATE_LOGIN, TEMPLATE_VERIFY_EMAIL, TEMPLATE_RESET_PASSWORD):
        assert svc.template_env.get_template(f"{name}.html") is not None
