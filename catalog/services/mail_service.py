"""
Transactional mail for the account lifecycle.

Renders the login, verification and password-reset templates and hands them
to the SMTP EmailService. Delivery problems are logged and never surface to
the caller: an account flow must not fail because a mail server is down.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from catalog.services.email_service import EmailService, get_email_service
from catalog.utils.runtime import reset_code_ttl_minutes

logger = logging.getLogger(__name__)

TEMPLATE_LOGIN = 'login'
TEMPLATE_VERIFY_EMAIL = 'verify_email'
TEMPLATE_RESET_PASSWORD = 'reset_password'


class MailService:
    def __init__(self, email_service: Optional[EmailService] = None):
        self.email_service = email_service or get_email_service()

    async def _deliver(self, to_email: str, subject: str, template_name: str, context: Dict[str, Any]) -> Dict[str, Any]:
        try:
            html_content, text_content = self.email_service.render_template(template_name, context)
        except Exception as e:
            logger.error("Email template %s could not be rendered: %s", template_name, e, exc_info=True)
            return {'success': False, 'error': f"Template rendering failed for {template_name}"}

        result = await self.email_service.send_email(
            to_email=to_email,
            subject=subject,
            html_content=html_content,
            text_content=text_content,
        )
        if not result.get('success'):
            logger.warning("%s email to %s was not sent: %s", template_name, to_email, result.get('error'))
        return result

    async def send_login_mail(self, email: str) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        return await self._deliver(
            email,
            'New Login to Your Account',
            TEMPLATE_LOGIN,
            {
                'email': email,
                'login_date': now.strftime('%Y-%m-%d'),
                'login_time': now.strftime('%H:%M:%S UTC'),
            },
        )

    async def send_verify_mail(self, email: str, link: str) -> Dict[str, Any]:
        return await self._deliver(
            email,
            'Verify Your Email Address',
            TEMPLATE_VERIFY_EMAIL,
            {'email': email, 'link': link},
        )

    async def send_reset_password_mail(self, email: str, code: str) -> Dict[str, Any]:
        return await self._deliver(
            email,
            'Reset Your Password',
            TEMPLATE_RESET_PASSWORD,
            {'email': email, 'code': code, 'ttl_minutes': reset_code_ttl_minutes()},
        )


def get_mail_service() -> MailService:
    """FastAPI dependency; tests override it with a stub."""
    return MailService()
