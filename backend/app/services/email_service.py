"""
Outgoing mail (OTP codes)
"""
import smtplib
from email.message import EmailMessage
from enum import Enum

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class EmailTemplate(str, Enum):
    VERIFY_ACCOUNT = "verify_account"
    RESET_PASSWORD = "reset_password"


EMAIL_SUBJECTS = {
    EmailTemplate.VERIFY_ACCOUNT: "Verify your account",
    EmailTemplate.RESET_PASSWORD: "Reset your password",
}

EMAIL_BODIES = {
    EmailTemplate.VERIFY_ACCOUNT: (
        "Hello {name},\n\nYour verification code is {otp_code}. "
        "It expires in {expires_minutes} minutes.\n"
    ),
    EmailTemplate.RESET_PASSWORD: (
        "Hello {name},\n\nUse the code {otp_code} to reset your password. "
        "It expires in {expires_minutes} minutes.\n"
    ),
}


class EmailService:
    """Sends mail over SMTP, or logs it when no SMTP host is configured"""

    def __init__(self):
        self.settings = get_settings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.email_host)

    def send_otp(self, to: str, name: str, otp_code: str, template: EmailTemplate) -> bool:
        """
        Send an OTP mail

        Returns:
            True if the mail was handed to the SMTP server
        """
        body = EMAIL_BODIES[template].format(
            name=name,
            otp_code=otp_code,
            expires_minutes=self.settings.otp_expire_minutes,
        )
        return self.send(to, EMAIL_SUBJECTS[template], body)

    def send(self, to: str, subject: str, body: str) -> bool:
        if not self.enabled:
            logger.info(f"Mail delivery disabled, would send '{subject}' to {to}")
            return False

        message = EmailMessage()
        message["From"] = self.settings.email_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self.settings.email_host, self.settings.email_port, timeout=10) as smtp:
            smtp.starttls()
            if self.settings.email_user:
                smtp.login(self.settings.email_user, self.settings.email_password or "")
            smtp.send_message(message)

        logger.info(f"Sent '{subject}' to {to}")
        return True
