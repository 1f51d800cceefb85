"""OTP email delivery over SMTP (aiosmtplib)."""

from email.mime.text import MIMEText

import aiosmtplib

from ..utils.logging import get_logger
from .config import Settings, get_settings

logger = get_logger(__name__)


class Mailer:
    def __init__(self, settings: Settings = None):
        settings = settings or get_settings()
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_email = settings.email_from or settings.smtp_user
        self.otp_ttl_minutes = settings.otp_ttl_minutes

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    async def send(self, to_email: str, subject: str, text: str) -> bool:
        """Send a plain-text email; returns False when SMTP is not configured."""
        if not self.is_configured:
            logger.warning("SMTP not configured, skipping email to %s", to_email)
            return False

        message = MIMEText(text, "plain")
        message["From"] = self.from_email
        message["To"] = to_email
        message["Subject"] = subject

        await aiosmtplib.send(
            message,
            hostname=self.smtp_host,
            port=self.smtp_port,
            username=self.smtp_user,
            password=self.smtp_password,
            start_tls=True,
        )
        logger.info("Sent '%s' to %s", subject, to_email)
        return True

    async def send_otp(self, to_email: str, otp: str) -> bool:
        text = f"Your OTP code is: {otp}. It expires in {self.otp_ttl_minutes} minutes."
        return await self.send(to_email, "Your OTP Code", text)


def get_mailer() -> Mailer:
    return Mailer()
