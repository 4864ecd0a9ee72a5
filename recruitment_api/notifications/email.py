"""
SMTP delivery through aiosmtplib and the login notification email.

SMTP is optional: without SMTP_HOST the notifier is disabled and logins
never try to send mail.
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recruitment_api.db.base import utc_now

from .retry import RetryExhaustedError, RetryOptions, execute_with_retry

logger = logging.getLogger(__name__)

LOGIN_SUBJECT = "Login Notification - Recruitment System"
LOGIN_RETRY = RetryOptions(max_retries=2, initial_delay=1.0)


class EmailSettings(BaseSettings):
    """SMTP connection settings read from the environment."""

    SMTP_HOST: Optional[str] = Field(default=None, description="SMTP server; unset disables email")
    SMTP_PORT: int = Field(default=587, ge=1)
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_USE_TLS: bool = Field(default=False, description="Implicit TLS (usually port 465)")
    SMTP_START_TLS: Optional[bool] = Field(
        default=None, description="Upgrade with STARTTLS; unset means when the server offers it"
    )
    SMTP_TIMEOUT: float = Field(default=30.0, gt=0)
    EMAIL_FROM: str = Field(default="noreply@recruitment.local")
    EMAIL_FROM_NAME: str = Field(default="Recruitment System")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.EMAIL_FROM)


class EmailSender:
    """Sends one message per call over a fresh SMTP connection."""

    def __init__(self, settings: Optional[EmailSettings] = None) -> None:
        self.settings = settings or EmailSettings()

    def build_message(self, to_email: str, subject: str, html: str, text: Optional[str] = None) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.EMAIL_FROM}>"
        message["To"] = to_email
        message["Subject"] = subject
        if text:
            message.attach(MIMEText(text, "plain", "utf-8"))
        message.attach(MIMEText(html, "html", "utf-8"))
        return message

    async def send(self, message: MIMEMultipart) -> None:
        """Deliver ``message``; SMTP and network errors propagate to the caller."""
        s = self.settings
        async with aiosmtplib.SMTP(
            hostname=s.SMTP_HOST,
            port=s.SMTP_PORT,
            use_tls=s.SMTP_USE_TLS,
            start_tls=s.SMTP_START_TLS,
            timeout=s.SMTP_TIMEOUT,
        ) as smtp:
            if s.SMTP_USERNAME and s.SMTP_PASSWORD:
                await smtp.login(s.SMTP_USERNAME, s.SMTP_PASSWORD)
            await smtp.send_message(message)


def render_login_notification(user_name: str, user_email: str, when: datetime) -> tuple[str, str]:
    """HTML and plain-text bodies of the login notification."""
    date = when.strftime("%A, %B %d, %Y")
    time = when.strftime("%H:%M:%S UTC")
    text = (
        f"Hello {user_name},\n\n"
        "Your account was successfully accessed.\n\n"
        f"Email: {user_email}\nDate: {date}\nTime: {time}\n\n"
        "If you did not perform this login, please secure your account immediately.\n"
    )
    html = (
        f"<p>Hello {user_name},</p>"
        "<p>Your account was successfully accessed.</p>"
        f"<ul><li>Email: {user_email}</li><li>Date: {date}</li><li>Time: {time}</li></ul>"
        "<p><strong>If you did not perform this login, please secure your account immediately.</strong></p>"
    )
    return html, text


class LoginNotifier:
    """
    Emails a user after each successful login.

    Meant to run as a background task: delivery is retried twice with
    backoff and a final failure is logged, never raised.
    """

    def __init__(
        self,
        sender: Optional[EmailSender] = None,
        retry: RetryOptions = LOGIN_RETRY,
    ) -> None:
        self.sender = sender or EmailSender()
        self.retry = retry

    @property
    def enabled(self) -> bool:
        return self.sender.settings.is_configured

    # PUBLIC_INTERFACE
    async def send_login_notification(self, user_email: str, user_name: str = "User") -> bool:
        """Returns True when the email was handed to the SMTP server."""
        if not self.enabled:
            logger.debug("SMTP not configured; skipping login notification for %s", user_email)
            return False
        html, text = render_login_notification(user_name, user_email, utc_now())
        message = self.sender.build_message(user_email, LOGIN_SUBJECT, html, text)
        try:
            await execute_with_retry(lambda: self.sender.send(message), self.retry)
        except RetryExhaustedError as exc:
            logger.error("Failed to send login notification to %s: %s", user_email, exc)
            return False
        logger.info("Login notification sent to %s", user_email)
        return True


# PUBLIC_INTERFACE
def get_login_notifier() -> LoginNotifier:
    """FastAPI dependency; settings are re-read per request like the app settings."""
    return LoginNotifier()
