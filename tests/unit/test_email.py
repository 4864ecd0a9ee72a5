from unittest.mock import AsyncMock, patch

import pytest

from recruitment_api.notifications import retry as retry_module
from recruitment_api.notifications.email import (
    LOGIN_SUBJECT,
    EmailSender,
    EmailSettings,
    LoginNotifier,
)


def _settings(**overrides):
    values = {"SMTP_HOST": "smtp.example.com", "EMAIL_FROM": "noreply@example.com"}
    values.update(overrides)
    return EmailSettings(**values)


class _SMTP:
    """Stands in for aiosmtplib.SMTP; records connections and sent messages."""

    instances = []
    failures = 0

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.logins = []
        self.sent = []
        _SMTP.instances.append(self)

    async def __aenter__(self):
        if _SMTP.failures:
            _SMTP.failures -= 1
            raise ConnectionRefusedError("connection refused")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def login(self, username, password):
        self.logins.append((username, password))

    async def send_message(self, message):
        self.sent.append(message)
        return {}, "250 OK"


@pytest.fixture
def smtp(monkeypatch):
    _SMTP.instances = []
    _SMTP.failures = 0
    monkeypatch.setattr(retry_module.asyncio, "sleep", AsyncMock())
    with patch("aiosmtplib.SMTP", _SMTP):
        yield _SMTP


def test_unconfigured_settings_disable_the_notifier():
    notifier = LoginNotifier(EmailSender(EmailSettings(SMTP_HOST=None)))
    assert notifier.enabled is False


@pytest.mark.asyncio
async def test_unconfigured_notifier_sends_nothing(smtp):
    notifier = LoginNotifier(EmailSender(EmailSettings(SMTP_HOST=None)))
    assert await notifier.send_login_notification("ada@acme.io", "Ada") is False
    assert smtp.instances == []


@pytest.mark.asyncio
async def test_login_notification_message(smtp):
    sender = EmailSender(_settings(SMTP_USERNAME="mailer", SMTP_PASSWORD="pw", SMTP_PORT=2525))
    assert await LoginNotifier(sender).send_login_notification("ada@acme.io", "Ada") is True

    (conn,) = smtp.instances
    assert conn.kwargs["hostname"] == "smtp.example.com"
    assert conn.kwargs["port"] == 2525
    assert conn.logins == [("mailer", "pw")]
    (message,) = conn.sent
    assert message["Subject"] == LOGIN_SUBJECT
    assert message["To"] == "ada@acme.io"
    assert message["From"] == "Recruitment System <noreply@example.com>"
    parts = {p.get_content_type(): p.get_payload(decode=True).decode() for p in message.get_payload()}
    assert "Hello Ada," in parts["text/plain"]
    assert "ada@acme.io" in parts["text/html"]


@pytest.mark.asyncio
async def test_login_notification_retries_then_succeeds(smtp):
    smtp.failures = 2
    assert await LoginNotifier(EmailSender(_settings())).send_login_notification("ada@acme.io") is True
    assert len(smtp.instances) == 3
    assert smtp.instances[-1].logins == []
    assert len(smtp.instances[-1].sent) == 1


@pytest.mark.asyncio
async def test_login_notification_failure_is_logged_not_raised(smtp, caplog):
    smtp.failures = 10
    with caplog.at_level("ERROR", logger="recruitment_api.notifications.email"):
        sent = await LoginNotifier(EmailSender(_settings())).send_login_notification("ada@acme.io", "Ada")
    assert sent is False
    assert len(smtp.instances) == 3
    assert "Failed to send login notification to ada@acme.io" in caplog.text
