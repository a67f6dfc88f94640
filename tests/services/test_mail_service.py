import smtplib

import pytest

from todo_api.services import mail_service
from todo_api.services.mail_service import OtpMailer


class RecordingSMTP:
    instances: list["RecordingSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username, password))

    def send_message(self, message):
        self.calls.append(("send", message))


class FailingSMTP(RecordingSMTP):
    def login(self, username, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture(autouse=True)
def _reset_recorder():
    RecordingSMTP.instances.clear()


def _mailer(**overrides) -> OtpMailer:
    options = {
        "host": "smtp.example.com",
        "port": 587,
        "username": "noreply@example.com",
        "password": "app-password",
    }
    options.update(overrides)
    return OtpMailer(**options)


def test_message_carries_code_in_both_bodies():
    message = _mailer().build_message("a@x.com", "4821")

    assert message["To"] == "a@x.com"
    assert message["Subject"] == "Your OTP Code"
    assert "noreply@example.com" in message["From"]
    assert message.get_body(("plain",)).get_content().strip() == "4821"
    assert "4821" in message.get_body(("html",)).get_content()


@pytest.mark.asyncio
async def test_send_uses_starttls_and_login(monkeypatch):
    monkeypatch.setattr(mail_service.smtplib, "SMTP", RecordingSMTP)

    await _mailer().send_otp("a@x.com", "4821")

    (smtp,) = RecordingSMTP.instances
    assert (smtp.host, smtp.port) == ("smtp.example.com", 587)
    assert smtp.calls[0] == "starttls"
    assert smtp.calls[1] == ("login", "noreply@example.com", "app-password")
    assert smtp.calls[2][0] == "send"


@pytest.mark.asyncio
async def test_unconfigured_mailer_skips_delivery(monkeypatch):
    monkeypatch.setattr(mail_service.smtplib, "SMTP", RecordingSMTP)

    await _mailer(username=None, password=None).send_otp("a@x.com", "4821")

    assert RecordingSMTP.instances == []


@pytest.mark.asyncio
async def test_delivery_failure_is_logged_not_raised(monkeypatch, caplog):
    monkeypatch.setattr(mail_service.smtplib, "SMTP", FailingSMTP)

    await _mailer().send_otp("a@x.com", "4821")

    assert "Failed to send reset code to a@x.com" in caplog.text
