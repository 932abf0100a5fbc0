"""
Pytest configuration and fixtures for testing.
"""

import os

# Settings are read at import time, so the environment is fixed before the app loads
os.environ.update(
    {
        "ENVIRONMENT": "test",
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": "587",
        "SMTP_SECURE": "false",
        "SMTP_USER": "mailer",
        "SMTP_PASSWORD": "secret",
        "MAIL_FROM": "noreply@example.com",
        "MAIL_TO": "owner@example.com",
        "CORS_ALLOW_ORIGINS": "*",
    }
)

import pytest
from fastapi.testclient import TestClient

from portfolio_site.main import app


class Outbox:
    """Messages handed to the SMTP relay, plus the number of send attempts."""

    def __init__(self):
        self.messages = []
        self.attempts = 0
        self.fail_on = set()
        self.error = ConnectionRefusedError("relay unavailable")

    def fail(self, *attempts, error=None):
        """Make the given 1-based send attempts raise."""
        self.fail_on.update(attempts)
        if error is not None:
            self.error = error

    @staticmethod
    def address(value):
        return getattr(value, "email", value)

    def recipients(self, index):
        return [self.address(r) for r in self.messages[index].recipients]

    def reply_to(self, index):
        return [self.address(r) for r in self.messages[index].reply_to]


@pytest.fixture
def outbox(monkeypatch):
    """Replace the SMTP send with an in-memory recorder."""
    box = Outbox()

    async def fake_send_message(self, message, template_name=None):
        box.attempts += 1
        if box.attempts in box.fail_on:
            raise box.error
        box.messages.append(message)

    monkeypatch.setattr("portfolio_site.services.email.service.FastMail.send_message", fake_send_message)
    return box


@pytest.fixture
def client():
    """Create a test client for the FastAPI application."""
    return TestClient(app)


@pytest.fixture
def valid_payload():
    """A fully valid contact submission."""
    return {
        "name": "山田太郎",
        "email": "a@b.com",
        "message": "hello",
        "birthdateYear": "",
        "birthdateMonth": "",
        "birthdateDay": "",
        "departmentName": "",
        "address": "Tokyo",
        "termOfService": "agreed",
        "recaptchaToken": "tok",
    }


@pytest.fixture
def valid_form(valid_payload):
    """The same submission as posted by the HTML form."""
    form = {k: v for k, v in valid_payload.items() if k != "recaptchaToken"}
    form["g-recaptcha-response"] = valid_payload["recaptchaToken"]
    return form
