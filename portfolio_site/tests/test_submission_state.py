"""
Tests for the submission lifecycle in the contact service.
"""

import asyncio

import pytest

from portfolio_site.api.schemas.contact import ContactSubmission
from portfolio_site.api.services.contact import ContactService, SubmissionAttempt, SubmissionState
from portfolio_site.core.exceptions import (
    ConfigurationError,
    InvalidStateTransition,
    MailDeliveryError,
    ValidationError,
)


class StubEmailService:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def send_contact_emails(self, data):
        self.calls.append(data)
        if self.error is not None:
            raise self.error


def _submission(**overrides):
    data = {"name": "山田太郎", "email": "a@b.com", "message": "hello", "recaptchaToken": "tok"}
    data.update(overrides)
    return ContactSubmission(**data)


def test_delivered_path():
    email_service = StubEmailService()

    attempt = asyncio.run(ContactService(email_service).submit(_submission()))

    assert attempt.state == SubmissionState.DELIVERED
    assert attempt.history == [
        SubmissionState.IDLE,
        SubmissionState.VALIDATING,
        SubmissionState.SENDING,
        SubmissionState.DELIVERED,
    ]
    assert attempt.finished
    assert email_service.calls[0]["name"] == "山田太郎"
    assert "recaptchaToken" not in email_service.calls[0]


def test_rejected_path_never_sends():
    email_service = StubEmailService()
    service = ContactService(email_service)
    attempt = SubmissionAttempt(submission=_submission(message=""))

    with pytest.raises(ValidationError) as exc_info:
        service.validate(attempt)

    assert attempt.state == SubmissionState.REJECTED
    assert exc_info.value.details["missing"] == ["message"]
    assert email_service.calls == []


def test_delivery_failure_path():
    service = ContactService(StubEmailService(error=MailDeliveryError("relay down")))

    with pytest.raises(MailDeliveryError):
        asyncio.run(service.submit(_submission()))


def test_unexpected_send_error_becomes_delivery_failure():
    service = ContactService(StubEmailService(error=KeyError("boom")))

    with pytest.raises(MailDeliveryError) as exc_info:
        asyncio.run(service.submit(_submission()))

    assert exc_info.value.message == "メール送信に失敗しました"


def test_finished_attempt_cannot_move():
    attempt = SubmissionAttempt(submission=_submission())
    attempt.transition(SubmissionState.VALIDATING)
    attempt.transition(SubmissionState.REJECTED)

    with pytest.raises(InvalidStateTransition):
        attempt.transition(SubmissionState.SENDING)


def test_idle_cannot_skip_validation():
    attempt = SubmissionAttempt(submission=_submission())

    with pytest.raises(InvalidStateTransition):
        attempt.transition(SubmissionState.SENDING)


def test_each_submission_is_a_new_attempt():
    email_service = StubEmailService()
    service = ContactService(email_service)

    first = asyncio.run(service.submit(_submission()))
    second = asyncio.run(service.submit(_submission()))

    assert first.id != second.id
    assert len(email_service.calls) == 2


def test_unconfigured_relay_error_is_raised_unchanged():
    service = ContactService(StubEmailService(error=ConfigurationError("Mail relay is not configured", "MAIL_TO")))

    with pytest.raises(ConfigurationError):
        asyncio.run(service.submit(_submission()))
