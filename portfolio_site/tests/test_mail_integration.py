"""
SMTP integration test for the contact emails.
"""

import asyncio
import os

import pytest
from dotenv import dotenv_values

from portfolio_site.core.config import EmailSettings
from portfolio_site.services.email.service import EmailService


@pytest.mark.integration
def test_send_contact_emails_integration():
    if os.getenv("RUN_SMTP_TESTS") != "1":
        pytest.skip("Set RUN_SMTP_TESTS=1 to enable SMTP integration test")

    recipient = os.getenv("SMTP_TEST_RECIPIENT")
    if not recipient:
        pytest.skip("Set SMTP_TEST_RECIPIENT to enable SMTP integration test")

    # conftest overrides the process environment with a dummy relay, so read .env directly
    values = {
        key: value
        for key, value in dotenv_values(".env").items()
        if key in EmailSettings.model_fields and value is not None
    }
    settings = EmailSettings(**values)
    if not settings.is_configured:
        pytest.skip("Email settings are not configured in .env")

    asyncio.run(
        EmailService(settings=settings).send_contact_emails(
            {
                "name": "SMTP Test",
                "email": recipient,
                "message": "integration test",
                "address": "Tokyo",
                "termOfService": "agreed",
            }
        )
    )
