"""
Contact submission service: authoritative validation and mail dispatch.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from portfolio_site.api.schemas.contact import ContactSubmission
from portfolio_site.core.exceptions import (
    ConfigurationError,
    InvalidStateTransition,
    MailDeliveryError,
    ValidationError,
)
from portfolio_site.core.validators import missing_required_fields
from portfolio_site.services.email.service import EmailService

# Configure logging
logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "必須項目が入力されていません"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SENDING = "sending"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"


TRANSITIONS: Dict[SubmissionState, FrozenSet[SubmissionState]] = {
    SubmissionState.IDLE: frozenset({SubmissionState.VALIDATING}),
    SubmissionState.VALIDATING: frozenset({SubmissionState.REJECTED, SubmissionState.SENDING}),
    SubmissionState.SENDING: frozenset({SubmissionState.DELIVERED, SubmissionState.DELIVERY_FAILED}),
    SubmissionState.REJECTED: frozenset(),
    SubmissionState.DELIVERED: frozenset(),
    SubmissionState.DELIVERY_FAILED: frozenset(),
}


@dataclass
class SubmissionAttempt:
    """A single pass through the submission lifecycle. Never reused."""

    submission: ContactSubmission
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: SubmissionState = SubmissionState.IDLE
    history: List[SubmissionState] = field(default_factory=lambda: [SubmissionState.IDLE])

    @property
    def finished(self) -> bool:
        return not TRANSITIONS[self.state]

    def transition(self, target: SubmissionState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidStateTransition(self.state.value, target.value)
        logger.debug(f"Submission {self.id}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)


class ContactService:
    """Service class for contact form submissions."""

    def __init__(self, email_service: Optional[EmailService] = None):
        self.email_service = email_service or EmailService()

    def validate(self, attempt: SubmissionAttempt) -> None:
        """
        Server-side gate. Only name, email and message are required here;
        the richer rule set is enforced by the form controller.

        Raises:
            ValidationError: a required field is empty
        """
        attempt.transition(SubmissionState.VALIDATING)
        missing = missing_required_fields(attempt.submission.template_data())
        if missing:
            attempt.transition(SubmissionState.REJECTED)
            logger.warning(f"Contact submission {attempt.id} rejected, missing fields: {', '.join(missing)}")
            raise ValidationError(REQUIRED_FIELDS_MESSAGE, field=missing[0], details={"missing": list(missing)})

    async def submit(self, submission: ContactSubmission) -> SubmissionAttempt:
        """
        Validate a submission and send the operator and acknowledgment emails.

        Args:
            submission: Payload posted by the contact form

        Returns:
            The delivered attempt

        Raises:
            ValidationError: required fields are missing, nothing was sent
            ConfigurationError: the mail relay is not configured, nothing was sent
            MailDeliveryError: the relay failed; the operator copy may have gone out
        """
        attempt = SubmissionAttempt(submission=submission)
        self.validate(attempt)

        attempt.transition(SubmissionState.SENDING)
        try:
            await self.email_service.send_contact_emails(submission.template_data())
        except (ConfigurationError, MailDeliveryError):
            attempt.transition(SubmissionState.DELIVERY_FAILED)
            raise
        except Exception as e:
            attempt.transition(SubmissionState.DELIVERY_FAILED)
            logger.error(f"Unexpected error while sending contact submission {attempt.id}: {e}", exc_info=True)
            raise MailDeliveryError(str(e)) from e

        attempt.transition(SubmissionState.DELIVERED)
        logger.info(f"Contact submission {attempt.id} delivered")
        return attempt
