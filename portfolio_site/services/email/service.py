from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from fastapi_mail.schemas import MultipartSubtypeEnum
from pydantic import NameEmail, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing import Dict, Optional, Tuple
import logging

from portfolio_site.core.config import EmailSettings, email_settings
from portfolio_site.core.exceptions import ConfigurationError, MailDeliveryError
from portfolio_site.schemas.email import EmailMessage
from portfolio_site.services.email.templates import EmailTemplates

logger = logging.getLogger(__name__)

# fastapi-mail checks every recipient and reply-to address with this type
_mail_address = TypeAdapter(NameEmail)


def is_mailable_address(address: Optional[str]) -> bool:
    """True when the mail library will accept ``address`` as a recipient."""
    if not address:
        return False
    try:
        _mail_address.validate_python(address)
    except PydanticValidationError:
        return False
    return True


class EmailService:
    """
    Composes and sends the two contact emails through the SMTP relay.

    Connection settings are resolved per call so that every submission uses
    its own relay configuration and a broken configuration surfaces when a
    submission is sent, not when the app is imported.
    """

    def __init__(self, settings: Optional[EmailSettings] = None):
        self.settings = settings or email_settings

    def _connection_config(self) -> ConnectionConfig:
        s = self.settings
        return ConnectionConfig(
            MAIL_USERNAME=s.SMTP_USER,
            MAIL_PASSWORD=s.SMTP_PASSWORD,
            MAIL_FROM=s.MAIL_FROM,
            MAIL_FROM_NAME=s.MAIL_FROM_NAME,
            MAIL_PORT=s.SMTP_PORT,
            MAIL_SERVER=s.SMTP_HOST,
            MAIL_STARTTLS=not s.SMTP_SECURE,
            MAIL_SSL_TLS=s.SMTP_SECURE,
            USE_CREDENTIALS=s.use_credentials,
            VALIDATE_CERTS=s.MAIL_VALIDATE_CERTS,
            TIMEOUT=s.MAIL_TIMEOUT,
        )

    def compose_contact_emails(self, data: Dict[str, str]) -> Tuple[EmailMessage, Optional[EmailMessage]]:
        """
        Build (operator copy, acknowledgment copy) from submitted form data.

        The form only checks the rough shape of the submitter address. When
        the mail library would reject it, the operator copy goes out without
        a Reply-To and there is no acknowledgment copy.
        """
        submitter = data.get("email", "")
        mailable = is_mailable_address(submitter)
        if not mailable:
            logger.warning(
                f"Submitter address {submitter!r} is not deliverable; "
                "sending the operator copy without Reply-To and skipping the acknowledgment"
            )

        subject, text, html = EmailTemplates.operator_notification(data)
        operator_copy = EmailMessage(
            from_name=self.settings.MAIL_FROM_NAME,
            from_address=self.settings.MAIL_FROM,
            to=self.settings.MAIL_TO,
            subject=subject,
            reply_to=submitter if mailable else None,
            text_body=text,
            html_body=html,
        )
        if not mailable:
            return operator_copy, None

        subject, text, html = EmailTemplates.submitter_acknowledgment(data)
        acknowledgment = EmailMessage(
            from_name=self.settings.MAIL_FROM_NAME,
            from_address=self.settings.MAIL_FROM,
            to=submitter,
            subject=subject,
            text_body=text,
            html_body=html,
        )
        return operator_copy, acknowledgment

    async def _send(self, fm: FastMail, email: EmailMessage):
        try:
            message = MessageSchema(
                subject=email.subject,
                recipients=[email.to],
                body=email.html_body,
                alternative_body=email.text_body,
                subtype=MessageType.html,
                multipart_subtype=MultipartSubtypeEnum.alternative,
                reply_to=[email.reply_to] if email.reply_to else [],
            )
            await fm.send_message(message)
            logger.info(f"Email sent to {email.to}: {email.subject}")
        except Exception as e:
            logger.error(f"Failed to send email to {email.to}: {e}", exc_info=True)
            raise MailDeliveryError(str(e), details={"recipient": email.to, "subject": email.subject}) from e

    async def send_contact_emails(self, data: Dict[str, str]) -> None:
        """
        Send the operator copy, then the acknowledgment copy.

        Sends are strictly sequential. If the operator copy fails the
        acknowledgment is never attempted; if the acknowledgment fails the
        operator copy has already gone out.

        Raises:
            ConfigurationError: relay settings are missing or rejected, nothing was sent
            MailDeliveryError: a send failed
        """
        missing = self.settings.missing_settings
        if missing:
            logger.error(f"Mail relay is not configured, missing: {', '.join(missing)}")
            raise ConfigurationError(
                f"Mail relay is not configured: {', '.join(missing)}",
                config_key=missing[0],
                details={"missing": missing},
            )

        operator_copy, acknowledgment = self.compose_contact_emails(data)

        try:
            fm = FastMail(self._connection_config())
        except Exception as e:
            logger.error(f"Mail relay configuration is invalid: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid mail relay configuration: {e}") from e

        await self._send(fm, operator_copy)
        if acknowledgment is not None:
            await self._send(fm, acknowledgment)
