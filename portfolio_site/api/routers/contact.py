"""
Contact submission API routes.
"""

from fastapi import APIRouter, Depends, status

from portfolio_site.api.schemas.contact import ContactResponse, ContactSubmission
from portfolio_site.api.services.contact import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])

SUCCESS_MESSAGE = "送信に成功しました"


def get_contact_service() -> ContactService:
    """A fresh service per request; nothing is shared between submissions."""
    return ContactService()


@router.post("", response_model=ContactResponse, status_code=status.HTTP_200_OK)
async def submit_contact(
    submission: ContactSubmission,
    contact_service: ContactService = Depends(get_contact_service),
):
    """
    Accept a contact form submission.

    Sends the inquiry to the site operator and a receipt to the submitter.
    Validation and delivery failures are raised as application exceptions
    and rendered by the handlers registered in ``portfolio_site.main``.
    """
    await contact_service.submit(submission)
    return ContactResponse(message=SUCCESS_MESSAGE)
