"""
Contact submission schemas for API requests and responses.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Field keys accepted from the contact form, in display order
CONTACT_FIELDS = (
    "name",
    "email",
    "message",
    "birthdateYear",
    "birthdateMonth",
    "birthdateDay",
    "departmentName",
    "address",
    "termOfService",
)


class ContactSubmission(BaseModel):
    """
    Payload posted by the contact form.

    Every field defaults to an empty string so that the handler, not the
    schema, decides which omissions are a bad request. Keys outside the
    declared fields are dropped and never reach the email templates.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = Field("", description="Submitter name")
    email: str = Field("", description="Submitter email address (reply-to of the operator copy)")
    message: str = Field("", description="Inquiry body")
    birthdateYear: str = Field("", description="Birth year, all-or-nothing with month and day")
    birthdateMonth: str = Field("", description="Birth month")
    birthdateDay: str = Field("", description="Birth day")
    departmentName: str = Field("", description="Department the inquiry is addressed to")
    address: str = Field("", description="Postal address")
    termOfService: str = Field("", description='"agreed" when the terms checkbox was ticked')
    recaptchaToken: str = Field("", description="Opaque reCAPTCHA token, forwarded but not verified")

    @field_validator("*", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat JSON null the same as an omitted field."""
        return "" if v is None else v

    def template_data(self) -> Dict[str, str]:
        """Field values handed to the email templates."""
        return {field: getattr(self, field) for field in CONTACT_FIELDS}


class ContactResponse(BaseModel):
    """Schema for every contact endpoint response, success or failure."""

    message: str
