"""
Contact form controller.

Holds the raw form input for one page view, runs the client-side rules,
drives the optional two-step flow and submits to the contact API. The same
controller backs every visual variant of the form; only the theme differs.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple

import httpx

from portfolio_site.api.schemas.contact import CONTACT_FIELDS
from portfolio_site.core.exceptions import ValidationError
from portfolio_site.core.validators import (
    MESSAGES,
    TERMS_AGREED,
    validate_birthdate,
    validate_department,
    validate_email,
)

logger = logging.getLogger(__name__)

CONTACT_PATH = "/contact"
CONFIRMATION_PATH = "/thanks"
CONTACT_ENDPOINT = "/api/contact"

# Session storage key marking a legitimate arrival on the confirmation page
FROM_CONTACT_KEY = "fromContact"

SUBMIT_FAILED_NOTICE = "送信に失敗しました。もう一度お試しください。"

CHECKBOX_FIELDS = frozenset({"termOfService"})
CHECKED_VALUES = frozenset({TERMS_AGREED, "on", "true", "1"})

# Which inputs and which error keys belong to each step of the stepped form
STEP_FIELDS: Dict[int, Tuple[str, ...]] = {
    1: ("name", "email", "birthdateYear", "birthdateMonth", "birthdateDay", "departmentName", "address"),
    2: ("message", "termOfService"),
}
STEP_ERROR_KEYS: Dict[int, Tuple[str, ...]] = {
    1: ("name", "email", "birthdateMonth", "departmentName", "address"),
    2: ("message", "termOfService", "recaptcha"),
}


class FormTheme(str, Enum):
    STANDARD = "standard"
    STEPPED = "stepped"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FormTheme":
        """Unknown or missing themes fall back to the single-step form."""
        try:
            return cls(value)
        except ValueError:
            return cls.STANDARD


@dataclass
class SubmitResult:
    success: bool
    redirect_to: Optional[str] = None
    notice: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)


class ContactFormController:
    """Form state and behaviour for a single contact form page view."""

    def __init__(
        self,
        theme: FormTheme = FormTheme.STANDARD,
        session: Optional[MutableMapping[str, str]] = None,
    ):
        self.theme = FormTheme(theme)
        self.session: MutableMapping[str, str] = session if session is not None else {}
        self.data: Dict[str, str] = {name: "" for name in CONTACT_FIELDS}
        self.recaptcha_token = ""
        self.errors: Dict[str, str] = {}
        self.step = 1
        self.is_submitting = False

    @classmethod
    def from_form(
        cls,
        form: Mapping[str, Any],
        theme: FormTheme = FormTheme.STANDARD,
        session: Optional[MutableMapping[str, str]] = None,
    ) -> "ContactFormController":
        """Rebuild a controller from posted form fields. Unknown keys are ignored."""
        controller = cls(theme=theme, session=session)
        for name in CONTACT_FIELDS:
            controller.update_field(name, form.get(name, ""))
        controller.set_recaptcha_token(form.get("g-recaptcha-response") or form.get("recaptchaToken") or "")

        try:
            step = int(form.get("step") or 1)
        except (TypeError, ValueError):
            step = 1
        controller.step = min(max(step, 1), controller.total_steps)
        return controller

    @property
    def total_steps(self) -> int:
        return 2 if self.theme == FormTheme.STEPPED else 1

    @property
    def visible_fields(self) -> Tuple[str, ...]:
        if self.theme == FormTheme.STEPPED:
            return STEP_FIELDS[self.step]
        return CONTACT_FIELDS

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    def update_field(self, name: str, value: Any) -> None:
        """
        Store raw input for a known field.

        Checkbox fields hold "agreed" when checked and "" otherwise.

        Raises:
            ValidationError: ``name`` is not one of the contact form fields
        """
        if name not in self.data:
            raise ValidationError(f"Unknown form field: {name}", field=name)

        if name in CHECKBOX_FIELDS:
            checked = value is True or (isinstance(value, str) and value.lower() in CHECKED_VALUES)
            self.data[name] = TERMS_AGREED if checked else ""
        else:
            self.data[name] = "" if value is None else str(value)

    def set_recaptcha_token(self, token: Optional[str]) -> None:
        self.recaptcha_token = token or ""

    def validate(self, step: Optional[int] = None) -> Dict[str, str]:
        """
        Run client-side rules and return {field: message}.

        With no step every rule runs. Step 1 covers identity and contact
        details, step 2 covers the message, consent and reCAPTCHA.
        """
        if step not in (None, 1, 2):
            raise ValueError(f"Unknown form step: {step}")

        d = self.data
        errors: Dict[str, str] = {}

        if step in (None, 1):
            if not d["name"]:
                errors["name"] = MESSAGES["name"]
            email_error = validate_email(d["email"])
            if email_error:
                errors["email"] = email_error
            birthdate_error = validate_birthdate(d["birthdateYear"], d["birthdateMonth"], d["birthdateDay"])
            if birthdate_error:
                errors["birthdateMonth"] = birthdate_error
            department_error = validate_department(d["departmentName"])
            if department_error:
                errors["departmentName"] = department_error
            if not d["address"]:
                errors["address"] = MESSAGES["address"]

        if step in (None, 2):
            if not d["message"]:
                errors["message"] = MESSAGES["message"]
            if d["termOfService"] != TERMS_AGREED:
                errors["termOfService"] = MESSAGES["termOfService"]
            if not self.recaptcha_token:
                errors["recaptcha"] = MESSAGES["recaptcha"]

        self.errors = errors
        return errors

    def advance(self) -> bool:
        """Move to the next step if the current one validates."""
        if self.step >= self.total_steps:
            return False
        if self.validate(self.step):
            return False
        self.step += 1
        return True

    def retreat(self) -> bool:
        """Move back one step. Going back never validates."""
        if self.step <= 1:
            return False
        self.step -= 1
        self.errors = {}
        return True

    def payload(self) -> Dict[str, str]:
        return {**self.data, "recaptchaToken": self.recaptcha_token}

    def _first_step_with_errors(self) -> int:
        for step, keys in STEP_ERROR_KEYS.items():
            if any(key in self.errors for key in keys):
                return step
        return self.step

    async def submit(self, client: httpx.AsyncClient) -> SubmitResult:
        """
        Validate and post the form to the contact API.

        On success the confirmation marker is written to session storage.
        On failure the form data is left untouched so the user can retry.
        """
        errors = self.validate()
        if errors:
            if self.theme == FormTheme.STEPPED:
                self.step = self._first_step_with_errors()
            return SubmitResult(success=False, errors=errors)

        self.is_submitting = True
        try:
            response = await client.post(CONTACT_ENDPOINT, json=self.payload())
        except httpx.HTTPError as e:
            logger.error(f"Contact submission could not reach the API: {e}", exc_info=True)
            return SubmitResult(success=False, notice=SUBMIT_FAILED_NOTICE)
        finally:
            self.is_submitting = False

        if response.is_success:
            self.session[FROM_CONTACT_KEY] = "true"
            return SubmitResult(success=True, redirect_to=CONFIRMATION_PATH)

        logger.warning(
            f"Contact submission failed with HTTP {response.status_code}: {_response_message(response)}"
        )
        return SubmitResult(success=False, notice=SUBMIT_FAILED_NOTICE)


def _response_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "エラーが発生しました"
