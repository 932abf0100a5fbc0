"""
Server-rendered pages: home, contact form and the guarded confirmation page.
"""

import logging
import os
from datetime import date
from typing import Optional

import httpx
from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from portfolio_site.core.config import CONTACT_API_BASE_URL, RECAPTCHA_SITE_KEY, SITE_NAME, email_settings
from portfolio_site.core.validators import DEPARTMENTS
from portfolio_site.forms.controller import ContactFormController, FormTheme
from portfolio_site.forms.guard import ConfirmationGuard
from portfolio_site.web.session import SessionStorage

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates"))

router = APIRouter(tags=["pages"])


def submit_timeout() -> httpx.Timeout:
    """Long enough for both contact emails to be sent one after the other."""
    return httpx.Timeout(email_settings.MAIL_TIMEOUT * 2)


def _api_client(request: Request) -> httpx.AsyncClient:
    if CONTACT_API_BASE_URL:
        return httpx.AsyncClient(base_url=CONTACT_API_BASE_URL, timeout=submit_timeout())
    # Post to this application's own API without leaving the process
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=request.app), base_url=str(request.base_url), timeout=submit_timeout()
    )


def _render_form(request: Request, form: ContactFormController, notice: Optional[str] = None) -> HTMLResponse:
    this_year = date.today().year
    return templates.TemplateResponse(
        request,
        "contact.html",
        {
            "site_name": SITE_NAME,
            "form": form,
            "notice": notice,
            "departments": DEPARTMENTS,
            "years": range(this_year, this_year - 100, -1),
            "months": range(1, 13),
            "days": range(1, 32),
            "recaptcha_site_key": RECAPTCHA_SITE_KEY,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request):
    """Landing page with the entry point to the contact form."""
    return templates.TemplateResponse(request, "home.html", {"site_name": SITE_NAME})


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request, theme: Optional[str] = None):
    """Render an empty contact form; ``theme`` picks the single or two step layout."""
    return _render_form(request, ContactFormController(theme=FormTheme.parse(theme)))


@router.post("/contact", response_class=HTMLResponse)
async def contact_action(request: Request):
    """
    Handle a contact form post.

    ``action`` is ``next`` or ``back`` to move between steps, anything else
    submits. A successful submission redirects to the confirmation page.
    """
    form_data = await request.form()
    storage = SessionStorage.from_request(request)
    form = ContactFormController.from_form(form_data, theme=FormTheme.parse(form_data.get("theme")), session=storage)

    action = form_data.get("action", "submit")
    if action == "next":
        form.advance()
        return _render_form(request, form)
    if action == "back":
        form.retreat()
        return _render_form(request, form)

    async with _api_client(request) as client:
        result = await form.submit(client)

    if result.success:
        response = RedirectResponse(result.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
        storage.commit(response)
        return response

    return _render_form(request, form, notice=result.notice)


@router.get("/thanks", response_class=HTMLResponse)
async def thanks_page(request: Request):
    """Confirmation page, reachable only once per successful submission."""
    storage = SessionStorage.from_request(request)
    decision = ConfirmationGuard().check(storage)

    if decision.allowed:
        response = templates.TemplateResponse(request, "thanks.html", {"site_name": SITE_NAME})
    else:
        response = RedirectResponse(decision.redirect_to, status_code=status.HTTP_303_SEE_OTHER)

    storage.commit(response)
    return response
