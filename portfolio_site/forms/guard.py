"""
Navigation guard for the contact confirmation page.
"""

import logging
from dataclasses import dataclass
from typing import MutableMapping, Optional

from portfolio_site.forms.controller import CONTACT_PATH, FROM_CONTACT_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: Optional[str] = None


class ConfirmationGuard:
    """
    Lets the confirmation page render only right after a real submission.

    The marker is consumed on first read, so a refresh, a bookmark or a shared
    link sends the visitor back to the form. This is a UX guard; anyone can
    set the marker by hand.
    """

    def __init__(self, marker_key: str = FROM_CONTACT_KEY, fallback: str = CONTACT_PATH):
        self.marker_key = marker_key
        self.fallback = fallback

    def check(self, storage: MutableMapping[str, str]) -> GuardDecision:
        marker = storage.pop(self.marker_key, None)
        if not marker:
            logger.debug(f"Confirmation page reached without '{self.marker_key}', redirecting to {self.fallback}")
            return GuardDecision(allowed=False, redirect_to=self.fallback)
        return GuardDecision(allowed=True)
