"""
Core configuration settings for the portfolio site and its contact pipeline.
"""

import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

# Application settings
DEBUG = os.environ.get("DEBUG", "false").lower() in ("true", "1", "t")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")  # nosec B104 - Intentional: Server needs to bind to all interfaces
API_PORT = int(os.environ.get("API_PORT", "8000"))
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
SITE_NAME = os.environ.get("SITE_NAME", "Portfolio")
APP_VERSION = "1.0.0"

# CORS: comma separated origins, "*" allows any
CORS_ALLOW_ORIGINS: List[str] = [
    origin.strip() for origin in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

# reCAPTCHA settings (token is forwarded, never verified here)
RECAPTCHA_SITE_KEY = os.environ.get("RECAPTCHA_SITE_KEY", "")

# Contact form settings
# Empty means the form posts to this application's own /api/contact in-process
CONTACT_API_BASE_URL = os.environ.get("CONTACT_API_BASE_URL", "")
SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "false").lower() in ("true", "1", "t")


class EmailSettings(BaseSettings):
    """Outbound SMTP relay settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    # true for implicit TLS (465), false for STARTTLS on other ports
    SMTP_SECURE: bool = False
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    MAIL_FROM: str = ""
    MAIL_FROM_NAME: str = "お問い合わせフォーム"
    # Site operator inbox
    MAIL_TO: str = ""
    MAIL_VALIDATE_CERTS: bool = True
    MAIL_TIMEOUT: int = 60

    @property
    def use_credentials(self) -> bool:
        return bool(self.SMTP_USER and self.SMTP_PASSWORD)

    @property
    def missing_settings(self) -> List[str]:
        """Relay settings that must be set before anything can be sent."""
        return [key for key in ("SMTP_HOST", "MAIL_FROM", "MAIL_TO") if not getattr(self, key)]

    @property
    def is_configured(self) -> bool:
        return not self.missing_settings


email_settings = EmailSettings()
