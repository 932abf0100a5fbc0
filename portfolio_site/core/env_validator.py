"""
Environment variable validator to report missing mail relay configuration.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Tuple

from portfolio_site.core.config import ENVIRONMENT, RECAPTCHA_SITE_KEY, email_settings

# Configure logging
logger = logging.getLogger(__name__)


def _required_env_vars() -> Dict[str, str]:
    # Without these the contact handler cannot deliver anything
    return {
        "SMTP_HOST": email_settings.SMTP_HOST,
        "MAIL_FROM": email_settings.MAIL_FROM,
        "MAIL_TO": email_settings.MAIL_TO,
    }


def _optional_env_vars() -> Dict[str, str]:
    return {
        "SMTP_USER": email_settings.SMTP_USER,
        "SMTP_PASSWORD": email_settings.SMTP_PASSWORD,
        "RECAPTCHA_SITE_KEY": RECAPTCHA_SITE_KEY,
    }


def validate_environment_variables(strict: bool = False) -> Tuple[bool, List[str]]:
    """
    Validate that the mail relay environment variables are set.

    Args:
        strict: If True, exit on missing required vars. If False, just warn.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    # Skip validation in test environment
    if ENVIRONMENT == "test" or os.environ.get("PYTEST_CURRENT_TEST"):
        return True, []

    errors = []
    warnings = []

    for var_name, var_value in _required_env_vars().items():
        if not var_value or var_value.strip() == "":
            errors.append(f"Required environment variable '{var_name}' is not set or empty")

    for var_name, var_value in _optional_env_vars().items():
        if not var_value or var_value.strip() == "":
            warnings.append(f"Optional environment variable '{var_name}' is not set")

    if errors:
        logger.error("=" * 80)
        logger.error("MAIL RELAY CONFIGURATION INCOMPLETE")
        logger.error("=" * 80)
        for error in errors:
            logger.error(error)
        logger.error("Contact submissions will fail until these are set in your .env file")
        logger.error("=" * 80)

    if warnings:
        for warning in warnings:
            logger.warning(warning)

    if not errors and not warnings:
        logger.info("All environment variables are properly configured")

    is_valid = len(errors) == 0

    if not is_valid and strict:
        logger.critical("Application cannot start with missing required environment variables")
        sys.exit(1)

    return is_valid, errors + warnings


def get_environment_info() -> Dict[str, Any]:
    """Get information about the current environment configuration."""
    return {
        "environment": ENVIRONMENT,
        "email_configured": email_settings.is_configured,
        "smtp_credentials_configured": email_settings.use_credentials,
        "smtp_secure": email_settings.SMTP_SECURE,
        "recaptcha_configured": bool(RECAPTCHA_SITE_KEY),
    }


def print_environment_summary():
    """Log a summary of environment configuration."""
    info = get_environment_info()

    logger.info("=" * 80)
    logger.info("ENVIRONMENT CONFIGURATION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Environment: {info['environment']}")
    logger.info(f"Mail relay: {'configured' if info['email_configured'] else 'NOT configured'}")
    logger.info(f"SMTP credentials: {'yes' if info['smtp_credentials_configured'] else 'no'}")
    logger.info(f"SMTP implicit TLS: {info['smtp_secure']}")
    logger.info(f"reCAPTCHA site key: {'yes' if info['recaptcha_configured'] else 'no'}")
    logger.info("=" * 80)
