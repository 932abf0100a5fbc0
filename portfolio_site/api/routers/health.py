"""
Health check endpoints for monitoring and diagnostics.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status

from portfolio_site.core.config import APP_VERSION, ENVIRONMENT, SITE_NAME
from portfolio_site.core.env_validator import get_environment_info

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns 200 OK if the service is running; mail relay status is informational.
    """
    info = get_environment_info()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SITE_NAME,
        "version": APP_VERSION,
        "environment": ENVIRONMENT,
        "components": {
            "mail_relay": {
                "status": "configured" if info["email_configured"] else "not_configured",
                "credentials": info["smtp_credentials_configured"],
            },
            "recaptcha": {"status": "configured" if info["recaptcha_configured"] else "not_configured"},
        },
    }


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> Dict[str, str]:
    """Liveness probe. Returns 200 if the process is serving requests."""
    return {"status": "alive"}
