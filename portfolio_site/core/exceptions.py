"""
Custom exception classes for standardized error handling.
"""

from typing import Optional, Dict, Any


class AppException(Exception):
    """Base exception class for application errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or "APP_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging and internal reporting."""
        return {"error": self.error_code, "message": self.message, "details": self.details}

    def to_response(self) -> Dict[str, Any]:
        """Public response body. Only the message is exposed to callers."""
        return {"message": self.message}


class ValidationError(AppException):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="VALIDATION_ERROR", details={"field": field, **(details or {})})


class ExternalServiceError(AppException):
    """Exception raised when external service calls fail."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{service} error: {message}",
            error_code="EXTERNAL_SERVICE_ERROR",
            details={"service": service, **(details or {})},
        )


class MailDeliveryError(ExternalServiceError):
    """Exception raised when the SMTP relay rejects or fails a send.

    The public message is fixed; transport detail lives in ``details`` and in
    the server log only.
    """

    PUBLIC_MESSAGE = "メール送信に失敗しました"

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(service="SMTP", message=reason, details=details)
        self.reason = reason
        self.message = self.PUBLIC_MESSAGE
        self.error_code = "MAIL_DELIVERY_ERROR"


class ConfigurationError(AppException):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message, error_code="CONFIGURATION_ERROR", details={"config_key": config_key, **(details or {})}
        )


class InvalidStateTransition(AppException):
    """Exception raised when a submission attempt is moved along an edge it does not have."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot move submission from '{current}' to '{target}'",
            error_code="INVALID_STATE_TRANSITION",
            details={"current": current, "target": target},
        )
