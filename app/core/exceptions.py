"""
Application exceptions rendered by the centralized error handlers
"""

from typing import Optional, Dict, Any


class BaseAppException(Exception):
    """Base application exception"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# === Authentication ===
class AuthenticationError(BaseAppException):
    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 401, "AUTHENTICATION_ERROR", details)


# === Validation ===
class ValidationError(BaseAppException):
    """Invalid input data"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "VALIDATION_ERROR", details)


# === Business rules ===
class BusinessLogicError(BaseAppException):
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
        error_code: str = "BUSINESS_LOGIC_ERROR",
    ):
        super().__init__(message, status_code, error_code, details)


class EnrollmentDeniedError(BusinessLogicError):
    """User may not enroll; message is the human-readable reason"""

    def __init__(
        self,
        reason: str,
        check: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 403,
    ):
        error_details = {"check": check}
        if details:
            error_details.update(details)
        super().__init__(reason, error_details, status_code, "ENROLLMENT_DENIED")


# === Configuration ===
class ConfigurationError(BaseAppException):
    def __init__(self, parameter: str, message: str = None):
        message = (
            message or f"Configuration parameter '{parameter}' is invalid or missing"
        )
        details = {"parameter": parameter}
        super().__init__(message, 500, "CONFIGURATION_ERROR", details)
