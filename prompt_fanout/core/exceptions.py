"""Custom exceptions for prompt-fanout.

Exception Hierarchy:
    FanoutServiceError (base)
    ├── RequestValidationError   (400)
    ├── MethodNotAllowedError    (405)
    ├── ConfigurationError       (500)
    └── UpstreamError            (500)

All custom exceptions end in "Error".
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Machine-readable error codes used in logs."""

    FANOUT_ERROR = "FANOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class FanoutServiceError(Exception):
    """Base exception for all prompt-fanout errors.

    Attributes:
        message: Text returned to the client as {"error": message}.
        error_code: ErrorCode value, logged with server errors.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.FANOUT_ERROR,
        **kwargs: Any,
    ) -> None:
        """Extra keyword arguments become attributes (e.g. model_name=...)."""
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Request Errors
# =============================================================================


class RequestValidationError(FanoutServiceError):
    """Inbound request failed validation (e.g. missing prompt).

    Attributes:
        field: Name of the invalid field.
    """

    def __init__(self, message: str, field: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, error_code=ErrorCode.VALIDATION_ERROR, **kwargs)
        self.field = field


class MethodNotAllowedError(FanoutServiceError):
    """Inbound request used an HTTP method the endpoint does not serve.

    Attributes:
        method: The rejected HTTP method.
    """

    def __init__(self, message: str, method: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, error_code=ErrorCode.METHOD_NOT_ALLOWED, **kwargs)
        self.method = method


# =============================================================================
# Service Errors
# =============================================================================


class ConfigurationError(FanoutServiceError):
    """Service configuration is invalid or incomplete.

    Raised for a missing provider credential or an unreadable model
    registry file.

    Attributes:
        setting: Settings field the problem is about (e.g. "hf_api_key").
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            **kwargs,
        )
        self.setting = setting


class UpstreamError(FanoutServiceError):
    """Inference endpoint answered with a non-success HTTP status.

    Attributes:
        model_name: Model the call was made for.
        status_code: HTTP status returned by the endpoint.
        body: Response body text.
    """

    def __init__(
        self,
        message: str,
        model_name: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize UpstreamError.

        Args:
            message: Error message.
            model_name: Model identifier the call targeted.
            status_code: Upstream HTTP status code.
            body: Upstream response body text.
            **kwargs: Additional attributes.
        """
        super().__init__(
            message,
            error_code=ErrorCode.UPSTREAM_ERROR,
            **kwargs,
        )
        self.model_name = model_name
        self.status_code = status_code
        self.body = body
