"""
Error taxonomy for the RMA payment gateway client.

Every failure raised by the package derives from :class:`GatewayError`. The
``kind`` attribute lets callers branch without ``isinstance`` chains and
``retryable`` marks the only class that is safe to retry automatically.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

__all__ = [
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "GatewayError",
    "InvalidParameterError",
    "NetworkError",
    "StepAPIError",
    "StepNetworkError",
    "StepValidationError",
    "wrap_step_error",
]


class GatewayError(Exception):
    """Base class for all gateway failures."""

    kind = "gateway"
    retryable = False

    def __init__(
        self,
        message: str,
        *,
        response_code: Optional[str] = None,
        response_description: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response_code = response_code
        self.response_description = response_description
        self.status_code = status_code
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "response_code": self.response_code,
            "response_description": self.response_description,
            "status_code": self.status_code,
            "retryable": self.retryable,
        }


class ConfigurationError(GatewayError):
    """Raised when the gateway configuration is missing or invalid."""

    kind = "configuration"


class InvalidParameterError(GatewayError):
    """Raised when a request argument fails validation, locally or remotely."""

    kind = "validation"

    def __init__(self, message: str, *, field: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.field = field


class AuthenticationError(GatewayError):
    """Raised when the gateway rejects a step or returns no result payload."""

    kind = "business"


class NetworkError(GatewayError):
    """Raised on connection failures, timeouts and unexpected HTTP statuses."""

    kind = "network"
    retryable = True


class APIError(GatewayError):
    """Raised when the gateway answers with an HTTP 5xx."""

    kind = "api"


class StepValidationError(AuthenticationError, InvalidParameterError):
    """A step failed because an argument was rejected, locally or by a 4xx."""

    kind = InvalidParameterError.kind
    retryable = False


class StepNetworkError(AuthenticationError, NetworkError):
    """A step failed in transport; the only step failure worth retrying."""

    kind = NetworkError.kind
    retryable = True


class StepAPIError(AuthenticationError, APIError):
    """A step failed because the gateway answered with an HTTP 5xx."""

    kind = APIError.kind
    retryable = False


_STEP_WRAPPERS: Dict[Type[GatewayError], Type[AuthenticationError]] = {
    InvalidParameterError: StepValidationError,
    NetworkError: StepNetworkError,
    APIError: StepAPIError,
}


def wrap_step_error(prefix: str, exc: BaseException) -> AuthenticationError:
    """
    Wrap ``exc`` into the single error surface exposed by a protocol step.

    The wrapper is always an :class:`AuthenticationError`. When the cause is a
    validation, network or API error the wrapper additionally inherits that
    class, so ``except NetworkError`` still matches a timed-out step.
    """
    wrapper_cls: Type[AuthenticationError] = AuthenticationError
    for cause_cls, candidate in _STEP_WRAPPERS.items():
        if isinstance(exc, cause_cls):
            wrapper_cls = candidate
            break

    message = f"{prefix}: {exc}"
    if not isinstance(exc, GatewayError):
        return wrapper_cls(message, cause=exc)

    wrapped = wrapper_cls(
        message,
        response_code=exc.response_code,
        response_description=exc.response_description,
        status_code=exc.status_code,
        cause=exc,
    )
    if isinstance(wrapped, InvalidParameterError):
        wrapped.field = getattr(exc, "field", None)
    return wrapped
