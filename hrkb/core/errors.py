"""
Application errors for clean adapter error handling.

ConfigurationError: a required identifier (knowledge base, data source) is missing.
InvalidInputError: the caller sent a malformed request; reported as a client error.
RemoteServiceError: the managed knowledge-base API call failed.
"""

from typing import Any


class ConfigurationError(Exception):
    """Raised when a required configuration value is missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(Exception):
    """Raised when a request does not have the expected shape."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RemoteServiceError(Exception):
    """Raised when the managed knowledge-base service call fails."""

    def __init__(self, message: str, operation: str = "") -> None:
        self.message = message
        self.operation = operation
        super().__init__(message)


def error_message(exc: BaseException | None, fallback: str = "Unknown error") -> str:
    """Best-effort human readable message for an exception."""
    if exc is None:
        return fallback
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    # botocore ClientError keeps the service message in the parsed response
    response: Any = getattr(exc, "response", None)
    if isinstance(response, dict):
        service_message = (response.get("Error") or {}).get("Message")
        if service_message:
            return str(service_message)
    return str(exc) or fallback
