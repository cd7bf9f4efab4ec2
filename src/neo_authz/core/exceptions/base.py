"""Base exceptions for neo-authz.

All exceptions inherit from NeoAuthzError and carry an error code, a details
mapping and a ``retryable`` flag so callers can tell transient failures
(lock contention, backend outages) from permanent ones.
"""

from typing import Any, Dict, Optional


class NeoAuthzError(Exception):
    """Base exception for all neo-authz errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


def create_error_response(exception: NeoAuthzError) -> Dict[str, Any]:
    """Render an exception as a structured error payload.

    Args:
        exception: The neo-authz exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
            "retryable": exception.retryable,
        }
    }
