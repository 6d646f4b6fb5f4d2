"""Shared error handling infrastructure for Ferret.

Provides the fixed error taxonomy surfaced by the registry and the search
orchestrator, HTTP status mapping, and user-facing error messages.
"""

import logging
from http import HTTPStatus
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class FerretError(Exception):
    """Base exception for all Ferret errors.

    All Ferret errors include:
    - metadata: Additional context for debugging
    - user_message: Message safe to show on a terminal or in an HTTP body
    - http_status: Outcome status code, or None when the error carries none
    """

    http_status: Optional[int] = None

    def __init__(
        self,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}
        self.user_message = user_message or message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "http_status": self.http_status,
            "metadata": self.metadata,
        }


# === Registry errors ===

class RegistryError(FerretError):
    """Base class for provider registry failures."""
    pass


class InvalidProviderError(RegistryError):
    """The object does not implement the search capability, or names no known provider."""
    http_status = HTTPStatus.BAD_REQUEST


class ProviderNotFoundError(InvalidProviderError):
    """No provider is registered under the requested name."""
    pass


class InvalidNameError(RegistryError):
    """A provider was registered without a name."""
    pass


class DuplicateProviderError(RegistryError):
    """A provider with the same name is already registered."""
    pass


# === Query errors ===

class QueryError(FerretError):
    """Base class for errors raised while running a query."""
    pass


class MissingKeywordError(QueryError):
    http_status = HTTPStatus.BAD_REQUEST


class InvalidPageError(QueryError):
    http_status = HTTPStatus.BAD_REQUEST


class SearchTimeoutError(QueryError):
    """The backend did not answer before the query deadline."""
    http_status = HTTPStatus.GATEWAY_TIMEOUT


class SearchCanceledError(QueryError):
    """The query was canceled before the backend answered."""
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR


class BackendFailureError(QueryError):
    """The backend failed; wraps the backend's own message."""
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR


class InvalidGotoIndexError(QueryError):
    pass


class GotoCommandFailedError(QueryError):
    pass


# === Backend errors ===

class ProviderError(FerretError):
    """Raised by search backends. Never reaches callers of the orchestrator raw."""
    pass


def map_to_http_status(exc: Exception) -> int:
    """Map exception to the HTTP status code reported for it."""
    if isinstance(exc, FerretError) and exc.http_status is not None:
        return int(exc.http_status)
    if isinstance(exc, ValueError):
        return int(HTTPStatus.BAD_REQUEST)
    if isinstance(exc, TimeoutError):
        return int(HTTPStatus.GATEWAY_TIMEOUT)
    return int(HTTPStatus.INTERNAL_SERVER_ERROR)


def format_user_error(error: Exception, include_details: bool = False) -> str:
    """Convert exception to user-facing error message (no stack traces)."""
    if isinstance(error, SearchTimeoutError):
        return "The search took too long. Try again or raise the timeout."
    if isinstance(error, BackendFailureError) and not include_details:
        return "The search provider failed. It may be unavailable."

    if isinstance(error, FerretError):
        return error.user_message

    if isinstance(error, ValueError):
        return f"Invalid input: {str(error)}"
    if isinstance(error, ConnectionError):
        return "Connection failed. Please check your network connection."

    # Generic fallback
    if include_details:
        return f"Error ({type(error).__name__}): {str(error)}"
    else:
        return "An unexpected error occurred."
