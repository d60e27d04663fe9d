"""Domain errors for the 20i API client and translation of transport failures.

Every failure that reaches a tool caller is a ``TwentyIError`` carrying one of
a fixed set of machine-readable codes. ``handle_api_error`` classifies raw
failures from the HTTP layer; ``validate_api_response`` rejects success
responses whose body reports an error.
"""

from __future__ import annotations

import errno
import socket
from collections.abc import Mapping
from typing import Any, NoReturn, Optional

import httpx
import requests

AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"
API_ERROR = "API_ERROR"
NOT_FOUND = "NOT_FOUND"
RATE_LIMIT = "RATE_LIMIT"
NETWORK_ERROR = "NETWORK_ERROR"
TIMEOUT_ERROR = "TIMEOUT_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_CODES = frozenset(
    {
        AUTHENTICATION_ERROR,
        VALIDATION_ERROR,
        API_ERROR,
        NOT_FOUND,
        RATE_LIMIT,
        NETWORK_ERROR,
        TIMEOUT_ERROR,
        UNKNOWN_ERROR,
    }
)

# errno-style names reported by the transport layer
NETWORK_FAILURE_CODES = frozenset({"ECONNREFUSED", "ENOTFOUND"})
TIMEOUT_FAILURE_CODES = frozenset({"ECONNABORTED"})


class TwentyIError(Exception):
    """Base exception for 20i API errors."""

    def __init__(
        self,
        message: str,
        code: str = UNKNOWN_ERROR,
        status_code: Optional[int] = None,
    ):
        if code not in ERROR_CODES:
            raise ValueError(
                f"Invalid error code '{code}'. Must be one of: {', '.join(sorted(ERROR_CODES))}"
            )
        super().__init__(message)
        self._message = message
        self._code = code
        self._status_code = status_code

    @property
    def message(self) -> str:
        return self._message

    @property
    def code(self) -> str:
        return self._code

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self._message!r}, "
            f"code={self._code!r}, status_code={self._status_code!r})"
        )

    def __reduce__(self):
        # Variants take different constructor arguments; rebuild from the fields
        return _rebuild_error, (type(self), self._message, self._code, self._status_code)


def _rebuild_error(cls, message, code, status_code):
    error = cls.__new__(cls)
    TwentyIError.__init__(error, message, code, status_code)
    return error


class AuthenticationError(TwentyIError):
    """Credentials rejected by the API (401)."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, AUTHENTICATION_ERROR, 401)


class ValidationError(TwentyIError):
    """Tool arguments failed validation (400)."""

    def __init__(self, message: str):
        super().__init__(message, VALIDATION_ERROR, 400)


class ApiError(TwentyIError):
    """API answered with an error status or an error payload."""

    def __init__(self, message: str, status_code: Optional[int]):
        super().__init__(message, API_ERROR, status_code)


class NotFoundError(TwentyIError):
    """Requested resource does not exist (404).

    The message defaults to "{resource} not found"; pass ``message`` to
    replace it entirely.
    """

    def __init__(self, resource: str = "Resource", *, message: Optional[str] = None):
        super().__init__(message or f"{resource} not found", NOT_FOUND, 404)


class RateLimitError(TwentyIError):
    """API rate limit hit (429)."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, RATE_LIMIT, 429)


# ---------------------------------------------------------------------------
# Failure inspection helpers
# ---------------------------------------------------------------------------


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an object without ever raising."""
    if obj is None:
        return None
    try:
        if isinstance(obj, Mapping):
            return obj.get(name)
        return getattr(obj, name, None)
    except Exception:  # noqa: BLE001 - properties on foreign objects may raise
        return None


def _response_status(response: Any) -> Optional[int]:
    for name in ("status_code", "status"):
        value = _field(response, name)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _response_body(response: Any) -> Any:
    if isinstance(response, Mapping):
        return response.get("data", response.get("body"))
    parse = _field(response, "json")
    if callable(parse):
        try:
            return parse()
        except Exception:  # noqa: BLE001 - non-JSON error bodies are common
            return None
    return _field(response, "data")


def _provider_message(response: Any) -> str:
    body = _response_body(response)
    message = _field(body, "message") if isinstance(body, Mapping) else None
    if message:
        return str(message)
    for name in ("reason_phrase", "reason", "status_text", "statusText"):
        text = _field(response, name)
        if text:
            return str(text)
    return "Unknown API error"


def _original_message(error: Any) -> str:
    message = _field(error, "message")
    if isinstance(message, str) and message:
        return message
    if isinstance(error, BaseException):
        return str(error)
    return ""


def _machine_code(error: Any) -> Optional[str]:
    """Resolve the errno-style code of a transport failure."""
    code = _field(error, "code")
    if isinstance(code, str):
        return code
    if isinstance(error, (httpx.TimeoutException, requests.Timeout, TimeoutError)):
        return "ECONNABORTED"
    if isinstance(error, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(error, (httpx.ConnectError, requests.ConnectionError, ConnectionRefusedError)):
        return "ECONNREFUSED"
    if isinstance(error, OSError) and error.errno is not None:
        return errno.errorcode.get(error.errno)
    return None


def handle_api_error(error: Any, context: str) -> NoReturn:
    """Classify a failed outbound call and raise the matching ``TwentyIError``.

    Error mapping (first match wins):
    - response 401 -> AuthenticationError
    - response 404 -> NotFoundError ("Resource in {context}")
    - response 429 -> RateLimitError
    - any other response status -> ApiError with that status
    - ECONNREFUSED / ENOTFOUND -> NETWORK_ERROR
    - ECONNABORTED (timeouts) -> TIMEOUT_ERROR
    - anything else -> UNKNOWN_ERROR

    Never returns.
    """
    cause = error if isinstance(error, BaseException) else None

    response = _field(error, "response")
    status = _response_status(response)
    if status is not None:
        message = _provider_message(response)
        if status == 401:
            raise AuthenticationError(f"Authentication failed in {context}: {message}") from cause
        if status == 404:
            raise NotFoundError(message=f"Resource in {context}") from cause
        if status == 429:
            raise RateLimitError(f"Rate limit exceeded in {context}: {message}") from cause
        raise ApiError(f"API error in {context}: {message}", status) from cause

    code = _machine_code(error)
    if code in NETWORK_FAILURE_CODES:
        raise TwentyIError(
            f"Network error in {context}: {_original_message(error)}", NETWORK_ERROR
        ) from cause

    if code in TIMEOUT_FAILURE_CODES:
        raise TwentyIError(f"Request timeout in {context}", TIMEOUT_ERROR) from cause

    detail = _original_message(error) or str(error)
    raise TwentyIError(f"Unexpected error in {context}: {detail}", UNKNOWN_ERROR) from cause


def validate_api_response(response: Any, context: str) -> None:
    """Raise ApiError when a success response carries an error payload."""
    if response is None or (isinstance(response, (str, bytes)) and not response.strip()):
        raise ApiError(f"Empty response from {context}", 500)

    if not isinstance(response, Mapping):
        return

    if response.get("error"):
        status = response.get("status")
        if not isinstance(status, int) or isinstance(status, bool) or not status:
            status = 500
        raise ApiError(f"API returned error in {context}: {response['error']}", status)

    if response.get("status") == "error":
        raise ApiError(
            f"API returned error status in {context}: {response.get('message') or 'Unknown error'}",
            500,
        )


__all__ = [
    "ERROR_CODES",
    "AUTHENTICATION_ERROR",
    "VALIDATION_ERROR",
    "API_ERROR",
    "NOT_FOUND",
    "RATE_LIMIT",
    "NETWORK_ERROR",
    "TIMEOUT_ERROR",
    "UNKNOWN_ERROR",
    "TwentyIError",
    "AuthenticationError",
    "ValidationError",
    "ApiError",
    "NotFoundError",
    "RateLimitError",
    "handle_api_error",
    "validate_api_response",
]
