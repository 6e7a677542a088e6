"""gagara-boost SDK Error Classes."""

from __future__ import annotations

import json
from typing import Any

from gagara_boost.types import ErrorCode


class GagaraBoostError(Exception):
    """Base error for all gagara-boost SDK errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = "UNKNOWN_ERROR",
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.body = body


class TransportError(GagaraBoostError):
    """Raised when the transport fails before a response is obtained."""

    def __init__(self, message: str = "Unable to reach server") -> None:
        super().__init__(message, "NETWORK_ERROR")


class CancellationError(GagaraBoostError):
    """Raised when a request is aborted because its timeout elapsed."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timed out after {timeout_ms}ms", "TIMEOUT")
        self.timeout_ms = timeout_ms


class ParseError(GagaraBoostError):
    """Raised when a successful response does not carry valid JSON."""

    def __init__(self, status_code: int, message: str = "Failed to parse JSON response") -> None:
        super().__init__(message, "PARSE_ERROR", status_code)


class ValidationError(GagaraBoostError):
    """Raised when input validation fails before any request is made."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "VALIDATION_ERROR")


class HTTPError(GagaraBoostError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Any = None, code: ErrorCode | None = None) -> None:
        super().__init__(message, code or _error_code_from_status(status_code), status_code, body)


class AuthenticationError(HTTPError):
    """Raised when the server rejects the credential (401/403)."""


class NotFoundError(HTTPError):
    """Raised when a resource is not found (404)."""


def _error_code_from_status(status_code: int) -> ErrorCode:
    """Map HTTP status code to error code."""
    match status_code:
        case 401 | 403:
            return "UNAUTHORIZED"
        case 404:
            return "NOT_FOUND"
        case 400 | 422:
            return "INVALID_REQUEST"
        case _ if status_code >= 500:
            return "SERVER_ERROR"
        case _:
            return "HTTP_ERROR"


def parse_error_body(text: str) -> Any:
    """Turn a raw error body into its structured form.

    Empty text has no structured body. Text that is not JSON is kept verbatim
    under ``detail``.
    """
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return {"detail": text}


def error_message(status_code: int, body: Any) -> str:
    """Pick a human-readable message: ``detail``, then ``error``, then the status."""
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        error = body.get("error")
        if isinstance(error, str):
            return error
    return f"Request failed: {status_code}"


def error_from_response(status_code: int, body: Any) -> HTTPError:
    """Create an error from an API response."""
    message = error_message(status_code, body)
    if status_code in (401, 403):
        return AuthenticationError(message, status_code, body)
    if status_code == 404:
        return NotFoundError(message, status_code, body)
    return HTTPError(message, status_code, body)
