"""HTTP request pipeline for the gagara-boost API."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping
from urllib.parse import urlencode

from gagara_boost.errors import (
    CancellationError,
    GagaraBoostError,
    ParseError,
    TransportError,
    ValidationError,
    error_from_response,
    parse_error_body,
)
from gagara_boost.multipart import MultipartBody
from gagara_boost.signals import Aborted, create_timeout_signal, race_with_abort
from gagara_boost.types import QueryValue, ResponseLike, Transport, TransportRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000


def _stringify(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_url(base_url: str, path: str, params: Mapping[str, QueryValue] | None = None) -> str:
    """Join ``base_url`` and ``path`` and append every param that is not ``None``."""
    url = f"{base_url}{path}"
    if params:
        query = urlencode([(key, _stringify(value)) for key, value in params.items() if value is not None])
        if query:
            url = f"{url}?{query}"
    return url


def merge_headers(derived: Mapping[str, str], explicit: Mapping[str, str] | None) -> dict[str, str]:
    """Return a new header map where caller-supplied headers beat derived ones.

    Names are compared case-insensitively.
    """
    explicit = dict(explicit or {})
    supplied = {name.lower() for name in explicit}
    merged = {name: value for name, value in derived.items() if name.lower() not in supplied}
    merged.update(explicit)
    return merged


def is_success(response: ResponseLike) -> bool:
    return 200 <= response.status_code < 300


def parse_json(response: ResponseLike) -> Any:
    """Decode a successful response; an empty body decodes to ``None``."""
    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseError(response.status_code) from exc


def raise_for_error(response: ResponseLike) -> None:
    """Raise the typed error for a non-2xx response."""
    if is_success(response):
        return
    body = parse_error_body(response.text)
    raise error_from_response(response.status_code, body)


def create_http_client(
    base_url: str,
    transport: Transport,
    token: str | None = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> dict[str, Any]:
    """Create an HTTP client for the gagara-boost API.

    Returns a dict with build_url/request/request_json/request_bytes and
    get_token/set_token functions.
    """
    if not base_url:
        raise ValidationError("Base URL is required")
    if timeout_ms <= 0:
        raise ValidationError("Timeout must be a positive number of milliseconds")

    resolved_base_url = base_url.rstrip("/")
    state: dict[str, Any] = {"token": token}

    def _build_url(path: str, params: Mapping[str, QueryValue] | None = None) -> str:
        return build_url(resolved_base_url, path, params)

    def _auth_headers() -> dict[str, str]:
        current = state["token"]
        if current:
            return {"Authorization": f"Bearer {current}"}
        return {}

    async def request(
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        params: Mapping[str, QueryValue] | None = None,
    ) -> Any:
        """Send one request through the transport, bounded by the timeout."""
        url = _build_url(path, params)
        final_headers = merge_headers(_auth_headers(), headers)
        timer = create_timeout_signal(timeout_ms)
        options: TransportRequest = {
            "method": method,
            "headers": final_headers,
            "body": body,
            "signal": timer.signal,
        }

        logger.debug("%s %s", method, url)
        try:
            response = await race_with_abort(timer.signal, lambda: transport(url, options))
        except Aborted as exc:
            logger.debug("%s %s aborted after %sms", method, url, timeout_ms)
            raise CancellationError(timeout_ms) from exc
        except GagaraBoostError:
            raise
        except Exception as exc:
            raise TransportError(str(exc) or "Unable to reach server") from exc
        finally:
            timer.cleanup()

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    async def request_json(
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        params: Mapping[str, QueryValue] | None = None,
    ) -> Any:
        """Send a request and decode the JSON answer, raising on non-2xx."""
        payload = body
        if body is not None and not isinstance(body, MultipartBody):
            payload = json.dumps(body, separators=(",", ":"))
            headers = merge_headers({"Content-Type": "application/json"}, headers)

        response = await request(path, method=method, headers=headers, body=payload, params=params)
        raise_for_error(response)
        return parse_json(response)

    async def request_bytes(
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, QueryValue] | None = None,
    ) -> bytes:
        """GET raw bytes, for download endpoints."""
        response = await request(path, headers=headers, params=params)
        raise_for_error(response)
        return bytes(response.content)

    def get_token() -> str | None:
        return state["token"]

    def set_token(new_token: str | None) -> None:
        state["token"] = new_token

    return {
        "base_url": resolved_base_url,
        "timeout_ms": timeout_ms,
        "build_url": _build_url,
        "request": request,
        "request_json": request_json,
        "request_bytes": request_bytes,
        "get_token": get_token,
        "set_token": set_token,
    }
