"""Default transport: sends requests through an ``httpx.AsyncClient``."""

from __future__ import annotations

import httpx

from gagara_boost.multipart import MultipartBody
from gagara_boost.types import TransportRequest


class HttpxTransport:
    """Callable transport ``(url, options) -> httpx.Response``.

    Timeouts are enforced by the request executor, so the underlying client is
    created without one. ``options["signal"]`` is not read here: on abort the
    executor cancels the task awaiting the request, which stops httpx. A client
    passed in by the caller is left open on ``aclose()``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    async def __call__(self, url: str, options: TransportRequest) -> httpx.Response:
        body = options.get("body")
        kwargs: dict = {"headers": options.get("headers") or {}}
        if isinstance(body, MultipartBody):
            kwargs["files"] = body.files
            kwargs["data"] = body.fields
        elif body is not None:
            kwargs["content"] = body

        return await self._client.request(options.get("method", "GET"), url, **kwargs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def create_httpx_transport(client: httpx.AsyncClient | None = None) -> HttpxTransport:
    """Create the default httpx-backed transport."""
    return HttpxTransport(client)
