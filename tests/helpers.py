from __future__ import annotations

import inspect
from typing import Any, Callable

import httpx

BASE_URL = "https://boost.test"


class RecordingTransport:
    """Transport stub that records every call and answers through ``handler``."""

    def __init__(self, handler: Callable[[str, dict[str, Any]], Any] | None = None) -> None:
        self.handler = handler or (lambda _url, _options: httpx.Response(200))
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, options: dict[str, Any]) -> Any:
        self.calls.append((url, options))
        result = self.handler(url, options)
        if inspect.isawaitable(result):
            result = await result
        return result

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_options(self) -> dict[str, Any]:
        return self.calls[-1][1]


def json_response(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def text_response(status_code: int, text: str) -> httpx.Response:
    return httpx.Response(status_code, content=text.encode())
