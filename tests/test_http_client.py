from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from gagara_boost import (
    CancellationError,
    GagaraBoostError,
    ParseError,
    TransportError,
    ValidationError,
    build_url,
    create_http_client,
    encode_multipart,
)
from gagara_boost.http_client import merge_headers

from helpers import BASE_URL, RecordingTransport, json_response, text_response


def test_build_url_skips_absent_params() -> None:
    assert build_url(BASE_URL, "/items", {"a": "1", "b": None}) == f"{BASE_URL}/items?a=1"


def test_build_url_without_params_or_with_only_absent_ones() -> None:
    assert build_url(BASE_URL, "/items") == f"{BASE_URL}/items"
    assert build_url(BASE_URL, "/items", {"workspace_id": None}) == f"{BASE_URL}/items"


def test_build_url_keeps_insertion_order_and_stringifies_values() -> None:
    url = build_url(BASE_URL, "/items", {"z": 1, "force": True, "a": "x y", "off": False})
    assert url == f"{BASE_URL}/items?z=1&force=true&a=x+y&off=false"


def test_build_url_writes_whole_number_floats_without_fraction() -> None:
    url = build_url(BASE_URL, "/items", {"fraction": 0.25, "whole": 1.0, "big": 3e6})
    assert url == f"{BASE_URL}/items?fraction=0.25&whole=1&big=3000000"


def test_merge_headers_explicit_wins_case_insensitively() -> None:
    merged = merge_headers(
        {"Authorization": "Bearer derived", "Content-Type": "application/json"},
        {"authorization": "Basic explicit"},
    )
    assert merged == {"Content-Type": "application/json", "authorization": "Basic explicit"}


def test_merge_headers_returns_a_new_mapping() -> None:
    derived = {"Authorization": "Bearer t"}
    explicit = {"X-Trace": "1"}
    merged = merge_headers(derived, explicit)
    merged["X-Other"] = "2"
    assert derived == {"Authorization": "Bearer t"}
    assert explicit == {"X-Trace": "1"}


def test_create_http_client_rejects_bad_config() -> None:
    transport = RecordingTransport()
    with pytest.raises(ValidationError):
        create_http_client(base_url="", transport=transport)
    with pytest.raises(ValidationError):
        create_http_client(base_url=BASE_URL, transport=transport, timeout_ms=0)


@pytest.mark.asyncio
async def test_trailing_slash_is_stripped_from_base_url() -> None:
    transport = RecordingTransport()
    http = create_http_client(base_url=f"{BASE_URL}/", transport=transport)

    await http["request"]("/health")

    assert transport.last_url == f"{BASE_URL}/health"


@pytest.mark.asyncio
async def test_bearer_token_is_injected() -> None:
    transport = RecordingTransport()
    http = create_http_client(base_url=BASE_URL, transport=transport, token="token-123")

    await http["request"]("/workspaces")

    assert transport.last_options["headers"]["Authorization"] == "Bearer token-123"


@pytest.mark.asyncio
async def test_no_authorization_header_without_token() -> None:
    transport = RecordingTransport()
    http = create_http_client(base_url=BASE_URL, transport=transport)

    await http["request"]("/workspaces")

    assert "Authorization" not in transport.last_options["headers"]


@pytest.mark.asyncio
async def test_explicit_authorization_header_is_never_overwritten() -> None:
    transport = RecordingTransport()
    http = create_http_client(base_url=BASE_URL, transport=transport, token="token-123")

    await http["request"]("/workspaces", headers={"Authorization": "Bearer caller"})

    assert transport.last_options["headers"] == {"Authorization": "Bearer caller"}


@pytest.mark.asyncio
async def test_set_token_only_affects_later_requests() -> None:
    transport = RecordingTransport()
    http = create_http_client(base_url=BASE_URL, transport=transport, token="old")

    await http["request"]("/a")
    http["set_token"]("new")
    await http["request"]("/b")
    http["set_token"](None)
    await http["request"]("/c")

    assert transport.calls[0][1]["headers"]["Authorization"] == "Bearer old"
    assert transport.calls[1][1]["headers"]["Authorization"] == "Bearer new"
    assert "Authorization" not in transport.calls[2][1]["headers"]
    assert http["get_token"]() is None


@pytest.mark.asyncio
async def test_token_replaced_mid_flight_does_not_touch_in_flight_headers() -> None:
    release = asyncio.Event()

    async def handler(_url, _options):
        await release.wait()
        return httpx.Response(200)

    transport = RecordingTransport(handler)
    http = create_http_client(base_url=BASE_URL, transport=transport, token="first")

    in_flight = asyncio.create_task(http["request"]("/slow"))
    await asyncio.sleep(0)
    http["set_token"]("second")
    release.set()
    await in_flight
    await http["request"]("/fast")

    assert transport.calls[0][1]["headers"]["Authorization"] == "Bearer first"
    assert transport.calls[1][1]["headers"]["Authorization"] == "Bearer second"


@pytest.mark.asyncio
async def test_json_body_is_serialized_with_content_type() -> None:
    transport = RecordingTransport(lambda _url, _options: json_response(201, {"id": "w1", "name": "demo"}))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    result = await http["request_json"]("/workspaces", method="POST", body={"name": "demo"})

    options = transport.last_options
    assert options["method"] == "POST"
    assert json.loads(options["body"]) == {"name": "demo"}
    assert options["headers"]["Content-Type"] == "application/json"
    assert result == {"id": "w1", "name": "demo"}


@pytest.mark.asyncio
async def test_no_content_type_without_body() -> None:
    transport = RecordingTransport(lambda _url, _options: json_response(200, []))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    await http["request_json"]("/workspaces")

    assert transport.last_options["body"] is None
    assert "Content-Type" not in transport.last_options["headers"]


@pytest.mark.asyncio
async def test_caller_content_type_wins_over_json_default() -> None:
    transport = RecordingTransport(lambda _url, _options: json_response(200, {}))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    await http["request_json"](
        "/train", method="POST", body={"a": 1}, headers={"content-type": "application/vnd.boost+json"}
    )

    assert transport.last_options["headers"] == {"content-type": "application/vnd.boost+json"}


@pytest.mark.asyncio
async def test_multipart_body_is_passed_through_without_content_type() -> None:
    transport = RecordingTransport(lambda _url, _options: json_response(201, {"dataset_id": "ds1"}))
    http = create_http_client(base_url=BASE_URL, transport=transport, token="t")
    body = encode_multipart(b"\x01\x02")

    await http["request_json"]("/datasets", method="POST", body=body)

    assert transport.last_options["body"] is body
    assert transport.last_options["headers"] == {"Authorization": "Bearer t"}


@pytest.mark.asyncio
async def test_empty_success_body_decodes_to_none() -> None:
    transport = RecordingTransport(lambda _url, _options: httpx.Response(200))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    assert await http["request_json"]("/datasets/d1", method="DELETE") is None


@pytest.mark.asyncio
async def test_invalid_json_on_success_raises_parse_error() -> None:
    transport = RecordingTransport(lambda _url, _options: text_response(200, "<html>"))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    with pytest.raises(ParseError) as excinfo:
        await http["request_json"]("/workspaces")

    assert excinfo.value.status_code == 200
    assert excinfo.value.body is None
    assert excinfo.value.code == "PARSE_ERROR"


@pytest.mark.asyncio
async def test_request_bytes_returns_raw_content() -> None:
    payload = b"PAR1\x00\x01not-json"
    transport = RecordingTransport(lambda _url, _options: httpx.Response(200, content=payload))
    http = create_http_client(base_url=BASE_URL, transport=transport)

    assert await http["request_bytes"]("/datasets/d1/download") == payload


@pytest.mark.asyncio
async def test_transport_failure_becomes_transport_error() -> None:
    def handler(_url, _options):
        raise httpx.ConnectError("connection refused")

    http = create_http_client(base_url=BASE_URL, transport=RecordingTransport(handler))

    with pytest.raises(TransportError) as excinfo:
        await http["request"]("/health")

    assert excinfo.value.code == "NETWORK_ERROR"
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_sdk_errors_from_transport_are_not_rewrapped() -> None:
    def handler(_url, _options):
        raise ValidationError("bad input")

    http = create_http_client(base_url=BASE_URL, transport=RecordingTransport(handler))

    with pytest.raises(ValidationError):
        await http["request"]("/health")


@pytest.mark.asyncio
async def test_timeout_cancels_transport_and_raises_cancellation_error() -> None:
    cancelled = asyncio.Event()

    async def handler(_url, _options):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200)

    transport = RecordingTransport(handler)
    http = create_http_client(base_url=BASE_URL, transport=transport, timeout_ms=20)

    with pytest.raises(CancellationError) as excinfo:
        await http["request"]("/slow")

    assert isinstance(excinfo.value, GagaraBoostError)
    assert excinfo.value.code == "TIMEOUT"
    await asyncio.wait_for(cancelled.wait(), timeout=1)
    assert transport.last_options["signal"].aborted is True
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_timeout_returns_promptly_when_transport_ignores_cancellation() -> None:
    finished = asyncio.Event()

    async def stubborn_handler(_url, _options):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            await asyncio.sleep(0.5)
        finally:
            finished.set()
        return httpx.Response(200)

    http = create_http_client(base_url=BASE_URL, transport=RecordingTransport(stubborn_handler), timeout_ms=20)
    loop = asyncio.get_running_loop()
    started = loop.time()

    with pytest.raises(CancellationError):
        await http["request"]("/stubborn")

    assert loop.time() - started < 0.2
    await asyncio.wait_for(finished.wait(), timeout=2)


@pytest.mark.asyncio
async def test_transport_listener_on_signal_fires_on_timeout() -> None:
    fired = []
    removed = []

    async def handler(_url, options):
        signal = options["signal"]
        signal.add_event_listener(lambda: fired.append(signal.reason))
        dropped = signal.add_event_listener(lambda: removed.append(True))
        signal.remove_event_listener(dropped)
        await asyncio.sleep(5)
        return httpx.Response(200)

    http = create_http_client(base_url=BASE_URL, transport=RecordingTransport(handler), timeout_ms=20)

    with pytest.raises(CancellationError):
        await http["request"]("/listen")

    assert fired == ["timeout"]
    assert removed == []


@pytest.mark.asyncio
async def test_timer_is_cleared_after_success_and_failure() -> None:
    outcomes = iter([httpx.Response(200), httpx.ConnectError("down")])

    def handler(_url, _options):
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    transport = RecordingTransport(handler)
    http = create_http_client(base_url=BASE_URL, transport=transport, timeout_ms=10)

    await http["request"]("/ok")
    with pytest.raises(TransportError):
        await http["request"]("/down")
    await asyncio.sleep(0.05)

    assert all(options["signal"].aborted is False for _url, options in transport.calls)


@pytest.mark.asyncio
async def test_each_call_gets_its_own_signal_and_calls_run_concurrently() -> None:
    started = 0
    both_started = asyncio.Event()

    async def handler(_url, _options):
        nonlocal started
        started += 1
        if started == 2:
            both_started.set()
        await both_started.wait()
        return json_response(200, {"ok": True})

    transport = RecordingTransport(handler)
    http = create_http_client(base_url=BASE_URL, transport=transport, timeout_ms=1000)

    results = await asyncio.gather(http["request_json"]("/a"), http["request_json"]("/b"))

    assert results == [{"ok": True}, {"ok": True}]
    assert transport.calls[0][1]["signal"] is not transport.calls[1][1]["signal"]
