"""Abort controller / abort signal used to cancel in-flight requests.

Transports receive the signal in ``options["signal"]``. They may check
``signal.aborted``, ``await signal.wait()``, or register a plain callback with
``signal.add_event_listener(callback)`` that runs once when the signal fires
(``signal.remove_event_listener(callback)`` unregisters it). The request
executor also cancels the transport task itself and returns without waiting
for it, so a transport that ignores the signal is still cut off.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Awaitable, Callable

from gagara_boost.dotdict import DotDict


def _create_abort_signal() -> DotDict:
    event = asyncio.Event()
    listeners: list[Callable[[], None]] = []
    signal = DotDict({"aborted": False, "reason": None})

    def remove_event_listener(callback: Callable[[], None]) -> None:
        nonlocal listeners
        listeners = [listener for listener in listeners if listener is not callback]

    def add_event_listener(callback: Callable[[], None]) -> Callable[[], None]:
        listeners.append(callback)
        return callback

    def abort(reason: Any = None) -> None:
        if signal.aborted:
            return

        signal.aborted = True
        signal.reason = reason
        event.set()

        for listener in list(listeners):
            try:
                listener()
            except Exception:
                # Listener failures must not break cancellation propagation.
                continue

    async def wait() -> None:
        await event.wait()

    signal.add_event_listener = add_event_listener
    signal.remove_event_listener = remove_event_listener
    signal.abort = abort
    signal.wait = wait
    return signal


def create_abort_controller() -> DotDict:
    """Create an abort controller: ``{"signal": ..., "abort": ...}``."""
    signal = _create_abort_signal()

    def abort(reason: Any = None) -> None:
        signal.abort(reason)

    return DotDict({"signal": signal, "abort": abort})


def create_timeout_signal(timeout_ms: int) -> SimpleNamespace:
    """Start a timer that aborts a fresh controller after ``timeout_ms``.

    The caller owns the returned handle and must call ``cleanup()`` on every
    exit path.
    """
    controller = create_abort_controller()

    def on_timeout() -> None:
        controller.abort("timeout")

    loop = asyncio.get_running_loop()
    timeout_handle = loop.call_later(timeout_ms / 1000.0, on_timeout)

    def cleanup() -> None:
        timeout_handle.cancel()

    return SimpleNamespace(signal=controller.signal, cleanup=cleanup)


class Aborted(Exception):
    """The signal fired before the awaited work finished."""


def _discard_result(task: asyncio.Future) -> None:
    # Retrieve a late failure so the loop does not log it as never retrieved.
    if not task.cancelled():
        task.exception()


async def race_with_abort(signal: DotDict, fn: Callable[[], Awaitable[Any]]) -> Any:
    """Run ``fn()`` until it finishes or ``signal`` aborts, whichever is first.

    On abort the task running ``fn`` is cancelled and ``Aborted`` is raised
    right away, even if ``fn`` swallows the cancellation and keeps running.
    """
    if signal.aborted:
        raise Aborted(signal.reason)

    fn_task = asyncio.ensure_future(fn())
    abort_task = asyncio.ensure_future(signal.wait())

    try:
        done, _pending = await asyncio.wait({fn_task, abort_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        fn_task.cancel()
        fn_task.add_done_callback(_discard_result)
        raise
    finally:
        abort_task.cancel()

    if fn_task not in done:
        fn_task.cancel()
        fn_task.add_done_callback(_discard_result)
        raise Aborted(signal.reason)

    return fn_task.result()
