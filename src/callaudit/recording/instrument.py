"""Wrap an upstream API call with request/response recording."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from callaudit.recording.placeholder import is_placeholder
from callaudit.recording.recorder import CallRecorder


async def audited_call(
    recorder: CallRecorder,
    call_fn: Callable[[Any], Awaitable[Any]],
    request: Any,
    origin: str = "",
    translated_request: Any = None,
    back_translate: Callable[[Any], Any] | None = None,
) -> tuple[Any, str | None]:
    """Perform an API call and record both legs of it.

    The request is recorded before the call is awaited. Errors raised by
    ``call_fn`` propagate unchanged and leave the request pending.

    Args:
        recorder: The session's CallRecorder.
        call_fn: Coroutine function sending the wire request upstream.
        request: Primary (Responses format) request.
        origin: Label of the call site.
        translated_request: Chat Completions request, if the provider
            needs translation. When given, it is what ``call_fn`` receives.
        back_translate: Converts the raw Chat Completions response back
            to a Responses format response.

    Returns:
        Tuple of (response, pending_id). ``pending_id`` is set when the
        call returned a placeholder such as a stream handle; pass it to
        ``recorder.record_response`` once the stream has finished.
    """
    call_id = recorder.record_request(None, request, translated_request, origin)

    wire_request = translated_request if translated_request is not None else request
    raw_response = await call_fn(wire_request)

    if is_placeholder(raw_response):
        pending_id = recorder.record_response(
            call_id, None, raw_response, origin, request
        )
        return raw_response, pending_id

    if back_translate is not None:
        response = back_translate(raw_response)
        translated_response = raw_response
    else:
        response = raw_response
        translated_response = None

    recorder.record_response(call_id, translated_response, response, origin)
    return response, None
