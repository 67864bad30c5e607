"""CallRecorder: correlation of API requests with their responses.

Composes the redactor, the correlation store and the session writer.
A call id moves through absent -> pending -> completed (removed). A
response for an unknown id is still logged, flagged as unmatched, and a
placeholder response (a live stream handle) defers the entry instead of
completing it.

No public method raises: every failure is reported through the
diagnostics channel and the call returns normally.
"""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any, TypeVar

from callaudit.diagnostics import report_error
from callaudit.recording.correlation import CorrelationStore
from callaudit.recording.formatting import (
    STORAGE_DISABLED_MARKER,
    format_completed_entry,
    format_exchange_entry,
    format_pending_entry,
)
from callaudit.recording.models import CompletedCall, PendingCall, new_call_id
from callaudit.recording.placeholder import is_placeholder
from callaudit.recording.redaction import redact
from callaudit.storage.session import SessionWriter

F = TypeVar("F", bound=Callable[..., Any])


def _never_raises(func: F) -> F:
    """Swallow and report any error escaping a public recorder method."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            report_error(f"{func.__name__} failed", exc)
            return None

    return wrapper  # type: ignore[return-value]


class CallRecorder:
    """Record request/response pairs to the session log.

    Args:
        writer: Destination for formatted entries. Its ``enabled`` flag
            decides whether the recorder does anything at all.
        store: Pending-call store; a fresh one is created if omitted.
        extra_secret_keys: Top-level payload fields masked in addition
            to ``apiKey``.
        scrub: Optional string scrubber applied to payload string values.
    """

    def __init__(
        self,
        writer: SessionWriter,
        store: CorrelationStore | None = None,
        extra_secret_keys: Iterable[str] = (),
        scrub: Callable[[str], str] | None = None,
    ) -> None:
        self.writer = writer
        self.store = store if store is not None else CorrelationStore()
        self._extra_keys = tuple(extra_secret_keys)
        self._scrub = scrub
        self._storage_disabled = False
        self._marker_written = False
        self._mode_lock = threading.Lock()

    def is_enabled(self) -> bool:
        return self.writer.enabled

    def pending_count(self) -> int:
        return len(self.store)

    @property
    def storage_disabled(self) -> bool:
        return self._storage_disabled

    def _redact(self, payload: Any) -> Any:
        return redact(payload, extra_keys=self._extra_keys, scrub=self._scrub)

    @_never_raises
    def set_storage_disabled(self, disabled: bool) -> None:
        """Track the upstream "response storage disabled" mode.

        Only the first switch to True writes a marker line; every
        entry is prefixed with a mode marker while the flag stays on.
        """
        with self._mode_lock:
            write_marker = bool(disabled) and not self._marker_written
            if write_marker:
                self._marker_written = True
            self._storage_disabled = bool(disabled)
        if write_marker and self.is_enabled():
            self.writer.append(STORAGE_DISABLED_MARKER)

    @_never_raises
    def record_request(
        self,
        call_id: str | None,
        request: Any,
        translated_request: Any = None,
        origin: str = "",
    ) -> str | None:
        """Record a request whose response is still outstanding.

        Args:
            call_id: Identifier to correlate the response with. None
                generates a fresh one.
            request: The primary (Responses format) request payload.
            translated_request: The Chat Completions request it was
                translated to, if any.
            origin: Label of the call site.

        Returns:
            The pending call id, or None if disabled or the id is
            already pending (the duplicate is ignored).
        """
        if not self.is_enabled():
            return None
        if call_id is None:
            call_id = new_call_id()
        elif call_id in self.store:
            return None

        pending = PendingCall(
            request=self._redact(request),
            translated_request=self._redact(translated_request),
            origin=origin,
        )
        if not self.store.insert(call_id, pending):
            return None

        self.writer.append(
            format_pending_entry(call_id, pending, self._storage_disabled)
        )
        return call_id

    @_never_raises
    def record_response(
        self,
        call_id: str | None,
        translated_response: Any,
        response: Any,
        origin: str = "",
        request: Any = None,
    ) -> str | None:
        """Record the response for a call and write the combined entry.

        A placeholder ``response`` (empty, unstructured, or a bare stream
        handle) is not logged as a response: the call stays (or becomes)
        pending instead, using ``request`` for a call that was never
        recorded.

        Args:
            call_id: Identifier passed to record_request, or None.
            translated_response: The Chat Completions response, if the
                call went through translation.
            response: The final (Responses format) response.
            origin: Label of the call site.
            request: Request to record if the response turns out to be
                a placeholder for an unknown call.

        Returns:
            The id still pending after a deferral, otherwise None.
        """
        if not self.is_enabled():
            return None

        if is_placeholder(response):
            if call_id is not None and call_id in self.store:
                return call_id
            return self.record_request(call_id, request, origin=origin)

        pending = self.store.take(call_id) if call_id is not None else None
        if pending is None:
            call = CompletedCall(
                response=self._redact(response),
                translated_response=self._redact(translated_response),
                origin=origin,
                matched=False,
                storage_disabled=self._storage_disabled,
            )
        else:
            call = CompletedCall(
                response=self._redact(response),
                request=pending.request,
                translated_request=pending.translated_request,
                translated_response=self._redact(translated_response),
                origin=origin or pending.origin,
                storage_disabled=self._storage_disabled,
            )

        self.writer.append(format_completed_entry(call_id or "unknown", call))
        return None

    @_never_raises
    def record_cycle(
        self,
        request: Any,
        translated_request: Any,
        translated_response: Any,
        response: Any,
        origin: str = "",
    ) -> str | None:
        """Record a full API cycle in one call.

        If the response is still a placeholder, the request is recorded
        as pending under a fresh id, which is returned so the caller can
        complete it with record_response later.
        """
        if not self.is_enabled():
            return None
        if is_placeholder(response):
            return self.record_request(
                None, request, translated_request, origin=origin
            )

        call = CompletedCall(
            response=self._redact(response),
            request=self._redact(request),
            translated_request=self._redact(translated_request),
            translated_response=self._redact(translated_response),
            origin=origin,
            storage_disabled=self._storage_disabled,
        )
        self.writer.append(format_completed_entry("", call))
        return None

    def _record_exchange(self, api_name: str, request: Any, response: Any) -> None:
        if not self.is_enabled():
            return
        self.writer.append(
            format_exchange_entry(
                api_name,
                self._redact(request),
                self._redact(response),
                datetime.now(timezone.utc),
                self._storage_disabled,
            )
        )

    @_never_raises
    def record_responses_api(self, request: Any, response: Any) -> None:
        """Log a Responses API request/response pair on its own."""
        self._record_exchange("RESPONSES API", request, response)

    @_never_raises
    def record_chat_completions_api(self, request: Any, response: Any) -> None:
        """Log a Chat Completions API request/response pair on its own."""
        self._record_exchange("CHAT COMPLETIONS API", request, response)
