"""Classification of response objects that are not real responses yet.

A streaming call hands back a live stream handle long before the final
response exists. Logging that handle as the response would produce a
garbage entry, so the recorder asks here first and defers instead.
"""

from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterator, Iterator, Mapping
from enum import Enum
from typing import Any

# Field names that mark an in-flight stream handle when they are the
# object's only field.
STREAM_HANDLE_MARKERS: frozenset[str] = frozenset({"controller"})


class ResponseKind(str, Enum):
    """What a response-shaped value actually is."""

    COMPLETE = "complete"
    EMPTY = "empty"
    UNSTRUCTURED = "unstructured"
    STREAM_HANDLE = "stream_handle"


def _fields(obj: Any) -> Mapping[str, Any] | None:
    """Return the top-level fields of a structured record, or None."""
    if isinstance(obj, Mapping):
        return obj
    if hasattr(obj, "model_dump") and callable(obj.model_dump):
        return dict(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if (
        not isinstance(obj, (str, bytes, type, Iterator, AsyncIterator))
        and getattr(obj, "__dict__", None)
    ):
        return vars(obj)
    return None


def classify_response(obj: Any) -> ResponseKind:
    """Classify a value received where a completed response is expected.

    The placeholder shapes are:
        EMPTY: None or a record with no fields.
        UNSTRUCTURED: anything that is not a mapping, pydantic model,
            dataclass or plain attribute object (strings, numbers,
            iterators, SDK stream objects).
        STREAM_HANDLE: a record whose only field is a stream marker.

    Args:
        obj: The candidate response.

    Returns:
        The ResponseKind. Only COMPLETE counts as a real response.
    """
    if obj is None:
        return ResponseKind.EMPTY

    try:
        fields = _fields(obj)
    except Exception:  # noqa: BLE001
        return ResponseKind.UNSTRUCTURED
    if fields is None:
        return ResponseKind.UNSTRUCTURED
    if len(fields) == 0:
        return ResponseKind.EMPTY
    if len(fields) == 1 and next(iter(fields)) in STREAM_HANDLE_MARKERS:
        return ResponseKind.STREAM_HANDLE
    return ResponseKind.COMPLETE


def is_placeholder(obj: Any) -> bool:
    """Return True if obj does not yet represent a completed response."""
    return classify_response(obj) is not ResponseKind.COMPLETE
