"""Call records held by the correlation store and passed to the formatter.

These are plain dataclasses (not Pydantic) because payloads are arbitrary
objects and the records sit on the hot path of every API call.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def new_call_id() -> str:
    """Generate a fresh, never-reused call identifier."""
    return f"call-{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PendingCall:
    """A request whose response has not been recorded yet.

    Payloads are stored already redacted.
    """

    request: Any
    translated_request: Any = None
    origin: str = ""
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class CompletedCall:
    """One request/response cycle ready to be formatted.

    ``matched`` is False when the response arrived for an unknown call id
    and the request sections are therefore missing.
    """

    response: Any
    request: Any = None
    translated_request: Any = None
    translated_response: Any = None
    origin: str = ""
    matched: bool = True
    storage_disabled: bool = False
    timestamp: datetime = field(default_factory=_utcnow)
