"""Plain-text rendering of audit log entries.

Entries are meant for humans reading the log, not for machine parsing:
a timestamp line, a blank line, labeled pretty-printed sections in a
fixed order, and a closing banner.
"""

from __future__ import annotations

import json
import pprint
from datetime import datetime
from typing import Any

from callaudit.recording.models import CompletedCall, PendingCall

REQUEST_LABEL = "RESPONSES FORMAT REQUEST"
TRANSLATED_REQUEST_LABEL = "CHAT COMPLETIONS FORMAT REQUEST (TRANSLATED)"
TRANSLATED_RESPONSE_LABEL = "CHAT COMPLETIONS FORMAT RESPONSE"
RESPONSE_LABEL = "RESPONSES FORMAT RESPONSE"
BACK_TRANSLATED_SUFFIX = " (BACK-TRANSLATED)"

PENDING_NOTE = "RESPONSE PENDING"
NO_MATCH_NOTE = "NO MATCHING REQUEST FOUND"
STORAGE_DISABLED_PREFIX = "[RESPONSE STORAGE DISABLED] "
STORAGE_DISABLED_MARKER = (
    "=== RESPONSE STORAGE DISABLED: responses are not persisted upstream ===\n\n"
)

DIVIDER = "-" * 54
CLOSING_BANNER = "/" + "=" * 52 + "\\"


def render_payload(payload: Any) -> str:
    """Pretty-print a (redacted) payload as indented JSON.

    Values JSON cannot encode are rendered with str(); structures that
    still cannot be encoded (cycles left by the shallow-copy fallback)
    are rendered with pprint.
    """
    try:
        return json.dumps(payload, indent=2, default=str, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return pprint.pformat(payload, indent=2)


def _header(timestamp: datetime, storage_disabled: bool) -> str:
    prefix = STORAGE_DISABLED_PREFIX if storage_disabled else ""
    return f"{prefix}[{timestamp.isoformat()}]\n\n"


def _section(label: str, payload: Any) -> str:
    return f"{label}\n{render_payload(payload)}\n{DIVIDER}\n\n"


def _call_note(note: str, call_id: str, origin: str) -> str:
    line = f"{note} (call {call_id}"
    if origin:
        line += f", origin {origin}"
    return line + ")\n"


def format_pending_entry(
    call_id: str,
    pending: PendingCall,
    storage_disabled: bool = False,
) -> str:
    """Render the interim entry written when a request is recorded."""
    entry = _header(pending.created_at, storage_disabled)
    entry += _section(REQUEST_LABEL, pending.request)
    if pending.translated_request is not None:
        entry += _section(TRANSLATED_REQUEST_LABEL, pending.translated_request)
    entry += _call_note(PENDING_NOTE, call_id, pending.origin)
    entry += f"\n{CLOSING_BANNER}\n\n"
    return entry


def format_completed_entry(call_id: str, call: CompletedCall) -> str:
    """Render one combined request/response entry.

    Section order is fixed: request, translated request, translated
    response, response. Absent optional sections are omitted. When the
    call was not matched, the request sections are replaced by a note.
    """
    entry = _header(call.timestamp, call.storage_disabled)

    if call.matched:
        entry += _section(REQUEST_LABEL, call.request)
        if call.translated_request is not None:
            entry += _section(TRANSLATED_REQUEST_LABEL, call.translated_request)
    else:
        entry += _call_note(NO_MATCH_NOTE, call_id, call.origin) + "\n"

    if call.translated_response is not None:
        entry += _section(TRANSLATED_RESPONSE_LABEL, call.translated_response)

    label = RESPONSE_LABEL
    if call.translated_response is not None:
        label += BACK_TRANSLATED_SUFFIX
    entry += f"{label}\n{render_payload(call.response)}\n"
    entry += f"\n{CLOSING_BANNER}\n\n"
    return entry


def format_exchange_entry(
    api_name: str,
    request: Any,
    response: Any,
    timestamp: datetime,
    storage_disabled: bool = False,
) -> str:
    """Render a single-format request/response pair.

    Args:
        api_name: Upper-case API name used in the labels, e.g.
            "RESPONSES API" or "CHAT COMPLETIONS API".
    """
    entry = _header(timestamp, storage_disabled)
    entry += f"{api_name} REQUEST\n{render_payload(request)}\n{DIVIDER}\n"
    entry += f"{api_name} RESPONSE\n{render_payload(response)}\n"
    entry += f"\n{CLOSING_BANNER}\n\n"
    return entry
