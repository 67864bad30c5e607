"""Recording subpackage: redaction, correlation and the call recorder.

Provides the payload redactor, placeholder classification, the
thread-safe correlation store, entry formatting, CallRecorder and the
audited_call helper.
"""

from callaudit.recording.correlation import CorrelationStore
from callaudit.recording.instrument import audited_call
from callaudit.recording.models import CompletedCall, PendingCall, new_call_id
from callaudit.recording.placeholder import (
    ResponseKind,
    classify_response,
    is_placeholder,
)
from callaudit.recording.recorder import CallRecorder
from callaudit.recording.redaction import (
    REDACTED_PLACEHOLDER,
    build_scrubber,
    redact,
)

__all__ = [
    "REDACTED_PLACEHOLDER",
    "CallRecorder",
    "CompletedCall",
    "CorrelationStore",
    "PendingCall",
    "ResponseKind",
    "audited_call",
    "build_scrubber",
    "classify_response",
    "is_placeholder",
    "new_call_id",
    "redact",
]
