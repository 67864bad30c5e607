"""Secret redaction for API payloads before they reach the audit log.

Payloads frequently embed the transport client's configuration (headers,
API key) next to the message content. Everything is copied before it is
touched: the caller's object is never mutated, and a payload that cannot
be copied structurally falls back to a shallow copy instead of failing.
"""

from __future__ import annotations

import copy
import dataclasses
import json
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

REDACTED_PLACEHOLDER = "[REDACTED]"

# Mappings whose authorization entries are masked.
HEADER_FIELDS: tuple[str, ...] = ("headers", "defaultHeaders")

# Top-level fields masked outright.
SECRET_FIELDS: tuple[str, ...] = ("apiKey",)

# Regex patterns for secrets embedded in string values. Only applied when
# string scrubbing is switched on in the config.
SCRUB_PATTERNS: list[str] = [
    r"(?i)bearer\s+[a-zA-Z0-9._-]+",  # Bearer tokens
    r"sk-ant-[a-zA-Z0-9-]{20,}",  # Anthropic API keys (before the generic sk- pattern)
    r"sk-[a-zA-Z0-9_-]{20,}",  # OpenAI API keys
    r"ghp_[a-zA-Z0-9]{36}",  # GitHub PATs
    r"gho_[a-zA-Z0-9]{36}",  # GitHub OAuth tokens
]


def build_scrubber(
    custom_patterns: list[str] | None = None,
) -> Callable[[str], str]:
    """Build a string scrubber from the built-in and custom patterns.

    Custom patterns extend (never replace) the built-in set and are
    compiled once, here.

    Args:
        custom_patterns: Extra regex pattern strings.

    Returns:
        A function replacing every match with [REDACTED].

    Raises:
        ValueError: If a custom pattern fails to compile.
    """
    compiled: list[re.Pattern[str]] = [re.compile(p) for p in SCRUB_PATTERNS]

    for pattern_str in custom_patterns or []:
        try:
            compiled.append(re.compile(pattern_str))
        except re.error as exc:
            raise ValueError(
                f"Invalid scrub pattern {pattern_str!r}: {exc}"
            ) from exc

    def scrub(content: str) -> str:
        for pattern in compiled:
            content = pattern.sub(REDACTED_PLACEHOLDER, content)
        return content

    return scrub


def _to_plain(payload: Any) -> Any:
    """Turn pydantic models and dataclass instances into plain data."""
    if hasattr(payload, "model_dump") and callable(payload.model_dump):
        return payload.model_dump(mode="json")
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return dataclasses.asdict(payload)
    return payload


def deep_copy_payload(payload: Any) -> tuple[Any, bool]:
    """Copy a payload, structurally if possible.

    Returns:
        Tuple of (copy, structural). ``structural`` is False when the
        shallow fallback was used.
    """
    try:
        return json.loads(json.dumps(_to_plain(payload))), True
    except Exception:  # noqa: BLE001
        pass

    if isinstance(payload, Mapping):
        return dict(payload), False
    if hasattr(payload, "__dict__") and not isinstance(payload, type):
        return dict(vars(payload)), False
    try:
        return copy.copy(payload), False
    except Exception:  # noqa: BLE001
        # Uncopyable handle: represent it, never hand back the original
        return repr(payload), False


def _scrub_strings(value: Any, scrub: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return scrub(value)
    if isinstance(value, dict):
        return {k: _scrub_strings(v, scrub) for k, v in value.items()}
    if isinstance(value, list):
        return [_scrub_strings(v, scrub) for v in value]
    return value


def redact(
    payload: Any,
    extra_keys: Iterable[str] = (),
    scrub: Callable[[str], str] | None = None,
) -> Any:
    """Return a sanitized copy of an API payload.

    Masks every case variant of ``authorization`` under ``headers`` and
    ``defaultHeaders``, and the top-level ``apiKey`` (plus ``extra_keys``).
    Empty payloads pass through unchanged.

    Args:
        payload: Any request/response object.
        extra_keys: Additional top-level fields to mask.
        scrub: Optional string scrubber applied to every string leaf.
            Only used when the structural copy succeeded.

    Returns:
        The redacted copy. Never raises.
    """
    if payload is None:
        return None
    try:
        if not payload:
            return payload
    except Exception:  # noqa: BLE001
        # Objects with a broken __bool__ are still copied below
        pass

    clone, structural = deep_copy_payload(payload)
    if not isinstance(clone, dict):
        return clone

    for field in HEADER_FIELDS:
        headers = clone.get(field)
        if isinstance(headers, Mapping):
            # Copied again so a shallow clone never writes through
            masked = dict(headers)
            for key in list(masked):
                if isinstance(key, str) and key.lower() == "authorization":
                    masked[key] = REDACTED_PLACEHOLDER
            clone[field] = masked

    for key in (*SECRET_FIELDS, *extra_keys):
        if key in clone:
            clone[key] = REDACTED_PLACEHOLDER

    if scrub is not None and structural:
        clone = _scrub_strings(clone, scrub)

    return clone
