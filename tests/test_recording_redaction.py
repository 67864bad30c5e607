"""Tests for payload redaction."""

from __future__ import annotations

import copy
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from callaudit.recording.redaction import (
    REDACTED_PLACEHOLDER,
    build_scrubber,
    deep_copy_payload,
    redact,
)


class TestRedactSecretFields:
    def test_lowercase_authorization_header(self):
        result = redact({"headers": {"authorization": "Bearer secret"}})
        assert result["headers"]["authorization"] == REDACTED_PLACEHOLDER

    def test_capitalized_authorization_header(self):
        result = redact({"headers": {"Authorization": "Bearer secret"}})
        assert result["headers"]["Authorization"] == REDACTED_PLACEHOLDER

    def test_any_case_variant_in_default_headers(self):
        result = redact({"defaultHeaders": {"AUTHORIZATION": "secret", "x-trace": "t1"}})
        assert result["defaultHeaders"]["AUTHORIZATION"] == REDACTED_PLACEHOLDER
        assert result["defaultHeaders"]["x-trace"] == "t1"

    def test_top_level_api_key(self):
        result = redact({"apiKey": "sk-secret", "model": "gpt-4o"})
        assert result["apiKey"] == REDACTED_PLACEHOLDER
        assert result["model"] == "gpt-4o"

    @pytest.mark.parametrize("value", [None, "", 0])
    def test_falsy_api_key_still_masked(self, value):
        result = redact({"apiKey": value, "model": "gpt-4o"})
        assert result["apiKey"] == REDACTED_PLACEHOLDER

    def test_falsy_extra_key_still_masked(self):
        result = redact({"organization": "", "model": "m"}, extra_keys=["organization"])
        assert result["organization"] == REDACTED_PLACEHOLDER

    def test_extra_keys(self):
        result = redact({"organization": "org-123", "model": "m"}, extra_keys=["organization"])
        assert result["organization"] == REDACTED_PLACEHOLDER

    def test_nested_api_key_is_left_alone(self):
        """Only the top-level apiKey position is masked."""
        result = redact({"client": {"apiKey": "inner"}})
        assert result["client"]["apiKey"] == "inner"

    def test_idempotent(self):
        payload = {"apiKey": "k", "headers": {"authorization": "a"}}
        once = redact(payload)
        assert redact(once) == once

    def test_content_untouched(self):
        payload = {"model": "x", "input": [{"role": "user", "content": "hello"}]}
        assert redact(payload) == payload


class TestRedactCopySemantics:
    def test_none_passes_through(self):
        assert redact(None) is None

    def test_empty_passes_through(self):
        assert redact({}) == {}

    def test_returns_new_object(self):
        payload = {"model": "x"}
        assert redact(payload) is not payload

    def test_input_not_mutated(self):
        payload = {"apiKey": "k", "headers": {"Authorization": "secret"}}
        original = copy.deepcopy(payload)
        redact(payload)
        assert payload == original

    def test_cyclic_payload_falls_back_to_shallow_copy(self):
        payload = {"headers": {"authorization": "secret"}, "apiKey": "k"}
        payload["self"] = payload

        result = redact(payload)

        assert result is not payload
        assert result["headers"]["authorization"] == REDACTED_PLACEHOLDER
        assert result["apiKey"] == REDACTED_PLACEHOLDER
        assert payload["headers"]["authorization"] == "secret"
        assert payload["apiKey"] == "k"

    def test_non_serializable_handle(self):
        handle = object()
        payload = {"headers": {"Authorization": "secret"}, "client": handle}

        result = redact(payload)

        assert result["headers"]["Authorization"] == REDACTED_PLACEHOLDER
        assert result["client"] is handle
        assert payload["headers"]["Authorization"] == "secret"

    def test_object_with_attributes(self):
        class Client:
            def __init__(self):
                self.apiKey = "k"
                self.lock = object()

        client = Client()
        result = redact(client)
        assert result["apiKey"] == REDACTED_PLACEHOLDER
        assert client.apiKey == "k"

    def test_pydantic_model(self):
        class Req(BaseModel):
            model: str
            apiKey: str

        result = redact(Req(model="x", apiKey="k"))
        assert result == {"model": "x", "apiKey": REDACTED_PLACEHOLDER}

    def test_dataclass(self):
        @dataclass
        class Req:
            model: str
            headers: dict

        result = redact(Req(model="x", headers={"authorization": "a"}))
        assert result["headers"]["authorization"] == REDACTED_PLACEHOLDER

    def test_deep_copy_reports_structural(self):
        _, structural = deep_copy_payload({"a": [1, 2]})
        assert structural is True

        cyclic: dict = {}
        cyclic["me"] = cyclic
        _, structural = deep_copy_payload(cyclic)
        assert structural is False


class TestScrubber:
    def test_builtin_patterns(self):
        scrub = build_scrubber()
        assert "sk-abc" not in scrub("key sk-abc12345678901234567890 here")

    def test_custom_patterns_extend_builtin(self):
        scrub = build_scrubber([r"ssn:\s*\d{3}-\d{2}-\d{4}"])
        result = scrub("ssn: 123-45-6789 and sk-abc12345678901234567890")
        assert "123-45-6789" not in result
        assert "sk-abc" not in result

    def test_invalid_pattern_raises(self):
        with pytest.raises(ValueError, match="Invalid scrub pattern"):
            build_scrubber(["[invalid"])

    def test_redact_scrubs_string_leaves(self):
        scrub = build_scrubber()
        payload = {"input": [{"content": "my key is sk-abc12345678901234567890"}]}
        result = redact(payload, scrub=scrub)
        assert result["input"][0]["content"] == f"my key is {REDACTED_PLACEHOLDER}"
