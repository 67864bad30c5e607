"""Tests for placeholder response classification."""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace

from pydantic import BaseModel

from callaudit.recording.placeholder import (
    ResponseKind,
    classify_response,
    is_placeholder,
)


class TestClassifyResponse:
    def test_none_is_empty(self):
        assert classify_response(None) is ResponseKind.EMPTY

    def test_empty_mapping_is_empty(self):
        assert classify_response({}) is ResponseKind.EMPTY

    def test_stream_controller_is_stream_handle(self):
        assert classify_response({"controller": object()}) is ResponseKind.STREAM_HANDLE

    def test_controller_with_other_fields_is_complete(self):
        response = {"controller": None, "id": "resp1"}
        assert classify_response(response) is ResponseKind.COMPLETE

    def test_string_is_unstructured(self):
        assert classify_response("ok") is ResponseKind.UNSTRUCTURED

    def test_generator_is_unstructured(self):
        stream = (chunk for chunk in ["a", "b"])
        assert classify_response(stream) is ResponseKind.UNSTRUCTURED

    def test_response_dict_is_complete(self):
        assert classify_response({"id": "resp1", "output": "ok"}) is ResponseKind.COMPLETE

    def test_pydantic_model_is_complete(self):
        class Response(BaseModel):
            id: str

        assert classify_response(Response(id="r")) is ResponseKind.COMPLETE

    def test_dataclass_stream_handle(self):
        @dataclass
        class Handle:
            controller: object

        assert classify_response(Handle(controller=object())) is ResponseKind.STREAM_HANDLE

    def test_attribute_object_is_complete(self):
        response = SimpleNamespace(id="resp1", output="ok")
        assert classify_response(response) is ResponseKind.COMPLETE

    def test_attribute_object_stream_handle(self):
        handle = SimpleNamespace(controller=object())
        assert classify_response(handle) is ResponseKind.STREAM_HANDLE

    def test_iterator_with_attributes_is_unstructured(self):
        class SdkStream:
            def __init__(self):
                self.response = {"status": 200}

            def __iter__(self):
                return self

            def __next__(self):
                raise StopIteration

        assert classify_response(SdkStream()) is ResponseKind.UNSTRUCTURED


class TestIsPlaceholder:
    def test_real_response(self):
        assert is_placeholder({"id": "resp1"}) is False

    def test_placeholders(self):
        for value in (None, {}, "text", 42, {"controller": 1}):
            assert is_placeholder(value) is True
