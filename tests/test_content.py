"""
Tests for content.py
Logic testing: Decision/Branch, Boundary Value coverage
"""
import io
import math
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from fetch_request_builder import (
    DEFAULT_BUILDER_CONFIG,
    BuilderConfig,
    BytesContent,
    FormData,
    JSONContent,
    SerializationError,
    StreamContent,
    TextContent,
    UnsupportedContentTypeError,
    as_payload_content,
    as_raw_content,
    serialize_json,
)
from fetch_request_builder.content import is_binary_stream, to_body_stream, to_multipart_part


class Workspace(BaseModel):
    name: str
    tags: list


@dataclass
class Point:
    x: int
    y: int


class TestSerializeJson:
    """Tests for serialize_json."""

    def test_compact_with_newline(self):
        assert serialize_json({"a": 1, "b": [True, None]}) == b'{"a":1,"b":[true,null]}\n'

    def test_without_newline(self):
        assert serialize_json([1, 2], trailing_newline=False) == b"[1,2]"

    def test_scalar(self):
        assert serialize_json("text") == b'"text"\n'

    # Decision: non-ASCII kept by default
    def test_non_ascii_kept(self):
        assert serialize_json({"name": "café"}) == '{"name":"café"}\n'.encode("utf-8")

    # Decision: non-ASCII escaped on request
    def test_non_ascii_escaped(self):
        assert serialize_json({"name": "café"}, ensure_ascii=True) == b'{"name":"caf\\u00e9"}\n'

    def test_pydantic_model(self):
        value = Workspace(name="ws", tags=["a"])
        assert serialize_json(value) == b'{"name":"ws","tags":["a"]}\n'

    def test_nested_dataclass(self):
        assert serialize_json({"point": Point(1, 2)}) == b'{"point":{"x":1,"y":2}}\n'

    def test_unsupported_value(self):
        with pytest.raises(SerializationError, match="object"):
            serialize_json(object())

    # Boundary: NaN is not valid JSON
    def test_nan_rejected(self):
        with pytest.raises(SerializationError):
            serialize_json({"value": math.nan})

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            serialize_json({1, 2})


class TestIsBinaryStream:
    """Tests for is_binary_stream."""

    def test_bytes_io(self):
        assert is_binary_stream(io.BytesIO(b"x"))

    def test_string_io(self):
        assert not is_binary_stream(io.StringIO("x"))

    def test_plain_values(self):
        assert not is_binary_stream(b"x")
        assert not is_binary_stream("x")

    def test_duck_typed_reader(self):
        class Reader:
            def read(self, size=-1):
                return b""

        assert is_binary_stream(Reader())


class TestAsRawContent:
    """Tests for as_raw_content."""

    def test_text(self):
        assert as_raw_content("hi") == TextContent("hi")

    @pytest.mark.parametrize("value", [b"hi", bytearray(b"hi"), memoryview(b"hi")])
    def test_bytes_like(self, value):
        assert as_raw_content(value) == BytesContent(b"hi")

    def test_stream(self):
        stream = io.BytesIO(b"hi")
        content = as_raw_content(stream)
        assert isinstance(content, StreamContent)
        assert content.stream is stream

    @pytest.mark.parametrize(
        "value, kind",
        [(200, "int"), (1.5, "float"), ({"a": 1}, "dict"), (io.StringIO("x"), "StringIO")],
    )
    def test_unsupported(self, value, kind):
        with pytest.raises(UnsupportedContentTypeError) as exc_info:
            as_raw_content(value)
        assert exc_info.value.kind == kind
        assert str(exc_info.value) == f"Invalid type for non-JSON body content: {kind}"


class TestAsPayloadContent:
    """Tests for as_payload_content."""

    def test_text_verbatim(self):
        assert as_payload_content("hi") == TextContent("hi")

    def test_bytes_verbatim(self):
        assert as_payload_content(b"hi") == BytesContent(b"hi")

    def test_stream_verbatim(self):
        assert isinstance(as_payload_content(io.BytesIO(b"hi")), StreamContent)

    @pytest.mark.parametrize("value", [{"a": 1}, [1, 2], 200, True, Point(1, 2)])
    def test_structured_as_json(self, value):
        assert as_payload_content(value) == JSONContent(value)

    def test_text_stream_rejected(self):
        with pytest.raises(UnsupportedContentTypeError):
            as_payload_content(io.StringIO("x"))


class TestToBodyStream:
    """Tests for to_body_stream."""

    def test_json(self):
        stream = to_body_stream(JSONContent({"a": "é"}), DEFAULT_BUILDER_CONFIG)
        assert stream.read() == '{"a":"é"}\n'.encode("utf-8")

    def test_json_ensure_ascii_config(self):
        config = BuilderConfig(json_ensure_ascii=True)
        assert to_body_stream(JSONContent("é"), config).read() == b'"\\u00e9"\n'

    def test_text(self):
        assert to_body_stream(TextContent("hi"), DEFAULT_BUILDER_CONFIG).read() == b"hi"

    def test_bytes(self):
        assert to_body_stream(BytesContent(b"\x00"), DEFAULT_BUILDER_CONFIG).read() == b"\x00"

    def test_stream_passed_through(self):
        stream = io.BytesIO(b"hi")
        assert to_body_stream(StreamContent(stream), DEFAULT_BUILDER_CONFIG) is stream


class TestToMultipartPart:
    """Tests for to_multipart_part."""

    # Decision: simple field
    def test_simple_field(self):
        part = to_multipart_part(FormData("hello", "", "text/plain", "Hello"), DEFAULT_BUILDER_CONFIG)
        assert part.name == "hello"
        assert part.filename is None
        assert part.content_type is None
        assert part.content == "Hello"

    # Decision: file part with content type
    def test_file_part(self):
        field = FormData("doc", "doc.json", "application/json", {"a": 1})
        part = to_multipart_part(field, DEFAULT_BUILDER_CONFIG)
        assert part.filename == "doc.json"
        assert part.content_type == "application/json"
        assert part.content == b'{"a":1}'

    # Decision: file part without content type
    def test_file_part_default_content_type(self):
        config = BuilderConfig(default_file_content_type="application/x-custom")
        part = to_multipart_part(FormData("f", "f.bin", "", b"\x01"), config)
        assert part.content_type == "application/x-custom"
        assert part.content == b"\x01"

    def test_stream_passed_through(self):
        stream = io.BytesIO(b"data")
        part = to_multipart_part(FormData("f", "f.bin", "", stream), DEFAULT_BUILDER_CONFIG)
        assert part.content is stream

    def test_unserializable(self):
        with pytest.raises(SerializationError):
            to_multipart_part(FormData("f", "", "", object()), DEFAULT_BUILDER_CONFIG)
