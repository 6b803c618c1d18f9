"""
Body content variants.

Every payload the builder accepts is resolved into exactly one of:

- JSONContent:   structured value, encoded as compact JSON
- TextContent:   text sent verbatim (UTF-8)
- BytesContent:  raw bytes sent verbatim
- StreamContent: binary readable stream, read lazily by the transport

Resolution is done once, up front, so unsupported kinds are rejected before
the builder is mutated.
"""
import dataclasses
import io
import json
import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

from pydantic import BaseModel

from .errors import SerializationError, UnsupportedContentTypeError
from .types import BuilderConfig, FormData, MultipartPart

logger = logging.getLogger("fetch_request_builder.content")


@dataclass
class JSONContent:
    """Structured value encoded as JSON."""

    value: Any

    def to_bytes(self, *, ensure_ascii: bool = False, trailing_newline: bool = True) -> bytes:
        return serialize_json(
            self.value, ensure_ascii=ensure_ascii, trailing_newline=trailing_newline
        )


@dataclass
class TextContent:
    """Text sent as UTF-8 bytes."""

    text: str

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass
class BytesContent:
    """Bytes sent as-is."""

    data: bytes


@dataclass
class StreamContent:
    """Binary stream handed to the transport unread."""

    stream: BinaryIO


RawContent = Union[TextContent, BytesContent, StreamContent]
Content = Union[JSONContent, TextContent, BytesContent, StreamContent]


def _json_default(value: Any) -> Any:
    """Encode models and dataclasses the way they would be sent by hand."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_json(
    value: Any,
    *,
    ensure_ascii: bool = False,
    trailing_newline: bool = True,
) -> bytes:
    """
    Serialize a value to compact JSON bytes.

    Keys keep their iteration order. NaN and Infinity are rejected since
    they are not valid JSON.

    Raises:
        SerializationError: if the value (or anything nested in it) cannot be encoded
    """
    try:
        text = json.dumps(
            value,
            ensure_ascii=ensure_ascii,
            separators=(",", ":"),
            allow_nan=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Unable to serialize {type(value).__name__} as JSON: {e}"
        ) from e

    if trailing_newline:
        text += "\n"
    return text.encode("utf-8")


def is_binary_stream(value: Any) -> bool:
    """Check if value is a readable stream producing bytes."""
    if isinstance(value, io.TextIOBase):
        return False
    return callable(getattr(value, "read", None))


def as_raw_content(value: Any) -> RawContent:
    """
    Resolve a value that must be sent verbatim.

    Accepts str, bytes-like objects and binary readable streams.

    Raises:
        UnsupportedContentTypeError: for any other kind, including text-mode streams
    """
    if isinstance(value, str):
        return TextContent(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BytesContent(bytes(value))
    if is_binary_stream(value):
        return StreamContent(value)
    raise UnsupportedContentTypeError(type(value).__name__)


def as_payload_content(value: Any) -> Content:
    """
    Resolve a value that is sent verbatim when it is text, bytes or a stream,
    and encoded as JSON otherwise.
    """
    if isinstance(value, io.TextIOBase):
        raise UnsupportedContentTypeError(type(value).__name__)
    if isinstance(value, (str, bytes, bytearray, memoryview)) or is_binary_stream(value):
        return as_raw_content(value)
    return JSONContent(value)


def to_body_stream(content: Content, config: BuilderConfig) -> BinaryIO:
    """Wrap resolved content as the single readable body stream."""
    if isinstance(content, JSONContent):
        return io.BytesIO(content.to_bytes(ensure_ascii=config.json_ensure_ascii))
    if isinstance(content, TextContent):
        return io.BytesIO(content.to_bytes())
    if isinstance(content, BytesContent):
        return io.BytesIO(content.data)
    return content.stream


def to_multipart_part(field: FormData, config: BuilderConfig) -> MultipartPart:
    """
    Resolve one form field into a multipart part.

    Simple fields (no file name) carry neither a filename nor a content type.
    File parts default to config.default_file_content_type.
    """
    content = as_payload_content(field.content)

    data: Union[str, bytes, BinaryIO]
    if isinstance(content, JSONContent):
        data = content.to_bytes(
            ensure_ascii=config.json_ensure_ascii, trailing_newline=False
        )
    elif isinstance(content, TextContent):
        data = content.text
    elif isinstance(content, BytesContent):
        data = content.data
    else:
        data = content.stream

    if not field.is_file:
        return MultipartPart(name=field.field_name, filename=None, content=data)

    return MultipartPart(
        name=field.field_name,
        filename=field.file_name,
        content=data,
        content_type=field.content_type or config.default_file_content_type,
    )
