"""
Fluent builder for outgoing HTTP requests.

Joins an endpoint with path segments and parameters, accumulates query
parameters and headers, encodes one payload (JSON value, text, byte stream,
multipart or URL-encoded form) and produces an httpx.Request.
"""
from .types import (
    BuilderConfig,
    FormData,
    HttpMethod,
    MultipartPart,
)
from .constants import (
    CONTENT_ENCODING,
    CONTENT_TYPE,
    DEFAULT_FILE_CONTENT_TYPE,
    FORM_URL_ENCODED_HEADER,
    JSON_CONTENT_TYPE,
    MULTIPART_FORM_DATA,
)
from .errors import (
    RequestBuilderError,
    URLParseError,
    SerializationError,
    UnsupportedContentTypeError,
    BuildError,
)
from .config import (
    DEFAULT_BUILDER_CONFIG,
    merge_config,
    validate_config,
)
from .content import (
    JSONContent,
    TextContent,
    BytesContent,
    StreamContent,
    serialize_json,
    as_raw_content,
    as_payload_content,
)
from .core.request_builder import RequestBuilder
from .debug import (
    mask_headers,
    format_body,
    print_request,
)

__all__ = [
    # Types
    "BuilderConfig",
    "FormData",
    "HttpMethod",
    "MultipartPart",
    # Constants
    "CONTENT_ENCODING",
    "CONTENT_TYPE",
    "DEFAULT_FILE_CONTENT_TYPE",
    "FORM_URL_ENCODED_HEADER",
    "JSON_CONTENT_TYPE",
    "MULTIPART_FORM_DATA",
    # Errors
    "RequestBuilderError",
    "URLParseError",
    "SerializationError",
    "UnsupportedContentTypeError",
    "BuildError",
    # Config
    "DEFAULT_BUILDER_CONFIG",
    "merge_config",
    "validate_config",
    # Content
    "JSONContent",
    "TextContent",
    "BytesContent",
    "StreamContent",
    "serialize_json",
    "as_raw_content",
    "as_payload_content",
    # Builder
    "RequestBuilder",
    # Debug
    "mask_headers",
    "format_body",
    "print_request",
]

__version__ = "0.1.0"
