"""
Errors raised while assembling a request.
"""
from typing import Optional


class RequestBuilderError(Exception):
    """Base error for request assembly failures."""

    code = "REQUEST_BUILDER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.name = type(self).__name__


class URLParseError(RequestBuilderError, ValueError):
    """Error thrown when an endpoint or path cannot form a valid absolute URL."""

    code = "URL_PARSE_ERROR"

    def __init__(self, message: str, endpoint: Optional[str] = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class SerializationError(RequestBuilderError, ValueError):
    """Error thrown when a value cannot be encoded as JSON."""

    code = "SERIALIZATION_ERROR"


class UnsupportedContentTypeError(RequestBuilderError, TypeError):
    """Error thrown when a body value is of a kind the builder cannot send."""

    code = "UNSUPPORTED_CONTENT_TYPE"

    def __init__(self, kind: str) -> None:
        super().__init__(f"Invalid type for non-JSON body content: {kind}")
        self.kind = kind


class BuildError(RequestBuilderError):
    """Error thrown when the final request cannot be produced."""

    code = "BUILD_ERROR"
