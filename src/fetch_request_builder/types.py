"""
Type definitions for fetch_request_builder.
"""
from dataclasses import dataclass
from typing import Any, BinaryIO, Literal, Optional, Union


# HTTP methods (not validated; the transport rejects unknown verbs)
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@dataclass
class BuilderConfig:
    """Request builder configuration"""

    default_file_content_type: str = "application/octet-stream"
    """Content type for file parts added without one"""

    json_ensure_ascii: bool = False
    """Escape non-ASCII characters in JSON bodies. Default: False"""

    gzip_compression_level: int = 9
    """Compression level used when gzip compression is enabled (0-9). Default: 9"""

    stream_chunk_size: int = 65536
    """Bytes read per chunk when compressing a streamed body. Default: 65536"""


@dataclass
class FormData:
    """One multipart/form field as added to the builder."""

    field_name: str
    file_name: str
    content_type: str
    content: Any

    @property
    def is_file(self) -> bool:
        """A field with a file name is encoded as a file part."""
        return bool(self.file_name)


@dataclass
class MultipartPart:
    """Resolved multipart part, ready for the encoder."""

    name: str
    filename: Optional[str]
    content: Union[str, bytes, BinaryIO]
    content_type: Optional[str] = None
