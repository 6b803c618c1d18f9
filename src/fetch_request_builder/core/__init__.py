"""
Core modules for fetch_request_builder.
"""
from .request_builder import (
    RequestBuilder,
    escape_path_parameter,
    join_path,
    parse_endpoint,
)

__all__ = [
    "RequestBuilder",
    "escape_path_parameter",
    "join_path",
    "parse_endpoint",
]
