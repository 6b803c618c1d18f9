"""
Configuration utilities for fetch_request_builder
"""
from typing import Optional

from .constants import DEFAULT_FILE_CONTENT_TYPE
from .types import BuilderConfig


# Default builder configuration
DEFAULT_BUILDER_CONFIG = BuilderConfig(
    default_file_content_type=DEFAULT_FILE_CONTENT_TYPE,
    json_ensure_ascii=False,
    gzip_compression_level=9,
    stream_chunk_size=65536,
)


def merge_config(config: Optional[BuilderConfig] = None) -> BuilderConfig:
    """
    Merge configuration with defaults.

    Args:
        config: User-provided configuration

    Returns:
        Complete configuration with defaults
    """
    if config is None:
        return DEFAULT_BUILDER_CONFIG
    return config


def validate_config(config: BuilderConfig) -> None:
    """Validate builder configuration."""
    if not config.default_file_content_type:
        raise ValueError("default_file_content_type is required")

    if not 0 <= config.gzip_compression_level <= 9:
        raise ValueError(
            f"Invalid gzip_compression_level: {config.gzip_compression_level}. Must be between 0 and 9"
        )

    if config.stream_chunk_size <= 0:
        raise ValueError(
            f"Invalid stream_chunk_size: {config.stream_chunk_size}. Must be positive"
        )
