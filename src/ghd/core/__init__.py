"""Core utilities and shared components for ghd."""

# Note: Import context lazily to avoid circular imports
# Use: from ghd.core.context import GhdContext
from ghd.core.exceptions import (
    GhdError,
    ConfigError,
    InvalidUrlError,
    UpstreamError,
    TransportError,
    UpstreamStatusError,
    DecodeError,
    NotFoundError,
)
from ghd.core.output import OutputFormatter

__all__ = [
    "GhdError",
    "ConfigError",
    "InvalidUrlError",
    "UpstreamError",
    "TransportError",
    "UpstreamStatusError",
    "DecodeError",
    "NotFoundError",
    "OutputFormatter",
]
