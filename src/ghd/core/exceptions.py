"""Custom exceptions for ghd.

Every failure the deployment workflow can hit maps to one class here, and
each class carries the process exit code the CLI reports for it.
"""

from typing import Any


class GhdError(Exception):
    """Base exception for all ghd errors."""

    exit_code: int = 1

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(GhdError):
    """Missing or invalid configuration, reported before any network activity."""

    exit_code = 2


class InvalidUrlError(GhdError):
    """A constructed endpoint or provider-supplied URL is not a valid URL."""

    exit_code = 3

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.url = url

    def __str__(self) -> str:
        if self.url is not None:
            return f"{self.message}: {self.url!r}"
        return super().__str__()


class UpstreamError(GhdError):
    """Base for failures talking to the GitHub API."""

    exit_code = 4

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.url = url


class TransportError(UpstreamError):
    """The API host could not be reached (DNS, connect, timeout)."""

    exit_code = 4


class UpstreamStatusError(UpstreamError):
    """The API responded with an HTTP error status."""

    exit_code = 5

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, url, details)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return super().__str__()


class DecodeError(UpstreamError):
    """A response body does not have the expected shape."""

    exit_code = 6


class NotFoundError(GhdError):
    """All lookups succeeded but no deployment satisfied the success predicate."""

    exit_code = 7

    def __init__(
        self,
        message: str,
        repository: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.repository = repository
