"""API clients for external services."""

from ghd.clients.github import GitHubClient

__all__ = ["GitHubClient"]
