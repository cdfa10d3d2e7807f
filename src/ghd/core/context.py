"""Click context object for sharing state across the command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghd.config import GhdConfig, ProfileConfig, get_default_config
from ghd.core.output import OutputFormat, OutputFormatter
from ghd.core.logging import level_for, setup_logging

if TYPE_CHECKING:
    from ghd.clients.github import GitHubClient
    from ghd.deployments.resolver import DeploymentResolver


class GhdContext:
    """Shared context object for the ghd command.

    Holds the loaded configuration and the selected profile, and creates
    the GitHub client and resolver on first use.
    """

    def __init__(
        self,
        config: GhdConfig | None = None,
        profile: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        color: bool = True,
    ):
        config = config or get_default_config()
        self._profile = config.get_profile(profile)

        setup_logging(level_for(verbose, config.global_settings.verbosity), color=color)

        # CLI overrides config
        self._output = OutputFormatter(format=output_format or config.global_settings.output_format, color=color)

        # Lazy-loaded
        self._github_client: GitHubClient | None = None
        self._resolver: DeploymentResolver | None = None

    @property
    def profile(self) -> ProfileConfig:
        """Get the current profile configuration."""
        return self._profile

    @property
    def output(self) -> OutputFormatter:
        return self._output

    @property
    def github(self) -> "GitHubClient":
        """Get or create GitHub client."""
        if self._github_client is None:
            from ghd.clients.github import GitHubClient

            self._github_client = GitHubClient(
                self.profile.github,
                environment=self.profile.resolver.environment,
            )
        return self._github_client

    @property
    def resolver(self) -> "DeploymentResolver":
        """Get or create the deployment resolver."""
        if self._resolver is None:
            from ghd.deployments.resolver import DeploymentResolver

            self._resolver = DeploymentResolver(
                self.github,
                strategy=self.profile.resolver.strategy,
                on_status_error=self.profile.resolver.on_status_error,
            )
        return self._resolver

    def close(self) -> None:
        if self._github_client is not None:
            self._github_client.close()
