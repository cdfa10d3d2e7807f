"""End-to-end pipeline and result presentation.

Internal components raise typed errors; this module is the one place that
turns an outcome into output and an exit code. It never exits the process
itself, that is left to the CLI entry point.
"""

from dataclasses import dataclass
from typing import Any

from ghd.clients.github import GitHubClient
from ghd.core.exceptions import GhdError
from ghd.core.logging import StructuredLogger
from ghd.core.output import OutputFormat, OutputFormatter
from ghd.deployments.commits import fetch_commit
from ghd.deployments.resolver import DeploymentResolver

logger = StructuredLogger(__name__)

EXIT_OK = 0


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful run."""

    repository: str
    environment: str
    sha: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository,
            "environment": self.environment,
            "sha": self.sha,
            "message": self.message,
        }


def resolve(resolver: DeploymentResolver, client: GitHubClient, repository: str) -> Resolution:
    """Resolve the latest successful deployment and fetch its commit message."""
    deployment = resolver.resolve_latest_successful(repository)
    commit = fetch_commit(client, repository, deployment.sha)
    return Resolution(
        repository=repository,
        environment=client.environment,
        sha=deployment.sha,
        message=commit.message,
    )


def present_success(output: OutputFormatter, resolution: Resolution) -> int:
    """Print the result; plain text output is the commit message verbatim."""
    if output.format == OutputFormat.TEXT:
        output.print_text(resolution.message)
    else:
        output.print_data(resolution.to_dict())
    return EXIT_OK


def present_error(output: OutputFormatter, error: GhdError) -> int:
    """Print a one-line diagnostic and return the error's exit code."""
    logger.debug("Run failed", error=type(error).__name__)
    output.print_error(str(error))
    return error.exit_code


def run(
    resolver: DeploymentResolver,
    client: GitHubClient,
    output: OutputFormatter,
    repository: str,
) -> int:
    """Run the whole workflow and return the process exit code."""
    try:
        resolution = resolve(resolver, client, repository)
    except GhdError as e:
        return present_error(output, e)
    return present_success(output, resolution)
