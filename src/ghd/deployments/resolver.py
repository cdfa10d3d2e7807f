"""Resolve the latest successful deployment of a repository."""

from typing import Iterator

from ghd.clients.github import GitHubClient
from ghd.config import SelectionStrategy, StatusErrorPolicy
from ghd.core.exceptions import NotFoundError, UpstreamError, InvalidUrlError
from ghd.core.logging import StructuredLogger
from ghd.deployments.models import Deployment, DeploymentStatus, require_list

logger = StructuredLogger(__name__)


class DeploymentResolver:
    """Finds the most recent deployment that reached a successful state.

    Deployments are scanned in the order the API returns them, which is
    newest first; no re-sorting is done. The scan is lazy and stops at the
    first match, so a deployment's statuses are fetched only if every
    deployment before it failed the success predicate.

    Two behaviours are configurable:

    ``strategy``
        ``VERIFY`` (default) requires at least one ``"success"`` status.
        ``TRUST_ORDER`` accepts the first listed deployment without fetching
        any statuses.

    ``on_status_error``
        ``FAIL`` (default) propagates a failed status fetch and ends the
        resolution. ``SKIP`` logs it and moves on to the next deployment.
    """

    def __init__(
        self,
        client: GitHubClient,
        strategy: SelectionStrategy = SelectionStrategy.VERIFY,
        on_status_error: StatusErrorPolicy = StatusErrorPolicy.FAIL,
    ):
        self._client = client
        self._strategy = strategy
        self._on_status_error = on_status_error

    @property
    def strategy(self) -> SelectionStrategy:
        return self._strategy

    def list_deployments(self, repository: str) -> list[Deployment]:
        """Fetch one page of deployments, in API order."""
        data = self._client.get_json(self._client.deployments_url(repository))
        deployments = [Deployment.from_api(item) for item in require_list(data, "deployment")]
        logger.info("Fetched deployments", repository=repository, count=len(deployments))
        return deployments

    def statuses_for(self, deployment: Deployment) -> list[DeploymentStatus]:
        """Fetch the status records of a deployment."""
        data = self._client.get_json(deployment.statuses_url)
        return [DeploymentStatus.from_api(item) for item in require_list(data, "deployment status")]

    def is_successful(self, deployment: Deployment) -> bool:
        """Check whether any status of the deployment is a success."""
        return any(status.is_successful for status in self.statuses_for(deployment))

    def iter_successful(self, repository: str) -> Iterator[Deployment]:
        """Yield successful deployments lazily, in API order."""
        for deployment in self.list_deployments(repository):
            if self._strategy == SelectionStrategy.TRUST_ORDER:
                yield deployment
                continue

            try:
                successful = self.is_successful(deployment)
            except (UpstreamError, InvalidUrlError) as e:
                if self._on_status_error == StatusErrorPolicy.FAIL:
                    raise
                logger.info("Skipping deployment, status check failed", sha=deployment.sha, error=e)
                continue

            logger.debug("Checked deployment", sha=deployment.sha, successful=successful)
            if successful:
                yield deployment

    def resolve_latest_successful(self, repository: str) -> Deployment:
        """Return the first successful deployment.

        Raises:
            NotFoundError: No deployment satisfies the success predicate
            UpstreamError: A lookup failed or returned an unexpected body
            InvalidUrlError: The repository or a status URL is malformed
        """
        deployment = next(self.iter_successful(repository), None)
        if deployment is None:
            raise NotFoundError(f"No successful deployment found for {repository}", repository=repository)

        logger.info("Resolved deployment", repository=repository, sha=deployment.sha)
        return deployment
