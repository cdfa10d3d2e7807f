"""Commit object lookup."""

from ghd.clients.github import GitHubClient
from ghd.core.logging import StructuredLogger
from ghd.deployments.models import CommitObject

logger = StructuredLogger(__name__)


def fetch_commit(client: GitHubClient, repository: str, revision: str) -> CommitObject:
    """Fetch and decode the git commit object of a revision."""
    data = client.get_json(client.commit_url(repository, revision))
    commit = CommitObject.from_api(data)
    logger.debug("Fetched commit", repository=repository, sha=revision)
    return commit


def commit_message_for(client: GitHubClient, repository: str, revision: str) -> str:
    return fetch_commit(client, repository, revision).message
