"""GitHub API client using httpx."""

from typing import Any

import httpx

from ghd import __version__
from ghd.clients import urls
from ghd.config import GitHubConfig, DEFAULT_ENVIRONMENT
from ghd.core.exceptions import (
    ConfigError,
    DecodeError,
    TransportError,
    UpstreamStatusError,
)
from ghd.core.logging import StructuredLogger

logger = StructuredLogger(__name__)

API_VERSION = "2022-11-28"


class GitHubClient:
    """Client for the GitHub REST API.

    Every request is a GET carrying the pinned API version, a bearer token
    and an ``environment`` query filter. The token only ever lives in the
    ``Authorization`` header.
    """

    def __init__(
        self,
        config: GitHubConfig,
        environment: str = DEFAULT_ENVIRONMENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config
        self._environment = environment
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def environment(self) -> str:
        return self._environment

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            token = self._config.get_token()

            if not token:
                raise ConfigError("GitHub token not configured (use --token or GITHUB_TOKEN)")

            headers = {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"{self._config.user_agent}/{__version__}",
            }

            self._client = httpx.Client(
                headers=headers,
                timeout=self._config.timeout,
                follow_redirects=True,
                transport=self._transport,
            )

            logger.debug("Created GitHub client", timeout=self._config.timeout)

        return self._client

    def deployments_url(self, repository: str) -> httpx.URL:
        """URL of the repository's deployments collection."""
        return urls.build_url(self.base_url, repository, urls.deployments_path())

    def commit_url(self, repository: str, revision: str) -> httpx.URL:
        """URL of a git commit object in the repository."""
        return urls.build_url(self.base_url, repository, urls.commit_path(revision))

    def get(self, url: httpx.URL | str) -> httpx.Response:
        """Issue one authenticated GET.

        Raises:
            UpstreamStatusError: The API answered with a 4xx/5xx status
            TransportError: The API could not be reached
        """
        target = url if isinstance(url, httpx.URL) else urls.resolve_absolute_url(url)
        target = target.copy_merge_params({"environment": self._environment})
        log = logger.bind(url=str(target))
        log.debug("GET")

        try:
            response = self.client.get(target)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            try:
                error_data = e.response.json()
                message = error_data.get("message", str(e))
            except (ValueError, AttributeError):
                message = e.response.text or e.response.reason_phrase or str(e)

            log.info("Request rejected", status=status_code)
            raise UpstreamStatusError(message, status_code=status_code, url=str(target))

        except httpx.RequestError as e:
            log.info("Request failed", error=type(e).__name__)
            raise TransportError(f"Request to {target.host} failed: {e}", url=str(target))

        log.debug("Response", status=response.status_code)
        return response

    def get_json(self, url: httpx.URL | str) -> Any:
        """GET a resource and decode its JSON body."""
        response = self.get(url)
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response is not valid JSON: {e}", url=str(response.url))

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
