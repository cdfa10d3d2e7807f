"""Pytest fixtures for ghd tests."""

import logging
from typing import Any, Generator

import httpx
import pytest
from click.testing import CliRunner

from ghd.clients.github import GitHubClient
from ghd.config import GitHubConfig
from ghd.deployments.resolver import DeploymentResolver

API = "https://api.github.com"
REPO = "octo/hello"


class FakeGitHub:
    """In-memory stand-in for the GitHub API, served through httpx.MockTransport.

    Routes are keyed by URL without the query string. Unknown URLs answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.failures: dict[str, type[httpx.RequestError]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def add(self, url: str, body: Any, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def fail(self, url: str, error: type[httpx.RequestError] = httpx.ConnectError) -> None:
        self.failures[url] = error

    def deployments(self, body: Any, status: int = 200, repo: str = REPO) -> str:
        url = f"{API}/repos/{repo}/deployments"
        self.add(url, body, status)
        return url

    def statuses(self, sha: str, states: list[str], status: int = 200) -> str:
        url = statuses_url(sha)
        self.add(url, [{"state": state, "id": i} for i, state in enumerate(states)], status)
        return url

    def commit(self, sha: str, message: str, repo: str = REPO) -> str:
        url = f"{API}/repos/{repo}/git/commits/{sha}"
        self.add(url, {"sha": sha, "message": message, "author": {"name": "octocat"}})
        return url

    def calls(self, url: str) -> int:
        return sum(1 for r in self.requests if _key(r.url) == url)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = _key(request.url)

        if key in self.failures:
            raise self.failures[key]("connection refused", request=request)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})

        status, body = self.routes[key]
        if isinstance(body, (str, bytes)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)


def _key(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.host}{url.path}"


def statuses_url(sha: str) -> str:
    return f"{API}/repos/{REPO}/deployments/{sha}/statuses"


def deployment(sha: str, **extra: Any) -> dict[str, Any]:
    """A deployment payload shaped like the GitHub API's."""
    return {
        "id": sum(ord(c) for c in sha),
        "sha": sha,
        "ref": "main",
        "environment": "prod",
        "statuses_url": statuses_url(sha),
        "created_at": "2024-05-01T12:00:00Z",
        **extra,
    }


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def github_config() -> GitHubConfig:
    return GitHubConfig(token="ghp_test_token")


@pytest.fixture
def github_client(github_config: GitHubConfig, fake_github: FakeGitHub) -> Generator[GitHubClient, None, None]:
    """GitHub client wired to the fake API."""
    client = GitHubClient(github_config, transport=fake_github.transport)
    yield client
    client.close()


@pytest.fixture
def resolver(github_client: GitHubClient) -> DeploymentResolver:
    return DeploymentResolver(github_client)


@pytest.fixture
def patch_transport(monkeypatch: pytest.MonkeyPatch, fake_github: FakeGitHub) -> FakeGitHub:
    """Route every httpx.Client the CLI creates to the fake API."""
    real_client = httpx.Client

    def client_factory(**kwargs: Any) -> httpx.Client:
        kwargs["transport"] = fake_github.transport
        return real_client(**kwargs)

    monkeypatch.setattr("ghd.clients.github.httpx.Client", client_factory)
    return fake_github


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from the user's environment and config files."""
    env_vars = [
        "GHD_GITHUB_TOKEN",
        "GHD_GITHUB_BASE_URL",
        "GHD_ENVIRONMENT",
        "GHD_PROFILE",
        "GHD_CONFIG",
        "GITHUB_TOKEN",
        "GH_TOKEN",
    ]
    for k in env_vars:
        monkeypatch.delenv(k, raising=False)

    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)

    yield

    # The CLI installs a handler on the ghd logger; drop it with the stream it wrote to
    ghd_logger = logging.getLogger("ghd")
    for handler in ghd_logger.handlers[:]:
        ghd_logger.removeHandler(handler)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file."""
    config_content = """
version: "1"
global:
  output_format: text
profiles:
  default:
    github:
      token: ghp_from_file
  staging:
    github:
      token: ghp_staging
    resolver:
      environment: staging
      strategy: trust-order
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return str(config_file)
