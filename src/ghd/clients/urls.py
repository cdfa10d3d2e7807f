"""URL construction for GitHub REST API resources.

Resource URLs are composed strictly hierarchically::

    <api root>/ + repos/ + <owner>/<name>/ + <resource path>

Each step is an RFC 3986 join and is rejected if it would escape the
prefix built so far (``..`` segments, ``//host`` authorities, ``scheme:``
prefixes, query or fragment markers).
"""

import re

import httpx

from ghd.core.exceptions import InvalidUrlError

_FORBIDDEN_SEGMENT = re.compile(r"[\s?#\\\x00-\x1f\x7f]")


def deployments_path() -> str:
    """Resource path of a repository's deployments collection."""
    return "deployments"


def commit_path(revision: str) -> str:
    """Resource path of a git commit object."""
    return f"git/commits/{revision}"


def _check_segments(value: str, what: str, strip_trailing: bool = True) -> list[str]:
    trimmed = value.strip("/") if strip_trailing else value.lstrip("/")
    segments = trimmed.split("/")
    for segment in segments:
        if not segment or segment in (".", ".."):
            raise InvalidUrlError(f"Invalid {what}", url=value)
        if _FORBIDDEN_SEGMENT.search(segment):
            raise InvalidUrlError(f"Invalid character in {what}", url=value)
    return segments


def _parse_root(base_url: str) -> httpx.URL:
    try:
        root = httpx.URL(base_url.rstrip("/") + "/")
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Invalid API base URL ({e})", url=base_url)

    if root.scheme not in ("http", "https") or not root.host:
        raise InvalidUrlError("API base URL must be an absolute http(s) URL", url=base_url)
    if root.query or root.fragment:
        raise InvalidUrlError("API base URL must not carry a query or fragment", url=base_url)
    return root


def _join(prefix: httpx.URL, segment: str) -> httpx.URL:
    try:
        joined = prefix.join(segment)
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Cannot join {segment!r} onto {prefix} ({e})", url=segment)

    if not str(joined).startswith(str(prefix)):
        raise InvalidUrlError(f"Path segment escapes {prefix}", url=segment)
    return joined


def build_url(base_url: str, repository: str, resource_path: str) -> httpx.URL:
    """Build the URL of a repository resource.

    Args:
        base_url: API root, e.g. ``https://api.github.com``
        repository: Repository in ``owner/name`` form
        resource_path: Path below the repository, e.g. ``deployments``

    Returns:
        The absolute resource URL

    Raises:
        InvalidUrlError: If any part cannot be merged into a valid URL
    """
    root = _parse_root(base_url)

    repo_segments = _check_segments(repository, "repository")
    if len(repo_segments) != 2:
        raise InvalidUrlError("Repository must be in owner/name format", url=repository)
    path_segments = _check_segments(resource_path, "resource path", strip_trailing=False)

    url = _join(root, "repos/")
    url = _join(url, "/".join(repo_segments) + "/")
    return _join(url, "/".join(path_segments))


def resolve_absolute_url(url: str) -> httpx.URL:
    """Validate a provider-supplied absolute URL and return it unchanged.

    The URL is not re-based onto the API root; it may name a different host.
    """
    if not url:
        raise InvalidUrlError("Empty URL", url=url)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Malformed URL ({e})", url=url)

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError("Expected an absolute http(s) URL", url=url)
    return parsed
