"""Deployment data models.

Read-only views of the GitHub payloads the resolver consumes. Only the
fields listed here are read; everything else the API returns is ignored.
"""

from dataclasses import dataclass
from typing import Any

from ghd.core.exceptions import DecodeError

SUCCESS_STATE = "success"


def _require_mapping(data: Any, kind: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a {kind} object, got {type(data).__name__}")
    return data


def _require_str(data: dict[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        if key not in data:
            raise DecodeError(f"{kind} is missing '{key}'")
        raise DecodeError(f"{kind} field '{key}' must be a string, got {type(value).__name__}")
    return value


def require_list(data: Any, kind: str) -> list[Any]:
    """Check that a decoded response body is a JSON array."""
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of {kind} objects, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class DeploymentStatus:
    """A state record attached to a deployment."""

    state: str

    @property
    def is_successful(self) -> bool:
        # Exact, case-sensitive match on the provider's canonical label
        return self.state == SUCCESS_STATE

    @classmethod
    def from_api(cls, data: Any) -> "DeploymentStatus":
        payload = _require_mapping(data, "deployment status")
        return cls(state=_require_str(payload, "state", "Deployment status"))


@dataclass(frozen=True)
class Deployment:
    """A deployment of one revision."""

    sha: str
    statuses_url: str
    id: int | None = None
    environment: str | None = None
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> "Deployment":
        payload = _require_mapping(data, "deployment")
        deployment_id = payload.get("id")
        return cls(
            sha=_require_str(payload, "sha", "Deployment"),
            statuses_url=_require_str(payload, "statuses_url", "Deployment"),
            id=deployment_id if isinstance(deployment_id, int) else None,
            environment=payload.get("environment") if isinstance(payload.get("environment"), str) else None,
            created_at=payload.get("created_at") if isinstance(payload.get("created_at"), str) else None,
        )


@dataclass(frozen=True)
class CommitObject:
    """A git commit object; only its message is of interest."""

    message: str
    sha: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> "CommitObject":
        payload = _require_mapping(data, "commit")
        sha = payload.get("sha")
        return cls(
            message=_require_str(payload, "message", "Commit"),
            sha=sha if isinstance(sha, str) else None,
        )
