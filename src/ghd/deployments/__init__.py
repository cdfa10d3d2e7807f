"""Deployment resolution: find the latest successful deployment and its commit."""

from ghd.deployments.models import Deployment, DeploymentStatus, CommitObject, SUCCESS_STATE
from ghd.deployments.resolver import DeploymentResolver
from ghd.deployments.commits import fetch_commit, commit_message_for

__all__ = [
    "Deployment",
    "DeploymentStatus",
    "CommitObject",
    "SUCCESS_STATE",
    "DeploymentResolver",
    "fetch_commit",
    "commit_message_for",
]
