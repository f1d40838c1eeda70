"""GitHub interface layer — PR snapshot models, payload parsing, API client."""

from autoapprove.github.client import GitHubAPIError, GitHubClient, NotFoundError
from autoapprove.github.models import ChangedFile, PullRequest
from autoapprove.github.parser import pull_request_from_api

__all__ = [
    "ChangedFile",
    "GitHubAPIError",
    "GitHubClient",
    "NotFoundError",
    "PullRequest",
    "pull_request_from_api",
]
