"""GitHub data sources."""

from .client import HttpGitHubService
from .mock import MockGitHubService
from .service import Call, CallbackExecutor, GitHubService

__all__ = [
    "Call",
    "CallbackExecutor",
    "GitHubService",
    "HttpGitHubService",
    "MockGitHubService",
]
