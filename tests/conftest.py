from __future__ import annotations

import pytest
from scenario import TIME_SCALE

from contrib_stats.exceptions import GitHubServiceError
from contrib_stats.github.mock import MockGitHubService, RepoScript
from contrib_stats.models import RequestData, User


@pytest.fixture
def req() -> RequestData:
    return RequestData(username="octocat", password="secret", org="test-org")


@pytest.fixture
def service() -> MockGitHubService:
    return MockGitHubService.demo(time_scale=TIME_SCALE)


@pytest.fixture
def failing_service() -> MockGitHubService:
    """repo-2 fails after 200 ms while its siblings are still loading."""
    return MockGitHubService(
        [
            RepoScript("repo-1", 500, [User("user-1", 10)]),
            RepoScript("repo-2", 200, error=GitHubServiceError("boom", status_code=502)),
            RepoScript("repo-3", 1000, [User("user-3", 1)]),
        ],
        repos_delay_ms=100,
        time_scale=TIME_SCALE,
    )
