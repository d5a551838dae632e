"""Scripted GitHub service with simulated latencies.

Latencies are written in milliseconds, the way they would be measured against
the real API, and scaled by ``time_scale`` into seconds of actual sleep. Tests
run the standard scenario at a fraction of real time; the CLI ``--mock`` option
runs it at full length.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..exceptions import GitHubServiceError
from ..models import Repo, User
from .service import Call, CallbackExecutor


@dataclass
class RepoScript:
    """Scripted answer for one repository's contributors request."""

    name: str
    delay_ms: int
    users: list[User] = field(default_factory=list)
    error: Exception | None = None


DEMO_REPOS_DELAY_MS = 1000
DEMO_REPOS = [
    RepoScript("repo-1", 1000, [User("user-1", 10), User("user-2", 5)]),
    RepoScript("repo-2", 1200, [User("user-2", 3), User("user-3", 7)]),
    RepoScript("repo-3", 800, [User("user-1", 2)]),
]


class MockGitHubService:
    """In-memory :class:`~contrib_stats.github.service.GitHubService`."""

    def __init__(
        self,
        repos: Sequence[RepoScript],
        repos_delay_ms: int = 0,
        time_scale: float = 0.001,
        executor: CallbackExecutor | None = None,
        repos_error: Exception | None = None,
    ) -> None:
        self.repos = list(repos)
        self.repos_delay_ms = repos_delay_ms
        self.time_scale = time_scale
        self.repos_error = repos_error
        self._owns_executor = executor is None
        self._executor = executor or CallbackExecutor(name="mock-callback")
        self._by_name = {script.name: script for script in self.repos}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.started: list[str] = []
        self.finished: list[str] = []

    @classmethod
    def demo(cls, time_scale: float = 0.001, **kwargs) -> MockGitHubService:
        """Three repositories answering in 1000, 1200 and 800 ms after a 1000 ms listing."""
        return cls(DEMO_REPOS, repos_delay_ms=DEMO_REPOS_DELAY_MS, time_scale=time_scale, **kwargs)

    async def aclose(self) -> None:
        if self._owns_executor:
            self._executor.shutdown()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self.started) - len(self.finished)

    def _seconds(self, delay_ms: int) -> float:
        return delay_ms * self.time_scale

    def _record(self, method: str, *args: str) -> None:
        with self._lock:
            self.calls.append((method, args))

    def _script(self, org: str, repo: str) -> RepoScript:
        try:
            return self._by_name[repo]
        except KeyError:
            raise GitHubServiceError(f"{org}/{repo} not found", status_code=404) from None

    def _repos_result(self) -> list[Repo]:
        if self.repos_error is not None:
            raise self.repos_error
        return [Repo(script.name) for script in self.repos]

    def _users_result(self, script: RepoScript) -> list[User]:
        with self._lock:
            self.finished.append(script.name)
        if script.error is not None:
            raise script.error
        return list(script.users)

    def _begin(self, script: RepoScript) -> None:
        with self._lock:
            self.started.append(script.name)

    async def get_org_repos(self, org: str) -> list[Repo]:
        self._record("get_org_repos", org)
        await asyncio.sleep(self._seconds(self.repos_delay_ms))
        return self._repos_result()

    async def get_repo_contributors(self, org: str, repo: str) -> list[User]:
        self._record("get_repo_contributors", org, repo)
        script = self._script(org, repo)
        self._begin(script)
        await asyncio.sleep(self._seconds(script.delay_ms))
        return self._users_result(script)

    def _blocking_repos(self, org: str) -> list[Repo]:
        self._record("get_org_repos", org)
        time.sleep(self._seconds(self.repos_delay_ms))
        return self._repos_result()

    def _blocking_users(self, org: str, repo: str) -> list[User]:
        self._record("get_repo_contributors", org, repo)
        script = self._script(org, repo)
        self._begin(script)
        time.sleep(self._seconds(script.delay_ms))
        return self._users_result(script)

    def get_org_repos_call(self, org: str) -> Call[list[Repo]]:
        return Call(lambda: self._blocking_repos(org), self._executor, f"repos of {org}")

    def get_repo_contributors_call(self, org: str, repo: str) -> Call[list[User]]:
        return Call(
            lambda: self._blocking_users(org, repo),
            self._executor,
            f"contributors of {org}/{repo}",
        )
