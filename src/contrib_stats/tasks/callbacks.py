"""Issue every request through callbacks and wait on a countdown latch.

Two defects are kept on purpose so they can be observed:

* The latch is awaited inside the repository-list callback. If the service
  delivers callbacks on a single thread, the contributor callbacks queue up
  behind the waiting one and the load never finishes.
* Failed calls are only logged, so one failing repository keeps the latch
  above zero forever.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import Repo, RequestData, User
from .common import log_repos, log_users


class CountDownLatch:
    """Lets threads wait until ``count_down`` has been called ``count`` times."""

    def __init__(self, count: int) -> None:
        self._count = count
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def count_down(self) -> None:
        with self._cond:
            if self._count > 0:
                self._count -= 1
                if self._count == 0:
                    self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)


def load_contributors_callbacks(
    service: GitHubService,
    req: RequestData,
    update_results: Callable[[list[User]], None],
) -> None:
    def on_repos(repos: list[Repo]) -> None:
        log_repos(req, repos)
        latch = CountDownLatch(len(repos))
        results: list[list[User]] = []
        lock = threading.Lock()

        for repo in repos:

            def on_users(users: list[User], repo: Repo = repo) -> None:
                log_users(repo, users)
                with lock:
                    results.append(users)
                latch.count_down()

            service.get_repo_contributors_call(req.org, repo.name).enqueue(on_users)

        latch.wait()
        update_results(aggregate(results))

    service.get_org_repos_call(req.org).enqueue(on_repos)
