"""Fan out into a scope that outlives the caller.

Child tasks are owned by a :class:`DetachedScope` instead of the calling task,
so cancelling the caller stops it from waiting but leaves every child running
to completion. This is the behaviour to avoid; it is kept for comparison with
:mod:`contrib_stats.tasks.concurrent`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import RequestData, User
from .common import log_repos
from .concurrent import load_repo_contributors

logger = logging.getLogger(__name__)


class DetachedScope:
    """Owns tasks independently of whoever spawned them."""

    def __init__(self, name: str = "detached") -> None:
        self.name = name
        self._tasks: set[asyncio.Task] = set()

    @property
    def tasks(self) -> set[asyncio.Task]:
        return set(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Task %s in scope %s failed", task.get_name(), self.name, exc_info=task.exception()
            )

    async def join(self) -> list[Any]:
        """Wait for every task currently in the scope and return their results."""
        return await asyncio.gather(*self._tasks)


GLOBAL_SCOPE = DetachedScope("global")


async def load_contributors_not_cancellable(
    service: GitHubService,
    req: RequestData,
    scope: DetachedScope = GLOBAL_SCOPE,
) -> list[User]:
    repos = await service.get_org_repos(req.org)
    log_repos(req, repos)

    tasks = [
        scope.spawn(load_repo_contributors(service, req, repo), name=f"contributors-{repo.name}")
        for repo in repos
    ]
    results = await asyncio.gather(*(asyncio.shield(task) for task in tasks))
    return aggregate(results)
