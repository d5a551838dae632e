"""Fan out like the concurrent strategy and report after every repository."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import RequestData, User
from .common import log_repos
from .concurrent import cancel_all, load_repo_contributors

UpdateResults = Callable[[list[User], bool], Awaitable[None]]


async def load_contributors_progress(
    service: GitHubService,
    req: RequestData,
    update_results: UpdateResults,
) -> None:
    """Call ``update_results(users, is_final)`` once per repository.

    Each call carries the aggregate of every repository finished so far; the
    last one is flagged final. An organization without repositories gets a
    single, final, empty update.
    """
    repos = await service.get_org_repos(req.org)
    log_repos(req, repos)
    if not repos:
        await update_results([], True)
        return

    tasks = [
        asyncio.create_task(load_repo_contributors(service, req, repo), name=f"contributors-{repo.name}")
        for repo in repos
    ]
    results: list[list[User]] = []
    try:
        for next_done in asyncio.as_completed(tasks):
            results.append(await next_done)
            await update_results(aggregate(results), len(results) == len(repos))
    except BaseException:
        await cancel_all(tasks)
        raise
