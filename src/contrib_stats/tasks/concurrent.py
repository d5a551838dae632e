"""Fan out one task per repository and wait for all of them."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import Repo, RequestData, User
from .common import log_repos, log_users


async def load_repo_contributors(service: GitHubService, req: RequestData, repo: Repo) -> list[User]:
    users = await service.get_repo_contributors(req.org, repo.name)
    log_users(repo, users)
    return users


async def cancel_all(tasks: Iterable[asyncio.Future]) -> None:
    """Cancel every task and wait until all of them have finished unwinding."""
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def load_contributors_concurrent(service: GitHubService, req: RequestData) -> list[User]:
    repos = await service.get_org_repos(req.org)
    log_repos(req, repos)

    tasks = [
        asyncio.create_task(load_repo_contributors(service, req, repo), name=f"contributors-{repo.name}")
        for repo in repos
    ]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        # gather only cancels its children when it is cancelled itself
        await cancel_all(tasks)
        raise
    return aggregate(results)
