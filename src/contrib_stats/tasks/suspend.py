"""Await every request in turn inside a single task."""

from __future__ import annotations

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import RequestData, User
from .common import log_repos, log_users


async def load_contributors_suspend(service: GitHubService, req: RequestData) -> list[User]:
    repos = await service.get_org_repos(req.org)
    log_repos(req, repos)

    results = []
    for repo in repos:
        users = await service.get_repo_contributors(req.org, repo.name)
        log_users(repo, users)
        results.append(users)
    return aggregate(results)
