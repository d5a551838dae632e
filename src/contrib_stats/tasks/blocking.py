"""Load everything on the calling thread."""

from __future__ import annotations

from ..aggregator import aggregate
from ..github.service import GitHubService
from ..models import RequestData, User
from .common import log_repos, log_users


def load_contributors_blocking(service: GitHubService, req: RequestData) -> list[User]:
    repos = service.get_org_repos_call(req.org).execute()
    log_repos(req, repos)

    results = []
    for repo in repos:
        users = service.get_repo_contributors_call(req.org, repo.name).execute()
        log_users(repo, users)
        results.append(users)
    return aggregate(results)
