"""Logging helpers shared by the loading strategies."""

from __future__ import annotations

import logging

from ..models import Repo, RequestData, User

logger = logging.getLogger("contrib_stats.tasks")


def log_repos(req: RequestData, repos: list[Repo]) -> None:
    logger.info("%s: loaded %d repos", req.org, len(repos))


def log_users(repo: Repo, users: list[User]) -> None:
    logger.info("%s: loaded %d contributors", repo.name, len(users))
