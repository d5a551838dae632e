"""Aggregator: merges per-repository contributor lists into one ranked list."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from .models import User


def _sort_key(user: User) -> tuple[int, str]:
    return -user.contributions, user.login


def aggregate(user_lists: Iterable[Iterable[User]]) -> list[User]:
    """Sum contributions per login across all lists.

    The result holds one entry per login, ordered by descending contributions
    with ties broken by ascending login.
    """
    totals: dict[str, int] = defaultdict(int)
    for users in user_lists:
        for user in users:
            totals[user.login] += user.contributions

    merged = [User(login=login, contributions=total) for login, total in totals.items()]
    merged.sort(key=_sort_key)
    return merged
