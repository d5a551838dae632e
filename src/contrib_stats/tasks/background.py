"""Run the blocking strategy on a dedicated worker thread."""

from __future__ import annotations

import threading
from collections.abc import Callable

from ..github.service import GitHubService
from ..models import RequestData, User
from .blocking import load_contributors_blocking


def load_contributors_background(
    service: GitHubService,
    req: RequestData,
    update_results: Callable[[list[User]], None],
    on_failure: Callable[[Exception], None] | None = None,
) -> threading.Thread:
    """Start the load and return the worker thread.

    Both callbacks run on the worker thread; hand them over to the main
    context before touching any view. Without ``on_failure`` the error is
    left to ``threading.excepthook``.
    """

    def work() -> None:
        try:
            users = load_contributors_blocking(service, req)
        except Exception as exc:
            if on_failure is None:
                raise
            on_failure(exc)
            return
        update_results(users)

    thread = threading.Thread(target=work, name="contributors-loader", daemon=True)
    thread.start()
    return thread
