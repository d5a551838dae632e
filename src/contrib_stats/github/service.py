"""Data-source interface consumed by the loading strategies.

A service answers two questions, "which repositories does this organization
have" and "who contributed to this repository", in two flavours: coroutines for
the asyncio-based strategies and :class:`Call` handles for the thread- and
callback-based ones.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from ..models import Repo, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallbackExecutor:
    """Runs submitted functions on a fixed pool of daemon worker threads.

    Functions run in submission order per worker. A function that blocks keeps
    its worker busy, so with ``workers=1`` a blocked callback stalls every later
    one.
    """

    def __init__(self, workers: int = 4, name: str = "callback") -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._queue: queue.SimpleQueue[Callable[[], None] | None] = queue.SimpleQueue()
        self._threads = [
            threading.Thread(target=self._work, name=f"{name}-{i}", daemon=True)
            for i in range(workers)
        ]
        for thread in self._threads:
            thread.start()

    @property
    def workers(self) -> int:
        return len(self._threads)

    def submit(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def shutdown(self) -> None:
        """Stop the workers once they drain the functions already submitted."""
        for _ in self._threads:
            self._queue.put(None)

    def _work(self) -> None:
        while True:
            fn = self._queue.get()
            if fn is None:
                return
            try:
                fn()
            except Exception:
                logger.exception("Callback raised")


class Call(Generic[T]):
    """A prepared request that has not been sent yet."""

    def __init__(
        self,
        fn: Callable[[], T],
        executor: CallbackExecutor,
        description: str = "",
    ) -> None:
        self._fn = fn
        self._executor = executor
        self.description = description

    def execute(self) -> T:
        """Send the request on the current thread and block until it completes."""
        return self._fn()

    def enqueue(
        self,
        on_response: Callable[[T], None],
        on_failure: Callable[[Exception], None] | None = None,
    ) -> None:
        """Send the request on the executor and report back from a worker thread.

        Without ``on_failure`` a failed request is only logged and
        ``on_response`` is never called.
        """

        def run() -> None:
            try:
                result = self._fn()
            except Exception as exc:
                if on_failure is None:
                    logger.error("Call failed: %s", self.description, exc_info=exc)
                else:
                    on_failure(exc)
                return
            on_response(result)

        self._executor.submit(run)


class GitHubService(Protocol):
    async def get_org_repos(self, org: str) -> list[Repo]: ...

    async def get_repo_contributors(self, org: str, repo: str) -> list[User]: ...

    def get_org_repos_call(self, org: str) -> Call[list[Repo]]: ...

    def get_repo_contributors_call(self, org: str, repo: str) -> Call[list[User]]: ...
