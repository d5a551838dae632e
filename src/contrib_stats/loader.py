"""Invocation driver: runs one loading strategy at a time and wires it to a view.

The loader lives on an asyncio event loop, which plays the part of the main
context: every view update happens on the loop thread. Strategies that report
from worker threads go through ``dispatch``, which defaults to
``loop.call_soon_threadsafe``.

For the task-based strategies the loader also owns cancellation. ``cancel()``
cancels the task and reports CANCELED right away, while loading is only
re-enabled once the task has really finished unwinding.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from .exceptions import InvocationInProgressError
from .github.service import GitHubService
from .models import LoadingState, LoadingStatus, RequestData, User, Variant
from .tasks import (
    GLOBAL_SCOPE,
    DetachedScope,
    load_contributors_background,
    load_contributors_blocking,
    load_contributors_callbacks,
    load_contributors_channels,
    load_contributors_concurrent,
    load_contributors_not_cancellable,
    load_contributors_progress,
    load_contributors_suspend,
)

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[str, str], GitHubService]
Dispatch = Callable[[Callable[[], Any]], Any]


class ContributorsView(Protocol):
    def update_contributors(self, users: list[User]) -> None: ...

    def update_loading_status(self, state: LoadingState) -> None: ...

    def set_actions_status(self, new_loading_enabled: bool, cancellation_enabled: bool = False) -> None: ...


def format_elapsed(seconds: float) -> str:
    """Format a duration as whole seconds and tenths, e.g. ``"2.2 sec"``."""
    millis = int(seconds * 1000)
    return f"{millis // 1000}.{millis % 1000 // 100} sec"


class ContributorsLoader:
    def __init__(
        self,
        view: ContributorsView,
        service_factory: ServiceFactory,
        dispatch: Dispatch | None = None,
        clock: Callable[[], float] = time.monotonic,
        scope: DetachedScope = GLOBAL_SCOPE,
    ) -> None:
        self._view = view
        self._service_factory = service_factory
        self._dispatch = dispatch
        self._clock = clock
        self._scope = scope
        self._state = LoadingState()
        self._active = False
        self._job: asyncio.Task | None = None

    @property
    def state(self) -> LoadingState:
        return self._state

    @property
    def active(self) -> bool:
        return self._active

    def start(self, params: RequestData, variant: Variant) -> asyncio.Future:
        """Start loading ``params.org`` with ``variant``.

        Must be called on the event loop thread. The returned future resolves
        with the final contributors, is cancelled when the load is cancelled
        and carries the data-source error when the load fails.
        """
        if self._active:
            raise InvocationInProgressError("A load is already running; cancel it or wait for it to finish")
        loop = asyncio.get_running_loop()
        dispatch = self._dispatch or loop.call_soon_threadsafe

        service = self._service_factory(params.username, params.password)
        self._active = True
        start_time = self._clock()
        self._clear_results(start_time)
        logger.info("Loading contributors of %s using %s", params.org, variant.name)

        if variant is Variant.BLOCKING:
            future = loop.create_future()
            try:
                users = load_contributors_blocking(service, params)
            except Exception as exc:
                self._fail(future, exc)
            else:
                self._complete(future, users, start_time)
            return future

        if variant is Variant.BACKGROUND:
            future = loop.create_future()
            load_contributors_background(
                service,
                params,
                lambda users: dispatch(lambda: self._complete(future, users, start_time)),
                lambda exc: dispatch(lambda: self._fail(future, exc)),
            )
            return future

        if variant is Variant.CALLBACKS:
            future = loop.create_future()
            load_contributors_callbacks(
                service,
                params,
                lambda users: dispatch(lambda: self._complete(future, users, start_time)),
            )
            return future

        if variant is Variant.SUSPEND:
            job = self._single(load_contributors_suspend(service, params), start_time)
        elif variant is Variant.CONCURRENT:
            job = self._single(load_contributors_concurrent(service, params), start_time)
        elif variant is Variant.NOT_CANCELLABLE:
            # only the parent task is joined; loading comes back while the detached requests still run
            job = self._single(
                load_contributors_not_cancellable(service, params, scope=self._scope), start_time
            )
        elif variant is Variant.PROGRESS:
            job = self._progress(
                functools.partial(load_contributors_progress, service, params), start_time
            )
        elif variant is Variant.CHANNELS:
            job = self._progress(
                functools.partial(load_contributors_channels, service, params), start_time
            )
        else:
            raise ValueError(f"Unsupported variant: {variant}")

        task = loop.create_task(job, name=f"load-{variant.value}")
        self._set_up_cancellation(task)
        return task

    def cancel(self) -> bool:
        """Cancel the running task, if there is one that can be cancelled."""
        job = self._job
        if job is None or job.done():
            logger.debug("Nothing to cancel")
            return False
        job.cancel()
        self._publish(LoadingState(LoadingStatus.CANCELED))
        return True

    async def _single(self, load: Awaitable[list[User]], start_time: float) -> list[User]:
        users = await load
        self._update_results(users, start_time)
        return users

    async def _progress(
        self,
        load: Callable[[Callable[[list[User], bool], Awaitable[None]]], Awaitable[None]],
        start_time: float,
    ) -> list[User]:
        latest: list[User] = []

        async def update(users: list[User], completed: bool) -> None:
            nonlocal latest
            latest = users
            self._update_results(users, start_time, completed)

        await load(update)
        return latest

    def _set_up_cancellation(self, task: asyncio.Task) -> None:
        self._job = task
        self._view.set_actions_status(new_loading_enabled=False, cancellation_enabled=True)
        task.add_done_callback(self._on_job_done)

    def _on_job_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Loading failed", exc_info=task.exception())
        if self._job is task:
            self._job = None
        self._active = False
        self._view.set_actions_status(new_loading_enabled=True)

    def _complete(self, future: asyncio.Future, users: list[User], start_time: float) -> None:
        self._update_results(users, start_time)
        self._active = False
        if not future.done():
            future.set_result(users)

    def _fail(self, future: asyncio.Future, exc: Exception) -> None:
        logger.error("Loading failed", exc_info=exc)
        self._active = False
        self._view.set_actions_status(new_loading_enabled=True)
        if not future.done():
            future.set_exception(exc)

    def _clear_results(self, start_time: float) -> None:
        self._view.update_contributors([])
        self._publish(LoadingState(LoadingStatus.IN_PROGRESS, start_time))
        self._view.set_actions_status(new_loading_enabled=False)

    def _update_results(self, users: list[User], start_time: float, completed: bool = True) -> None:
        self._view.update_contributors(users)
        status = LoadingStatus.COMPLETED if completed else LoadingStatus.IN_PROGRESS
        self._publish(LoadingState(status, start_time, format_elapsed(self._clock() - start_time)))
        if completed:
            self._view.set_actions_status(new_loading_enabled=True)

    def _publish(self, state: LoadingState) -> None:
        self._state = state
        self._view.update_loading_status(state)
