"""Produce progress updates in one task and deliver them from another.

The producer does the same per-repository work as the progress strategy but
hands every update to a bounded :class:`Channel`; the consumer drains the
channel and does the delivery. Closing the channel is the only end-of-stream
signal.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from ..exceptions import ChannelClosedError
from ..github.service import GitHubService
from ..models import RequestData, User
from .concurrent import cancel_all
from .progress import UpdateResults, load_contributors_progress

T = TypeVar("T")

_CLOSED = object()


class Channel(Generic[T]):
    """Single-producer, single-consumer bounded queue with an end-of-stream marker.

    At most ``capacity`` items wait in the channel; :meth:`send` blocks while it
    is full and :meth:`receive` blocks while it is empty. The close marker does
    not count against the capacity, so closing never blocks.
    """

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._queue: asyncio.Queue = asyncio.Queue()
        self._slots = asyncio.Semaphore(capacity)
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize() - (1 if self._closed and not self._drained else 0)

    async def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosedError("send on a closed channel")
        await self._slots.acquire()
        if self._closed:
            self._slots.release()
            raise ChannelClosedError("send on a closed channel")
        self._queue.put_nowait(item)

    def close(self) -> None:
        """Mark the end of the stream. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> T:
        """Take the next item; raises :class:`ChannelClosedError` past the end of the stream."""
        if self._drained:
            raise ChannelClosedError("channel is closed")
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            raise ChannelClosedError("channel is closed")
        self._slots.release()
        return item

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        while True:
            try:
                item = await self.receive()
            except ChannelClosedError:
                return
            yield item


async def load_contributors_channels(
    service: GitHubService,
    req: RequestData,
    update_results: UpdateResults,
    capacity: int = 1,
) -> None:
    channel: Channel[tuple[list[User], bool]] = Channel(capacity)

    async def send_progress(users: list[User], completed: bool) -> None:
        await channel.send((users, completed))

    async def produce() -> None:
        try:
            await load_contributors_progress(service, req, send_progress)
        finally:
            channel.close()

    producer = asyncio.create_task(produce(), name="contributors-producer")
    try:
        async for users, completed in channel:
            await update_results(users, completed)
    except BaseException:
        await cancel_all([producer])
        raise
    await producer
