"""Tests for the bounded hand-off channel."""

from __future__ import annotations

import asyncio

import pytest

from contrib_stats.exceptions import ChannelClosedError
from contrib_stats.tasks import Channel


@pytest.mark.asyncio
async def test_items_arrive_in_order():
    channel = Channel(capacity=3)
    for i in range(3):
        await channel.send(i)
    channel.close()

    assert [item async for item in channel] == [0, 1, 2]


@pytest.mark.asyncio
async def test_send_blocks_while_full():
    channel = Channel(capacity=1)
    await channel.send("first")

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(channel.send("second"), timeout=0.05)

    assert await channel.receive() == "first"
    await asyncio.wait_for(channel.send("third"), timeout=0.05)
    assert await channel.receive() == "third"


@pytest.mark.asyncio
async def test_receive_blocks_while_empty():
    channel = Channel()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(channel.receive(), timeout=0.05)


@pytest.mark.asyncio
async def test_close_does_not_block_on_full_channel():
    channel = Channel(capacity=1)
    await channel.send("pending")
    channel.close()

    assert await channel.receive() == "pending"
    with pytest.raises(ChannelClosedError):
        await channel.receive()


@pytest.mark.asyncio
async def test_end_of_stream_is_consumed_once():
    channel = Channel()
    channel.close()
    channel.close()

    assert [item async for item in channel] == []
    assert channel.qsize() == 0
    with pytest.raises(ChannelClosedError):
        await channel.receive()


@pytest.mark.asyncio
async def test_send_after_close_fails():
    channel = Channel()
    channel.close()
    assert channel.closed
    with pytest.raises(ChannelClosedError):
        await channel.send("late")


@pytest.mark.asyncio
async def test_producer_and_consumer_tasks():
    channel = Channel(capacity=1)
    received = []

    async def produce():
        for i in range(5):
            await channel.send(i)
        channel.close()

    async def consume():
        async for item in channel:
            received.append(item)

    await asyncio.gather(produce(), consume())
    assert received == [0, 1, 2, 3, 4]


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        Channel(capacity=0)
