"""Loading strategies: the same fetch-and-aggregate job under different concurrency models."""

from .background import load_contributors_background
from .blocking import load_contributors_blocking
from .callbacks import CountDownLatch, load_contributors_callbacks
from .channels import Channel, load_contributors_channels
from .concurrent import load_contributors_concurrent
from .not_cancellable import GLOBAL_SCOPE, DetachedScope, load_contributors_not_cancellable
from .progress import load_contributors_progress
from .suspend import load_contributors_suspend

__all__ = [
    "GLOBAL_SCOPE",
    "Channel",
    "CountDownLatch",
    "DetachedScope",
    "load_contributors_background",
    "load_contributors_blocking",
    "load_contributors_callbacks",
    "load_contributors_channels",
    "load_contributors_concurrent",
    "load_contributors_not_cancellable",
    "load_contributors_progress",
    "load_contributors_suspend",
]
