"""Data models for contrib-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Repo:
    name: str


@dataclass(frozen=True)
class User:
    login: str
    contributions: int


@dataclass(frozen=True)
class RequestData:
    username: str
    password: str = field(repr=False)
    org: str


class Variant(Enum):
    BLOCKING = "blocking"
    BACKGROUND = "background"
    CALLBACKS = "callbacks"
    SUSPEND = "suspend"
    CONCURRENT = "concurrent"
    NOT_CANCELLABLE = "not-cancellable"
    PROGRESS = "progress"
    CHANNELS = "channels"

    @classmethod
    def parse(cls, name: str) -> Variant:
        """Look up a variant by name, ignoring case and ``-``/``_`` differences."""
        key = name.strip().lower().replace("_", "-")
        for variant in cls:
            if variant.value == key:
                return variant
        raise ValueError(f"Unknown variant: {name!r}")


class LoadingStatus(Enum):
    INIT = "init"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"
    CANCELED = "canceled"


@dataclass(frozen=True)
class LoadingState:
    status: LoadingStatus = LoadingStatus.INIT
    start_time: float | None = None
    elapsed_time: str = ""


@dataclass
class ContributorsReport:
    org: str
    variant: str
    status: str
    elapsed_time: str
    contributors: list[User] = field(default_factory=list)
