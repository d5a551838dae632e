"""Exception hierarchy for contrib-stats."""

from __future__ import annotations


class ContribStatsError(Exception):
    """Base exception for all contrib-stats errors."""


class GitHubServiceError(ContribStatsError):
    """A data-source call failed (transport error or non-success response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.status_code}] {self.message}"
        return self.message


class InvocationInProgressError(ContribStatsError):
    """Raised when a new invocation is started while another one is still active."""


class ChannelClosedError(ContribStatsError):
    """Raised when sending to a channel that has already been closed."""
