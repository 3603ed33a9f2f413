"""Exceptions and result codes shared across the package."""

from __future__ import annotations

from enum import Enum


class SendResult(Enum):
    """Outcome of pushing a write request to a remote-write endpoint."""

    SUCCESS = 0
    FAILED_RETRYABLE = 1
    FAILED_DONT_RETRY = 2


class PromError(Exception):
    """Base class for every error raised by this package."""


class BatchFullError(PromError):
    """A time series already holds as many samples as its batch size allows."""


class SeriesLimitError(PromError):
    """A write request already holds its maximum number of time series."""


class EncodeError(PromError):
    """A write request could not be serialised or compressed."""


class ConfigurationError(PromError):
    """A client was started without the settings it needs."""


class SendError(PromError):
    """Sending a write request failed.

    ``result`` tells whether the failure is worth retrying and ``status``
    holds the HTTP status code when the server answered, otherwise ``None``.
    """

    def __init__(self, message: str, result: SendResult, status: int | None = None) -> None:
        if result is SendResult.SUCCESS:
            raise ValueError("a send error cannot carry a successful result")
        super().__init__(message)
        self.message = message
        self.result = result
        self.status = status

    @property
    def retryable(self) -> bool:
        """True when sending the same request again may succeed."""
        return self.result is SendResult.FAILED_RETRYABLE