"""Exceptions raised by the measurement driver."""
from __future__ import annotations

from typing import Optional


class SpeedtestError(Exception):
    """Base class for every driver-side measurement failure."""


class EndpointConnectionError(SpeedtestError):
    """The endpoint refused the connection or could not be reached."""


class RequestTimeoutError(SpeedtestError):
    """A request exceeded the configured timeout and was aborted."""


class MalformedResponseError(SpeedtestError):
    """The endpoint answered with something that is not a JSON object."""


class EndpointResponseError(SpeedtestError):
    """The endpoint answered with a 4xx/5xx status."""

    def __init__(self, status: int, error: str, message: Optional[str] = None) -> None:
        self.status = status
        self.error = error
        self.message = message
        text = f"HTTP {status}: {error}"
        if message:
            text += f" ({message})"
        super().__init__(text)


class NoSuccessfulSamplesError(SpeedtestError):
    """Every latency sample failed."""
