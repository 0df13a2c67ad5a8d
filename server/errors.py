"""Exceptions the endpoint turns into structured JSON error responses."""
from __future__ import annotations

from typing import Any, Dict, Optional


class EndpointError(Exception):
    """An error with an HTTP status and a machine-readable ``error`` string."""

    status = 500

    def __init__(self, error: str, message: Optional[str] = None) -> None:
        self.error = error
        self.message = message
        super().__init__(f"{error}: {message}" if message else error)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


class ValidationError(EndpointError):
    """The request is missing or has malformed input."""

    status = 400


class GenerationError(EndpointError):
    """The random download payload could not be produced."""

    status = 500
