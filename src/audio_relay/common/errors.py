"""Errors raised by the relay and rendered as {"error": message}."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class RelayError(Exception):
    status_code: int
    message: str

    def __str__(self) -> str:
        return self.message

    def to_error(self) -> dict[str, str]:
        return {"error": self.message}


class InvalidModelError(RelayError):
    def __init__(self, model: object) -> None:
        super().__init__(status_code=400, message="Invalid model selected")
        self.model = model


class UpstreamError(RelayError):
    """Transport failure or non-2xx answer from the prediction API."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(status_code=500, message=message)
        self.upstream_status = upstream_status


class JobFailedError(RelayError):
    def __init__(self, upstream_error: object) -> None:
        super().__init__(
            status_code=500,
            message=f"Riffusion generation failed: {upstream_error}",
        )
        self.upstream_error = upstream_error


class PollTimeoutError(RelayError):
    def __init__(self, attempts: int) -> None:
        super().__init__(status_code=500, message="Timeout waiting for Riffusion result")
        self.attempts = attempts
