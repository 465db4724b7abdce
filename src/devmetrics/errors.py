"""Exception types raised outside the merge engine."""

from __future__ import annotations


class DevMetricsError(Exception):
    """Base class for all devmetrics errors."""


class FetchError(DevMetricsError):
    """A provider could not produce stats for a handle."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class RenderError(DevMetricsError):
    """The card template could not be instantiated."""


class WriteError(DevMetricsError):
    """The output file could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to write {path}: {reason}")
        self.path = path
