"""Error types shared by the stop lookup pipeline."""

from __future__ import annotations


class StopBoardError(Exception):
    """Base class for failures that leave a stop without a schedule."""


class ConfigError(StopBoardError):
    """Raised when the Transit API credential is not configured."""


class StopNotFound(StopBoardError):
    """Raised when a stop or its departures cannot be looked up."""


class UpstreamUnavailable(StopNotFound):
    """Raised when a Transit API request fails or returns a non-200 response."""


class NoMatch(StopNotFound):
    """Raised when a stop search returns no candidate for the target agency."""


__all__ = ["StopBoardError", "ConfigError", "StopNotFound", "UpstreamUnavailable", "NoMatch"]
