"""
Error types raised by the sweep engine.

Cancellation is deliberately absent here: an interrupted sweep stops
quietly and is not reported as a failure.
"""

from typing import Optional


class SweepError(Exception):
    """Base class for every fatal sweep error."""


class ConfigurationError(SweepError):
    """Credentials, region or options could not be resolved."""


class DiscoveryError(SweepError):
    """Listing functions or group members failed."""

    def __init__(self, message: str, group: Optional[str] = None):
        super().__init__(message)
        self.group = group


class ListVersionsError(SweepError):
    """Listing the versions of a function failed."""

    def __init__(self, function: str, message: str):
        super().__init__(f"failed to list versions of {function}: {message}")
        self.function = function


class DeleteError(SweepError):
    """Deleting a function version failed."""

    def __init__(self, function: str, version: str, message: str):
        super().__init__(f"failed to delete {function}:{version}: {message}")
        self.function = function
        self.version = version
