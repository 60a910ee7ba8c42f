"""Exceptions raised by the aoctl deploy pipeline.

Everything raised before dispatch starts is fatal for the command. The
dispatch-time errors (``UnreachableClusterError`` and ``TransportError``)
are caught per partition and turned into failed results instead.
"""
from typing import List, Optional


class AoctlError(Exception):
    """Base exception for aoctl errors."""
    pass


class NotFoundError(AoctlError):
    """Raised when a search term matches no known application."""
    pass


class AmbiguousError(AoctlError):
    """Raised when a search term matches several applications and none exactly."""

    def __init__(self, search: str, candidates: List[str]):
        self.search = search
        self.candidates = list(candidates)
        super().__init__(
            f"'{search}' matches {len(self.candidates)} applications: "
            f"{', '.join(self.candidates)}"
        )


class ConfigurationError(AoctlError):
    """Raised when the local environment is broken, e.g. an unknown cluster."""
    pass


class ValidationError(AoctlError):
    """Raised for malformed user input such as overrides or exclude patterns."""
    pass


class UserCancelledError(AoctlError):
    """Raised when the user declines the confirmation prompt."""
    pass


class UnreachableClusterError(AoctlError):
    """Raised when a partition targets a cluster marked as unreachable."""

    def __init__(self, cluster: str):
        self.cluster = cluster
        super().__init__("Cluster is not reachable")


class TransportError(AoctlError):
    """Raised when a call to the remote API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
