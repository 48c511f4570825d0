"""gitreplay exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ReplayError(Exception):
    """Base exception for all gitreplay failures."""


class ReplayConfigError(ReplayError):
    """Raised for invalid runtime configuration."""


class ReplaySourceError(ReplayError):
    """Raised for fatal read failures against the commit source."""


class MissingObjectError(ReplaySourceError):
    """Raised when an object id is absent from the commit source."""

    def __init__(self, object_id: str) -> None:
        super().__init__(
            f"Object {object_id} is missing from the commit source. "
            "Fetch the complete history before replaying."
        )
        self.object_id = object_id


class IncorrectObjectTypeError(ReplaySourceError):
    """Raised when an object exists but is not of the requested type."""

    def __init__(self, object_id: str, expected_type: str, actual_type: str) -> None:
        super().__init__(
            f"Object {object_id} is a {actual_type}, expected a {expected_type}."
        )
        self.object_id = object_id
        self.expected_type = expected_type
        self.actual_type = actual_type


class ReplayStoreError(ReplayError):
    """Raised for snapshot store commit and lookup failures."""


class ReplayQueryError(ReplayError):
    """Raised for malformed search expressions."""


class ReplayDependencyError(ReplayError):
    """Raised when an optional runtime dependency is missing."""
