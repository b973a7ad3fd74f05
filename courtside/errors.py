"""
Exception types for the Courtside rotation application.

Scheduling algorithms never raise for ordinary inputs; these errors belong to
the I/O boundaries (roster store, batch persistence, configuration).
"""
from typing import List, Optional


class CourtsideError(Exception):
    """Base class for application errors."""
    pass


class ValidationError(CourtsideError):
    """Malformed update payload or player record at the persistence boundary."""
    pass


class ConfigurationError(CourtsideError):
    """Missing or invalid external-store credentials or endpoint."""
    pass


class RosterStoreError(CourtsideError):
    """A roster store call failed (transport error or rejected request)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PartialPersistenceFailure(CourtsideError):
    """
    One or more chunks of a batch update failed.

    Chunks applied before or after the failing ones are not rolled back.

    Attributes:
        failed_ids: Player ids whose updates were not applied
        errors: Error messages, one per failed chunk
    """

    def __init__(self, failed_ids: List[str], errors: List[str]):
        self.failed_ids = list(failed_ids)
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} chunk(s) failed, {len(self.failed_ids)} update(s) not applied"
        )
