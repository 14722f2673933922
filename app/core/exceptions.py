"""
Exceptions raised by the Asbis synchronization engine.

Every failure the engine can report is an ``AsbisSyncError`` so callers at the
HTTP and task boundaries can catch the family in one place.
"""
from typing import Optional


class AsbisSyncError(Exception):
    """Base class for synchronization errors."""


class VendorUnavailable(AsbisSyncError):
    """The vendor API could not be reached or answered with an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RecordMappingError(AsbisSyncError):
    """A single vendor record could not be mapped onto a local entity."""

    def __init__(self, vendor_id: Optional[str], message: str):
        super().__init__(message)
        self.vendor_id = vendor_id

    def __str__(self) -> str:
        if self.vendor_id:
            return f"{self.vendor_id}: {self.args[0]}"
        return self.args[0]


class DataIntegrityViolation(AsbisSyncError):
    """Several local entities share one vendor identifier."""

    def __init__(self, entity: str, vendor_id: str, count: int):
        super().__init__(
            f"{count} {entity} records share vendor id '{vendor_id}'"
        )
        self.entity = entity
        self.vendor_id = vendor_id
        self.count = count


class StageFailure(AsbisSyncError):
    """A whole sync stage failed before producing per-record results."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
