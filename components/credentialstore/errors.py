from __future__ import annotations
from typing import Optional


class StoreError(RuntimeError):
    """Base typed error for all credential store failures."""


class ConstraintViolation(StoreError):
    """A write hit a uniqueness, check or foreign-key constraint."""

    def __init__(self, constraint: str, message: Optional[str] = None):
        super().__init__(message or f"constraint violated: {constraint}")
        self.constraint = constraint


class RecordNotFound(StoreError):
    """A delete or update addressed a row that does not exist."""


class StoreUnavailable(StoreError):
    """Backend unreachable or failing transiently."""
