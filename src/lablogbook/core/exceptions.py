from __future__ import annotations

from typing import Iterable


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when a write would break an invariant (double session, double forward...)."""


class StoreError(DomainError):
    """Raised on transient storage failures. Safe to retry with backoff."""


def error_kind(exc: DomainError) -> str:
    """Short wire name of an error: Validation, NotFound, Conflict, Store."""
    for cls, kind in (
        (ValidationError, "Validation"),
        (NotFoundError, "NotFound"),
        (ConflictError, "Conflict"),
        (StoreError, "Store"),
    ):
        if isinstance(exc, cls):
            return kind
    return "Domain"
