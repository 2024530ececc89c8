from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced parade, cadet or record does not exist."""


class ConflictError(DomainError):
    """Raised when an operation would violate a parade invariant."""


class LockedError(ConflictError):
    """Raised when a mutation is attempted outside its allowed window."""


class NoOpError(DomainError):
    """Raised when an operation would have nothing to act on."""


class MismatchError(DomainError):
    """Raised when the atomic batch write reports written != expected.

    The caller must resubmit the full batch; nothing is assumed about which
    records landed.
    """

    retryable = True

    def __init__(self, *, expected: int, written: int):
        self.expected = int(expected)
        self.written = int(written)
        super().__init__(f"Attendance mismatch (expected {self.expected}, written {self.written}). Try again.")


class TransactionError(DomainError):
    """Raised when the close transaction rejects the request."""

    def __init__(self, kind, message: Optional[str] = None):
        from .enums import CloseFailure

        self.kind = CloseFailure(kind)
        super().__init__(message or f"Close parade failed: {self.kind.value}")


class AttendancePendingError(TransactionError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("attendance_pending", message or "Cannot close parade. Attendance is still pending.")


class ParadeNotReadyError(TransactionError, ConflictError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("parade_not_ready", message or "Parade is not ready to be closed.")


class StoreError(DomainError):
    """Raised for any I/O failure of the backing store (chained to the driver error)."""
