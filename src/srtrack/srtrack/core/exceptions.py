from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    The message is short and safe to show to the end user as-is.
    """


class BadRequest(ValidationError):
    """The request itself is malformed (missing or unparsable field)."""


class NotRegistered(ValidationError):
    def __init__(self, message: str = "You are not registered. Please register first using /register"):
        super().__init__(message)


class Deactivated(NotRegistered):
    """The account exists but was switched off; registering again will not help."""

    def __init__(self, message: str = "Your account has been deactivated. Please contact your commander"):
        super().__init__(message)


class AlreadyRegistered(ValidationError):
    def __init__(self, message: str = "You are already registered"):
        super().__init__(message)


class AlreadyClockedIn(ValidationError):
    def __init__(self, message: str = "You are already clocked in"):
        super().__init__(message)


class NotClockedIn(ValidationError):
    def __init__(self, message: str = "You are not currently clocked in"):
        super().__init__(message)


class PastCutoff(ValidationError):
    def __init__(self, cutoff_hour: int = 22):
        super().__init__(f"Cannot clock in after {cutoff_hour:02d}:00")
        self.cutoff_hour = cutoff_hour


class InvalidDuration(ValidationError):
    def __init__(self, message: str = "Clock out time must be after clock in time"):
        super().__init__(message)


class DuplicateReplay(DomainError):
    """The triggering update was already processed.

    Not a failure from the user's point of view: the action already happened.
    """

    def __init__(self, update_id: int):
        super().__init__("This action has already been processed")
        self.update_id = update_id


class StoreError(Exception):
    """Infrastructure failure in the store. Safe for the caller to retry."""


class StoreUnavailable(StoreError):
    """Connection failure or timeout talking to the store."""


class UniqueViolation(StoreError):
    """A uniqueness constraint rejected a write."""

    def __init__(self, constraint: Optional[str], message: str = ""):
        super().__init__(message or f"Unique constraint violated: {constraint}")
        self.constraint = constraint


class DataIntegrityError(StoreError):
    """Stored data breaks an invariant the store should have enforced."""
