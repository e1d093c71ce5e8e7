from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced worker, session or record does not exist."""


class DecodeError(DomainError):
    """Raised when a stored row cannot be mapped to a domain object."""


class ScanRejected(ValidationError):
    """A single scan was refused. Nothing else is affected."""


class NotFoundOrIneligible(ScanRejected):
    pass


class AlreadyCheckedIn(ScanRejected):
    pass


class AlreadyCompletedToday(ScanRejected):
    pass


class CooldownActive(ScanRejected):
    def __init__(self, message: str, *, hours_left: int, minutes_left: int):
        super().__init__(message)
        self.hours_left = hours_left
        self.minutes_left = minutes_left


class DepartmentNotAllowed(ScanRejected):
    pass


class DuplicateInSession(ScanRejected):
    pass
