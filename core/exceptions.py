# core/exceptions.py

class DomainError(Exception):
    """Base class for ledger domain errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when an order, task or movement carries invalid data."""


class NotFoundError(DomainError):
    """Raised when an order, task or movement id cannot be resolved."""


class BusinessRuleError(DomainError):
    """Raised when a ledger rule is violated (e.g. switching a locked billing mode)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale ledger write."""
