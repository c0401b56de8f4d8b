from __future__ import annotations


class AppError(Exception):
    """Base error for domain/application exceptions."""


class AlreadyExists(AppError):
    """Raised when a document is already stored under the requested key."""


class NotFound(AppError):
    """Raised when a referenced entity is missing from the world state."""


class FundNotFound(NotFound):
    """Raised when a fund id does not resolve to a fund document."""


class InvestorNotFound(NotFound):
    """Raised when an investor id does not resolve to an investor document."""


class DuplicateName(AppError):
    """Raised when a name-uniqueness rule would be violated."""


class InvalidArgument(AppError):
    """Raised for domain-level validation of operation arguments."""


class InvalidActionType(InvalidArgument):
    """Raised when an action type is outside the allowed set for its entity."""


class StorageFailure(AppError):
    """Raised when the ledger collaborator fails to read, write, query or commit."""
