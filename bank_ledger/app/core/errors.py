class LedgerError(Exception):
    """Base class for every error the ledger core raises."""


class ValidationError(LedgerError):
    """Raised for non-positive amounts, self-transfers or malformed identifiers."""


class NotFoundError(LedgerError):
    """Raised when a referenced account or user does not exist."""


class ConflictError(LedgerError):
    """Raised when an account number is already taken."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal/transfer would drop balance below zero."""


class StorageError(LedgerError):
    """Raised when the store is unavailable or a transaction failed to commit."""
