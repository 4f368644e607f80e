"""Exception hierarchy shared by the ledger, the record store and the API."""


class PoolError(Exception):
    """Base exception for all lending pool errors."""


class ValidationError(PoolError):
    """Raised when payment or loan input is malformed or out of range."""


class NotFoundError(PoolError):
    """Raised when a referenced loan or member does not exist."""


class StoreError(PoolError):
    """Raised when the persistence layer fails.

    The underlying driver/ORM exception is kept as ``__cause__``.
    """


class ConflictError(StoreError):
    """Raised when a loan row changed between read and write."""
