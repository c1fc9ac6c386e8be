"""Error taxonomy for ledger and billing operations.

Every error carries a human-readable message that is surfaced to the caller
unchanged. None of them are retried automatically.
"""


class LedgerError(Exception):
    """Base class for all errors raised by ledger operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseError(LedgerError, ValueError):
    """A date or period expression could not be resolved."""

    def __init__(self, value: str, message: str | None = None):
        super().__init__(message or f"unable to parse date: {value}")
        self.value = value


class NotFoundError(LedgerError):
    """A client, contract, entry or invoice lookup missed."""


class PreconditionError(LedgerError):
    """The operation cannot run in the current state (missing setup, nothing to bill, bad input)."""


class ConflictError(LedgerError):
    """The operation would violate a uniqueness or billing-linkage rule."""


class PersistenceError(LedgerError):
    """A transaction or commit failed at the storage layer."""


class RenderError(LedgerError):
    """The invoice document could not be generated."""
