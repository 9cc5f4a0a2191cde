"""Ledger error types."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class InvalidMutationError(LedgerError, ValueError):
    """Raised when a mutation argument is rejected before touching state."""
