"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Deposit or withdrawal amount is not a positive whole number of minutes."""


class InvalidRateError(ValidationError):
    """Interest rate is negative or not a number."""


class InsufficientBalanceError(DomainError):
    """Withdrawal would take the balance below zero."""

    def __init__(self, requested: int, available: int):
        super().__init__(insufficient_balance(requested, available))
        self.requested = requested
        self.available = available


class CorruptSnapshotError(DomainError):
    """Persisted snapshot could not be parsed or violates ledger invariants."""

    def __init__(self, reason: str):
        super().__init__(f"Stored ledger data is corrupt: {reason}")
        self.reason = reason


def invalid_amount(amount: object) -> str:
    """Return message for a non-positive or non-integer amount."""
    return f"Amount must be a positive whole number of minutes, got {amount!r}"


def invalid_rate(rate: object) -> str:
    """Return message for a negative or unparseable rate."""
    return f"Interest rate must be a non-negative number, got {rate!r}"


def insufficient_balance(requested: int, available: int) -> str:
    """Return message when a withdrawal exceeds the balance."""
    return (
        f"Insufficient balance: cannot withdraw {requested} minute{'s' if requested != 1 else ''}, "
        f"only {available} available"
    )


def balance_limit_exceeded() -> str:
    """Return message when a deposit would push the balance past its ceiling."""
    return "Deposit would take the balance past the maximum the ledger can hold"
