"""Domain layer for timebank application."""

from timebank.domain.entities import (
    DailyTotals,
    DateRange,
    LedgerSnapshot,
    Transaction,
    TransactionFilter,
    TransactionKind,
)
from timebank.domain.errors import (
    CorruptSnapshotError,
    DomainError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidRateError,
    ValidationError,
)

__all__ = [
    "DailyTotals",
    "DateRange",
    "LedgerSnapshot",
    "Transaction",
    "TransactionFilter",
    "TransactionKind",
    "CorruptSnapshotError",
    "DomainError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "InvalidRateError",
    "ValidationError",
]
