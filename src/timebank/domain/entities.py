"""Domain model entities for timebank.

These are pure data classes representing the ledger, independent of how the
snapshot is stored. Balances and amounts are whole minutes; the interest rate
is an exact rational number of percent per day.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from fractions import Fraction
from typing import Optional

from timebank.domain.errors import CorruptSnapshotError

DEFAULT_INTEREST_RATE = Fraction(10)
"""Default daily interest rate in percent."""

MAX_ACCRUAL_DAYS = 3650
"""Most days compounded in a single reconciliation."""

MAX_PROJECTION_DAYS = 36500
"""Longest horizon accepted by projections."""

MAX_BALANCE = 10**4000 - 1
"""Largest balance the ledger holds; interest stops compounding at this ceiling.

Python refuses to render integers of more than 4300 digits as text, so every
balance must stay below that to be displayed and stored.
"""

DEPOSIT_PRESETS = (10, 30, 60)
"""Quick deposit amounts in minutes."""


class TransactionKind(Enum):
    """Kind of balance-changing event."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INTEREST_ACCRUAL = "interest"

    @property
    def is_credit(self) -> bool:
        """True if the kind adds to the balance."""
        return self is not TransactionKind.WITHDRAWAL

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    TransactionKind.DEPOSIT: "Deposit",
    TransactionKind.WITHDRAWAL: "Withdrawal",
    TransactionKind.INTEREST_ACCRUAL: "Interest",
}


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    kind: TransactionKind
    amount: int
    date: date
    balance_after: int

    @property
    def balance_before(self) -> int:
        """Balance immediately before this transaction."""
        if self.kind.is_credit:
            return self.balance_after - self.amount
        return self.balance_after + self.amount


@dataclass(frozen=True)
class LedgerSnapshot:
    """Complete ledger state as persisted.

    ``transactions`` is ordered newest-first.
    """

    total_time: int
    transactions: tuple[Transaction, ...]
    interest_rate: Fraction
    last_update_date: date

    @classmethod
    def initial(cls, today: date, interest_rate: Fraction = DEFAULT_INTEREST_RATE) -> "LedgerSnapshot":
        """Create the snapshot used on first use or after a reset."""
        return cls(
            total_time=0,
            transactions=(),
            interest_rate=interest_rate,
            last_update_date=today,
        )

    @property
    def next_transaction_id(self) -> int:
        """ID for the next transaction created against this snapshot."""
        return max((txn.id for txn in self.transactions), default=0) + 1


@dataclass(frozen=True)
class AccrualResult:
    """Proposed accrual patch produced by reconciliation.

    ``transactions`` is chronological (oldest day first).
    """

    transactions: tuple[Transaction, ...]
    final_balance: int
    last_update_date: date
    days_passed: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.transactions

    @property
    def total_interest(self) -> int:
        return sum(txn.amount for txn in self.transactions)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window for filtering transactions.

    Use the constructors ``all_time``, ``trailing`` and ``between``.
    """

    start: Optional[date] = None
    end: Optional[date] = None
    trailing_days: Optional[int] = None

    @classmethod
    def all_time(cls) -> "DateRange":
        return cls()

    @classmethod
    def trailing(cls, days: int) -> "DateRange":
        """Transactions dated on or after ``today - days``."""
        if days < 0:
            raise ValueError(f"Trailing days must be non-negative, got {days}")
        return cls(trailing_days=days)

    @classmethod
    def between(cls, start: date, end: date) -> "DateRange":
        """Transactions dated from ``start`` through ``end``, both inclusive."""
        return cls(start=start, end=end)

    @property
    def is_all_time(self) -> bool:
        return self.start is None and self.end is None and self.trailing_days is None

    def bounds(self, today: date) -> tuple[Optional[date], Optional[date]]:
        """Resolve to concrete (start, end) bounds for the given day."""
        if self.trailing_days is not None:
            return today - timedelta(days=self.trailing_days), None
        return self.start, self.end

    def contains(self, value: date, today: date) -> bool:
        start, end = self.bounds(today)
        if start is not None and value < start:
            return False
        if end is not None and value > end:
            return False
        return True


@dataclass(frozen=True)
class TransactionFilter:
    """Selection passed to ledger queries and aggregates."""

    kind: Optional[TransactionKind] = None
    date_range: DateRange = field(default_factory=DateRange.all_time)

    def matches(self, txn: Transaction, today: date) -> bool:
        if self.kind is not None and txn.kind is not self.kind:
            return False
        return self.date_range.contains(txn.date, today)


@dataclass(frozen=True)
class DailyTotals:
    """Per-day sums of transaction amounts by kind."""

    deposit_total: int = 0
    withdraw_total: int = 0
    interest_total: int = 0

    def add(self, txn: Transaction) -> "DailyTotals":
        if txn.kind is TransactionKind.DEPOSIT:
            return DailyTotals(self.deposit_total + txn.amount, self.withdraw_total, self.interest_total)
        if txn.kind is TransactionKind.WITHDRAWAL:
            return DailyTotals(self.deposit_total, self.withdraw_total + txn.amount, self.interest_total)
        return DailyTotals(self.deposit_total, self.withdraw_total, self.interest_total + txn.amount)

    @property
    def net(self) -> int:
        return self.deposit_total + self.interest_total - self.withdraw_total


@dataclass(frozen=True)
class LoadReport:
    """Outcome of opening the ledger."""

    created: bool = False
    corrupt: Optional[CorruptSnapshotError] = None
    accrual: Optional[AccrualResult] = None


def check_consistency(snapshot: LedgerSnapshot) -> list[str]:
    """Return a description of every ledger invariant the snapshot violates.

    Checks that amounts are positive, that each transaction's balance follows
    from the next-older one (the oldest starting from zero), that no balance
    is negative, that the total stays within ``MAX_BALANCE`` and matches the
    newest transaction.
    """
    problems = []
    if snapshot.total_time < 0:
        problems.append(f"total time {snapshot.total_time} is negative")
    if snapshot.total_time > MAX_BALANCE:
        # Too large to describe the remaining checks in text
        problems.append("total time exceeds the maximum balance")
        return problems
    if snapshot.interest_rate < 0:
        problems.append(f"interest rate {snapshot.interest_rate} is negative")

    expected_total = snapshot.transactions[0].balance_after if snapshot.transactions else 0
    if snapshot.total_time != expected_total:
        problems.append(
            f"total time {snapshot.total_time} does not match latest balance {expected_total}"
        )

    seen_ids = set()
    previous_balance = 0
    for txn in reversed(snapshot.transactions):
        if txn.id in seen_ids:
            problems.append(f"transaction id {txn.id} is not unique")
        seen_ids.add(txn.id)
        if txn.amount <= 0:
            problems.append(f"transaction {txn.id} has non-positive amount {txn.amount}")
        if txn.balance_after < 0:
            problems.append(f"transaction {txn.id} leaves a negative balance")
        if txn.balance_before != previous_balance:
            problems.append(
                f"transaction {txn.id} starts from {txn.balance_before}, expected {previous_balance}"
            )
        previous_balance = txn.balance_after
    return problems
