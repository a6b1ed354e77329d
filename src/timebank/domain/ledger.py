"""Ledger domain service."""

import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import replace
from datetime import date
from fractions import Fraction
from typing import Optional

from timebank.database.base import Database
from timebank.domain.accrual import RateLike, coerce_rate, projected_balance, reconcile
from timebank.domain.entities import (
    DEFAULT_INTEREST_RATE,
    MAX_ACCRUAL_DAYS,
    MAX_BALANCE,
    AccrualResult,
    DailyTotals,
    LedgerSnapshot,
    LoadReport,
    Transaction,
    TransactionFilter,
    TransactionKind,
    check_consistency,
)
from timebank.domain.errors import (
    CorruptSnapshotError,
    InsufficientBalanceError,
    InvalidAmountError,
    ValidationError,
    balance_limit_exceeded,
    invalid_amount,
)

logger = logging.getLogger(__name__)


class TransactionQuery:
    """Lazy, restartable view over matching transactions, newest first.

    Each iteration walks the history captured when the query was created, so
    later mutations of the ledger do not affect it.
    """

    def __init__(
        self,
        transactions: tuple[Transaction, ...],
        transaction_filter: TransactionFilter,
        today: date,
    ):
        self._transactions = transactions
        self.transaction_filter = transaction_filter
        self.today = today

    def __iter__(self) -> Iterator[Transaction]:
        for txn in self._transactions:
            if self.transaction_filter.matches(txn, self.today):
                yield txn

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def count(self) -> int:
        return sum(1 for _ in self)


class LedgerService:
    """Service owning the ledger snapshot.

    All mutations are applied to a copy of the snapshot, persisted, and only
    then made current, so memory and storage never disagree.
    """

    def __init__(
        self,
        db: Database,
        clock: Callable[[], date] = date.today,
        default_rate: RateLike = DEFAULT_INTEREST_RATE,
        max_accrual_days: Optional[int] = MAX_ACCRUAL_DAYS,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            clock: Callable returning the current calendar date
            default_rate: Interest rate used for new or reset ledgers
            max_accrual_days: Cap on days compounded in one reconciliation
                (None for no cap)
        """
        self.db = db
        self.clock = clock
        self.default_rate = coerce_rate(default_rate)
        self.max_accrual_days = max_accrual_days
        self._snapshot: Optional[LedgerSnapshot] = None
        self._lock = threading.RLock()

    # State access
    @property
    def snapshot(self) -> LedgerSnapshot:
        if self._snapshot is None:
            raise RuntimeError("Ledger has not been opened; call open() first")
        return self._snapshot

    @property
    def balance(self) -> int:
        return self.snapshot.total_time

    @property
    def interest_rate(self) -> Fraction:
        return self.snapshot.interest_rate

    @property
    def last_update_date(self) -> date:
        return self.snapshot.last_update_date

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self.snapshot.transactions

    def open(self) -> LoadReport:
        """Load the stored snapshot and bring accrual up to date.

        Returns:
            LoadReport describing whether the ledger was created, whether the
            stored data was corrupt, and what interest was applied
        """
        with self._lock:
            today = self.clock()
            try:
                stored = self.db.load_snapshot(today)
            except CorruptSnapshotError as e:
                logger.warning("%s; starting from an empty ledger", e)
                self._snapshot = LedgerSnapshot.initial(today, self.default_rate)
                return LoadReport(corrupt=e)

            if stored is None:
                logger.info("No stored ledger found; creating a new one")
                self._commit(LedgerSnapshot.initial(today, self.default_rate))
                return LoadReport(created=True)

            self._snapshot = stored
            result = self.reconcile(today)
            return LoadReport(accrual=result)

    def reconcile(self, today: Optional[date] = None) -> AccrualResult:
        """Apply interest for every day since the last update.

        Args:
            today: Date to reconcile through (defaults to the clock)

        Returns:
            The merged AccrualResult
        """
        with self._lock:
            result = reconcile(
                self.snapshot,
                today if today is not None else self.clock(),
                max_days=self.max_accrual_days,
            )
            self.apply_accrual(result)
            return result

    def apply_accrual(self, result: AccrualResult) -> None:
        """Merge a reconciliation result into the ledger.

        Transactions are prepended newest-first ahead of the existing history.
        """
        with self._lock:
            current = self.snapshot
            if result.is_empty and result.last_update_date == current.last_update_date:
                return
            self._commit(
                replace(
                    current,
                    total_time=result.final_balance,
                    transactions=tuple(reversed(result.transactions)) + current.transactions,
                    last_update_date=result.last_update_date,
                )
            )

    def deposit(self, amount: int, on: Optional[date] = None) -> Transaction:
        """Deposit minutes into the bank.

        Args:
            amount: Minutes to deposit (positive integer)
            on: Date to attribute the deposit to (defaults to today)

        Returns:
            The created transaction

        Raises:
            InvalidAmountError: If amount is not a positive integer or would
                take the balance past MAX_BALANCE
        """
        self._validate_amount(amount)
        with self._lock:
            self._catch_up()
            if amount > MAX_BALANCE - self.snapshot.total_time:
                raise InvalidAmountError(balance_limit_exceeded())
            return self._append(TransactionKind.DEPOSIT, amount, on)

    def withdraw(self, amount: int, on: Optional[date] = None) -> Transaction:
        """Withdraw minutes from the bank.

        Interest owed for days that passed since the last update is booked
        before the balance is checked, so a rejected withdrawal leaves the
        ledger in that caught-up state.

        Args:
            amount: Minutes to withdraw (positive integer)
            on: Date to attribute the withdrawal to (defaults to today)

        Returns:
            The created transaction

        Raises:
            InvalidAmountError: If amount is not a positive integer
            InsufficientBalanceError: If amount exceeds the current balance
        """
        self._validate_amount(amount)
        with self._lock:
            self._catch_up()
            if amount > self.snapshot.total_time:
                raise InsufficientBalanceError(amount, self.snapshot.total_time)
            return self._append(TransactionKind.WITHDRAWAL, amount, on)

    def set_interest_rate(self, rate: RateLike) -> None:
        """Change the daily interest rate from now on.

        Interest already recorded is not recalculated.

        Raises:
            InvalidRateError: If rate is negative or not a number
        """
        new_rate = coerce_rate(rate)
        with self._lock:
            self._catch_up()
            self._commit(replace(self.snapshot, interest_rate=new_rate))
            logger.info("Interest rate set to %s%% per day", new_rate)

    def reset(self) -> None:
        """Clear balance and history and restore the default rate.

        This cannot be undone; callers are expected to confirm first.
        """
        with self._lock:
            self._commit(LedgerSnapshot.initial(self.clock(), self.default_rate))
            logger.info("Ledger reset")

    def replace_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """Replace the whole ledger with the given snapshot.

        Raises:
            ValidationError: If the snapshot violates a ledger invariant
        """
        problems = check_consistency(snapshot)
        if problems:
            raise ValidationError(f"Snapshot is not a valid ledger: {'; '.join(problems)}")
        with self._lock:
            self._commit(snapshot)

    def query(
        self,
        transaction_filter: Optional[TransactionFilter] = None,
        today: Optional[date] = None,
    ) -> TransactionQuery:
        """Select transactions matching a filter.

        Args:
            transaction_filter: Kind and date range selection (all if None)
            today: Reference date for trailing ranges (defaults to the clock)

        Returns:
            Restartable iterable of transactions, newest first
        """
        return TransactionQuery(
            self.snapshot.transactions,
            transaction_filter or TransactionFilter(),
            today if today is not None else self.clock(),
        )

    def daily_aggregate(
        self,
        transaction_filter: Optional[TransactionFilter] = None,
        today: Optional[date] = None,
    ) -> dict[date, DailyTotals]:
        """Sum transaction amounts per kind for each date.

        Returns:
            Mapping of date to totals, most recent date first
        """
        totals: dict[date, DailyTotals] = {}
        for txn in self.query(transaction_filter, today):
            totals[txn.date] = totals.get(txn.date, DailyTotals()).add(txn)
        return dict(sorted(totals.items(), key=lambda item: item[0], reverse=True))

    def project(self, days: int) -> int:
        """Balance after ``days`` more days of interest with no other activity."""
        snapshot = self.snapshot
        return projected_balance(snapshot.total_time, snapshot.interest_rate, days)

    # Internals
    @staticmethod
    def _validate_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError(invalid_amount(amount))

    def _catch_up(self) -> None:
        """Reconcile first if the date has moved on since the last update."""
        if self.clock() > self.snapshot.last_update_date:
            self.reconcile()

    def _append(self, kind: TransactionKind, amount: int, on: Optional[date]) -> Transaction:
        current = self.snapshot
        delta = amount if kind.is_credit else -amount
        txn = Transaction(
            id=current.next_transaction_id,
            kind=kind,
            amount=amount,
            date=on if on is not None else self.clock(),
            balance_after=current.total_time + delta,
        )
        self._commit(
            replace(
                current,
                total_time=txn.balance_after,
                transactions=(txn,) + current.transactions,
            )
        )
        return txn

    def _commit(self, snapshot: LedgerSnapshot) -> None:
        """Persist the snapshot, then make it current."""
        self.db.save_snapshot(snapshot)
        self._snapshot = snapshot
        logger.debug(
            "Saved ledger: balance=%d transactions=%d",
            snapshot.total_time,
            len(snapshot.transactions),
        )
