"""Tests for domain entities."""

import pytest
from dataclasses import replace
from datetime import date
from fractions import Fraction

from timebank.domain.entities import (
    MAX_BALANCE,
    AccrualResult,
    DailyTotals,
    DateRange,
    LedgerSnapshot,
    Transaction,
    TransactionFilter,
    TransactionKind,
    check_consistency,
)

TODAY = date(2024, 3, 10)


def _deposit(id, amount, balance_after, on=TODAY):
    return Transaction(id, TransactionKind.DEPOSIT, amount, on, balance_after)


class TestTransaction:
    """Tests for Transaction entity."""

    def test_transaction_immutability(self):
        """Test that Transaction entities are immutable."""
        txn = _deposit(1, 10, 10)
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            txn.amount = 20

    def test_balance_before(self):
        assert _deposit(1, 10, 25).balance_before == 15
        withdrawal = Transaction(2, TransactionKind.WITHDRAWAL, 10, TODAY, 15)
        assert withdrawal.balance_before == 25
        interest = Transaction(3, TransactionKind.INTEREST_ACCRUAL, 2, TODAY, 17)
        assert interest.balance_before == 15

    def test_kind_labels(self):
        assert TransactionKind.DEPOSIT.label == "Deposit"
        assert TransactionKind.WITHDRAWAL.label == "Withdrawal"
        assert TransactionKind.INTEREST_ACCRUAL.label == "Interest"
        assert TransactionKind.INTEREST_ACCRUAL.value == "interest"


class TestLedgerSnapshot:
    """Tests for LedgerSnapshot entity."""

    def test_initial(self):
        snapshot = LedgerSnapshot.initial(TODAY)
        assert snapshot.total_time == 0
        assert snapshot.transactions == ()
        assert snapshot.interest_rate == Fraction(10)
        assert snapshot.last_update_date == TODAY

    def test_next_transaction_id(self):
        assert LedgerSnapshot.initial(TODAY).next_transaction_id == 1
        snapshot = LedgerSnapshot(
            total_time=30,
            transactions=(_deposit(9, 20, 30), _deposit(4, 10, 10)),
            interest_rate=Fraction(10),
            last_update_date=TODAY,
        )
        assert snapshot.next_transaction_id == 10

    def test_snapshot_equality(self):
        assert LedgerSnapshot.initial(TODAY) == LedgerSnapshot.initial(TODAY)
        assert LedgerSnapshot.initial(TODAY) != LedgerSnapshot.initial(date(2024, 3, 11))


class TestAccrualResult:
    """Tests for AccrualResult entity."""

    def test_totals(self):
        txns = (
            Transaction(2, TransactionKind.INTEREST_ACCRUAL, 10, date(2024, 3, 9), 110),
            Transaction(3, TransactionKind.INTEREST_ACCRUAL, 11, TODAY, 121),
        )
        result = AccrualResult(txns, 121, TODAY, days_passed=2)
        assert not result.is_empty
        assert result.total_interest == 21

    def test_empty(self):
        result = AccrualResult((), 0, TODAY)
        assert result.is_empty
        assert result.total_interest == 0


class TestDateRange:
    """Tests for DateRange windows."""

    def test_all_time(self):
        window = DateRange.all_time()
        assert window.is_all_time
        assert window.contains(date(1999, 1, 1), TODAY)
        assert window.contains(date(2099, 1, 1), TODAY)

    def test_trailing_includes_boundary(self):
        window = DateRange.trailing(7)
        assert window.bounds(TODAY) == (date(2024, 3, 3), None)
        assert window.contains(date(2024, 3, 3), TODAY)
        assert not window.contains(date(2024, 3, 2), TODAY)

    def test_trailing_is_relative_to_today(self):
        window = DateRange.trailing(1)
        assert window.contains(date(2024, 3, 9), TODAY)
        assert not window.contains(date(2024, 3, 9), date(2024, 3, 20))

    def test_negative_trailing_rejected(self):
        with pytest.raises(ValueError):
            DateRange.trailing(-1)

    def test_between_is_inclusive(self):
        window = DateRange.between(date(2024, 3, 1), date(2024, 3, 5))
        assert window.contains(date(2024, 3, 1), TODAY)
        assert window.contains(date(2024, 3, 5), TODAY)
        assert not window.contains(date(2024, 3, 6), TODAY)

    def test_reversed_between_matches_nothing(self):
        window = DateRange.between(date(2024, 3, 5), date(2024, 3, 1))
        assert not window.contains(date(2024, 3, 3), TODAY)


class TestTransactionFilter:
    """Tests for TransactionFilter matching."""

    def test_default_matches_everything(self):
        assert TransactionFilter().matches(_deposit(1, 10, 10), TODAY)

    def test_kind_and_range(self):
        selection = TransactionFilter(
            kind=TransactionKind.DEPOSIT,
            date_range=DateRange.between(date(2024, 3, 1), date(2024, 3, 31)),
        )
        assert selection.matches(_deposit(1, 10, 10), TODAY)
        assert not selection.matches(_deposit(1, 10, 10, on=date(2024, 2, 29)), TODAY)
        assert not selection.matches(
            Transaction(2, TransactionKind.WITHDRAWAL, 5, TODAY, 5), TODAY
        )


class TestDailyTotals:
    """Tests for DailyTotals accumulation."""

    def test_add_by_kind(self):
        totals = DailyTotals()
        totals = totals.add(_deposit(1, 30, 30))
        totals = totals.add(Transaction(2, TransactionKind.WITHDRAWAL, 10, TODAY, 20))
        totals = totals.add(Transaction(3, TransactionKind.INTEREST_ACCRUAL, 2, TODAY, 22))

        assert totals == DailyTotals(deposit_total=30, withdraw_total=10, interest_total=2)
        assert totals.net == 22


class TestCheckConsistency:
    """Tests for ledger invariant checking."""

    def _valid(self):
        return LedgerSnapshot(
            total_time=20,
            transactions=(
                Transaction(2, TransactionKind.WITHDRAWAL, 10, TODAY, 20),
                _deposit(1, 30, 30),
            ),
            interest_rate=Fraction(10),
            last_update_date=TODAY,
        )

    def test_valid_snapshot(self):
        assert check_consistency(self._valid()) == []
        assert check_consistency(LedgerSnapshot.initial(TODAY)) == []

    def test_total_mismatch(self):
        problems = check_consistency(replace(self._valid(), total_time=25))
        assert any("does not match latest balance" in p for p in problems)

    def test_duplicate_ids(self):
        snapshot = replace(
            self._valid(),
            transactions=(
                Transaction(1, TransactionKind.WITHDRAWAL, 10, TODAY, 20),
                _deposit(1, 30, 30),
            ),
        )
        assert any("not unique" in p for p in check_consistency(snapshot))

    def test_non_positive_amount(self):
        snapshot = replace(
            self._valid(),
            total_time=0,
            transactions=(_deposit(1, 0, 0),),
        )
        assert any("non-positive amount" in p for p in check_consistency(snapshot))

    def test_negative_balance(self):
        snapshot = replace(
            self._valid(),
            total_time=-5,
            transactions=(Transaction(1, TransactionKind.WITHDRAWAL, 5, TODAY, -5),),
        )
        problems = check_consistency(snapshot)
        assert any("negative balance" in p for p in problems)
        assert any("total time -5 is negative" in p for p in problems)

    def test_broken_chain(self):
        snapshot = replace(
            self._valid(),
            total_time=25,
            transactions=(
                Transaction(2, TransactionKind.WITHDRAWAL, 10, TODAY, 25),
                _deposit(1, 30, 30),
            ),
        )
        assert any("starts from 35, expected 30" in p for p in check_consistency(snapshot))

    def test_total_above_maximum(self):
        snapshot = replace(self._valid(), total_time=MAX_BALANCE + 1)
        assert check_consistency(snapshot) == ["total time exceeds the maximum balance"]

    def test_negative_rate(self):
        snapshot = replace(self._valid(), interest_rate=Fraction(-1))
        assert any("interest rate" in p for p in check_consistency(snapshot))
