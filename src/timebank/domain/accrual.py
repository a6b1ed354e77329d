"""Daily compound interest accrual.

Everything here is pure: functions read a snapshot or plain numbers and
return new values without touching storage. Interest is computed day by day
with ``floor(balance * rate / 100)`` in exact rational arithmetic, so the
result of reconciling N days equals the result of N daily check-ins and
agrees with ``projected_balance`` for the same inputs.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Optional, Union

from timebank.domain.entities import (
    MAX_BALANCE,
    MAX_PROJECTION_DAYS,
    AccrualResult,
    LedgerSnapshot,
    Transaction,
    TransactionKind,
)
from timebank.domain.errors import InvalidRateError, ValidationError, invalid_rate

logger = logging.getLogger(__name__)

RateLike = Union[int, Fraction, Decimal, float, str]


def coerce_rate(value: RateLike) -> Fraction:
    """Convert a rate value into an exact non-negative Fraction.

    Floats go through their shortest decimal string so that ``2.5`` and
    ``0.1`` become ``5/2`` and ``1/10`` rather than their binary expansions.

    Raises:
        InvalidRateError: If the value is negative, boolean, not finite or
            not a number
    """
    if isinstance(value, bool):
        raise InvalidRateError(invalid_rate(value))
    try:
        if isinstance(value, float):
            rate = Fraction(Decimal(repr(value)))
        elif isinstance(value, str):
            rate = Fraction(value.strip())
        else:
            rate = Fraction(value)
    except (ValueError, TypeError, ZeroDivisionError, InvalidOperation, OverflowError):
        raise InvalidRateError(invalid_rate(value))
    if rate < 0:
        raise InvalidRateError(invalid_rate(value))
    return rate


def daily_interest(balance: int, rate: Fraction) -> int:
    """Interest earned in one day, truncated toward zero."""
    if balance <= 0:
        return 0
    return (balance * rate.numerator) // (100 * rate.denominator)


def _credited_interest(balance: int, rate: Fraction) -> int:
    # Interest stops once the balance reaches the ceiling
    return min(daily_interest(balance, rate), MAX_BALANCE - balance)


def projected_balance(base_balance: int, rate: RateLike, days: int) -> int:
    """Balance after compounding ``days`` days with no other activity.

    Raises:
        ValidationError: If days is negative or above MAX_PROJECTION_DAYS,
            or base_balance is negative
        InvalidRateError: If rate is invalid
    """
    if days < 0:
        raise ValidationError(f"Days must be non-negative, got {days}")
    if days > MAX_PROJECTION_DAYS:
        raise ValidationError(f"Days must be at most {MAX_PROJECTION_DAYS}, got {days}")
    if base_balance < 0:
        raise ValidationError(f"Balance must be non-negative, got {base_balance}")
    rate = coerce_rate(rate)

    balance = base_balance
    for _ in range(days):
        interest = _credited_interest(balance, rate)
        if interest <= 0:
            # Nothing changes from here on
            break
        balance += interest
    return balance


def reconcile(
    snapshot: LedgerSnapshot, today: date, max_days: Optional[int] = None
) -> AccrualResult:
    """Compute the interest owed for every day since the last update.

    Args:
        snapshot: Ledger state as last persisted
        today: Current calendar date
        max_days: Optional cap on the number of days compounded; when the gap
            is larger only the most recent ``max_days`` days are compounded

    Returns:
        AccrualResult with chronological transactions, the final balance and
        the date the ledger is now reconciled through
    """
    last_update = snapshot.last_update_date
    days_passed = (today - last_update).days
    reconciled_through = max(last_update, today)

    if days_passed <= 0 or snapshot.total_time <= 0:
        return AccrualResult(
            transactions=(),
            final_balance=snapshot.total_time,
            last_update_date=reconciled_through,
            days_passed=max(days_passed, 0),
        )

    first_day = 0
    if max_days is not None and days_passed > max_days:
        logger.warning(
            "Accrual gap of %d days exceeds limit of %d; compounding only the last %d days",
            days_passed,
            max_days,
            max_days,
        )
        first_day = days_passed - max_days

    rate = snapshot.interest_rate
    balance = snapshot.total_time
    next_id = snapshot.next_transaction_id
    transactions = []

    for i in range(first_day, days_passed):
        interest = _credited_interest(balance, rate)
        if interest <= 0:
            # Balance and rate are unchanged, so every remaining day is zero too
            break
        balance += interest
        transactions.append(
            Transaction(
                id=next_id,
                kind=TransactionKind.INTEREST_ACCRUAL,
                amount=interest,
                date=last_update + timedelta(days=i + 1),
                balance_after=balance,
            )
        )
        next_id += 1

    if balance == MAX_BALANCE and transactions:
        logger.warning("Balance reached the maximum; no further interest will accrue")
    if transactions:
        logger.info(
            "Accrued %d minutes of interest over %d days (%d entries)",
            balance - snapshot.total_time,
            days_passed,
            len(transactions),
        )

    return AccrualResult(
        transactions=tuple(transactions),
        final_balance=balance,
        last_update_date=today,
        days_passed=days_passed,
    )
