"""Mapper functions to convert between domain snapshots and stored payloads.

The ledger is stored as a JSON document. This layer isolates the document
format from the domain model and knows how to read the older layout written
before ``schemaVersion`` existed (camel-case ``lastUpdate``, ``type`` labels
instead of ``kind``, numeric rates, timestamps instead of dates).
"""

import json
import logging
from dataclasses import replace
from datetime import date
from fractions import Fraction
from typing import Any

from dateutil import parser as date_parser

from timebank.domain.accrual import coerce_rate
from timebank.domain.entities import (
    DEFAULT_INTEREST_RATE,
    LedgerSnapshot,
    Transaction,
    TransactionKind,
    check_consistency,
)
from timebank.domain.errors import CorruptSnapshotError, InvalidRateError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

LEGACY_KIND_LABELS = {
    "저축": TransactionKind.DEPOSIT,
    "인출": TransactionKind.WITHDRAWAL,
    "복리적용": TransactionKind.INTEREST_ACCRUAL,
}


def rate_to_payload(rate: Fraction) -> str:
    """Render a rate exactly: as a decimal when it terminates, else as p/q."""
    denominator = rate.denominator
    for prime in (2, 5):
        while denominator % prime == 0:
            denominator //= prime
    if denominator != 1:
        return f"{rate.numerator}/{rate.denominator}"
    if rate.denominator == 1:
        return str(rate.numerator)

    places = 0
    scaled = rate
    while scaled.denominator != 1:
        scaled *= 10
        places += 1
    digits = str(scaled.numerator).rjust(places + 1, "0")
    return f"{digits[:-places]}.{digits[-places:]}"


def transaction_to_payload(txn: Transaction) -> dict[str, Any]:
    """Convert a domain Transaction to its stored form."""
    return {
        "id": txn.id,
        "kind": txn.kind.value,
        "amount": txn.amount,
        "date": txn.date.isoformat(),
        "balanceAfter": txn.balance_after,
    }


def snapshot_to_payload(snapshot: LedgerSnapshot) -> str:
    """Serialize a complete snapshot to the stored JSON document."""
    document = {
        "schemaVersion": SCHEMA_VERSION,
        "totalTime": snapshot.total_time,
        "transactions": [transaction_to_payload(txn) for txn in snapshot.transactions],
        "interestRate": rate_to_payload(snapshot.interest_rate),
        "lastUpdateDate": snapshot.last_update_date.isoformat(),
    }
    return json.dumps(document, ensure_ascii=False)


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass but never a valid count of minutes
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptSnapshotError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise CorruptSnapshotError(f"{field_name} must be an integer, got {value!r}")
        value = int(value)
    return value


def _parse_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str):
        raise CorruptSnapshotError(f"{field_name} must be a date string, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    # Older payloads stored full ISO timestamps
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        raise CorruptSnapshotError(f"{field_name} is not a valid date: {value!r}")


def _parse_kind(record: dict[str, Any]) -> TransactionKind:
    raw = record.get("kind", record.get("type"))
    if isinstance(raw, str) and raw in LEGACY_KIND_LABELS:
        return LEGACY_KIND_LABELS[raw]
    try:
        return TransactionKind(raw)
    except ValueError:
        raise CorruptSnapshotError(f"unknown transaction kind {raw!r}")


def transaction_from_payload(record: Any) -> Transaction:
    """Convert a stored transaction record to a domain Transaction."""
    if not isinstance(record, dict):
        raise CorruptSnapshotError(f"transaction record must be an object, got {record!r}")
    for required in ("id", "amount", "date", "balanceAfter"):
        if required not in record:
            raise CorruptSnapshotError(f"transaction record is missing '{required}'")
    return Transaction(
        id=_require_int(record["id"], "transaction id"),
        kind=_parse_kind(record),
        amount=_require_int(record["amount"], "transaction amount"),
        date=_parse_date(record["date"], "transaction date"),
        balance_after=_require_int(record["balanceAfter"], "transaction balanceAfter"),
    )


def _renumber_ids(transactions: tuple[Transaction, ...]) -> tuple[Transaction, ...]:
    """Make ids unique and increasing from oldest to newest.

    Older exports derived ids from the clock, so two entries written in the
    same millisecond can share one. Each id is kept unless it does not exceed
    the id of the entry before it.
    """
    renumbered = []
    previous_id = None
    for txn in reversed(transactions):
        new_id = txn.id if previous_id is None else max(txn.id, previous_id + 1)
        renumbered.append(replace(txn, id=new_id))
        previous_id = new_id
    return tuple(reversed(renumbered))


def snapshot_from_payload(payload: str, today: date) -> LedgerSnapshot:
    """Parse a stored JSON document into a snapshot.

    Missing fields fall back to defaults: no transactions, a total equal to
    the newest balance (or zero), the default rate, and ``today`` as the last
    update date.

    Args:
        payload: Stored JSON text
        today: Date used when the last update date is missing

    Returns:
        The parsed snapshot

    Raises:
        CorruptSnapshotError: If the payload is malformed or the parsed
            ledger violates its balance invariants
    """
    try:
        document = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise CorruptSnapshotError(f"invalid JSON ({e})")
    if not isinstance(document, dict):
        raise CorruptSnapshotError("top-level value must be an object")

    version = document.get("schemaVersion", 0)
    if version not in (0, SCHEMA_VERSION):
        raise CorruptSnapshotError(f"unsupported schema version {version!r}")

    records = document.get("transactions")
    if records is None:
        records = []
    elif not isinstance(records, list):
        raise CorruptSnapshotError("transactions must be a list")
    transactions = tuple(transaction_from_payload(record) for record in records)
    if version == 0 and len({txn.id for txn in transactions}) != len(transactions):
        logger.warning("Renumbering duplicate transaction ids in legacy ledger data")
        transactions = _renumber_ids(transactions)

    if document.get("totalTime") is not None:
        total_time = _require_int(document["totalTime"], "totalTime")
    else:
        total_time = transactions[0].balance_after if transactions else 0

    raw_rate = document.get("interestRate")
    if raw_rate is None:
        interest_rate = DEFAULT_INTEREST_RATE
    else:
        try:
            interest_rate = coerce_rate(raw_rate)
        except InvalidRateError as e:
            raise CorruptSnapshotError(str(e))

    raw_date = document.get("lastUpdateDate", document.get("lastUpdate"))
    last_update_date = today if raw_date is None else _parse_date(raw_date, "lastUpdateDate")

    snapshot = LedgerSnapshot(
        total_time=total_time,
        transactions=transactions,
        interest_rate=interest_rate,
        last_update_date=last_update_date,
    )
    problems = check_consistency(snapshot)
    if problems:
        raise CorruptSnapshotError("; ".join(problems))
    return snapshot
