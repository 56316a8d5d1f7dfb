# Overview: Service-layer operations for the ledger; encapsulates business logic and database work.

"""
Ledger Invariants (authoritative)

- Append-only: this module inserts and reads, nothing else.
- Entries written by a workflow share that workflow's DB transaction
  (append with commit=False, the caller commits).
- Date ranges are whole days, inclusive at both ends; missing bounds
  default to 1970-01-01 .. 2099-12-31.
- Profit & loss sums amount and cost over every entry in range, whatever
  its t_type.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Transaction, T_TYPES, DEBIT, CREDIT
from ..models import details as ledger_details
from ..time_utils import EARLIEST_DAY, LATEST_DAY, day_window, parse_day
from ..validation import InvalidTTypeError, MissingFieldsError, ValidationError, coerce_amount, coerce_text


def append_transaction(
    *,
    entry_type: str,
    t_type: Optional[str] = DEBIT,
    details: ledger_details.Details | dict | None = None,
    amount: float = 0,
    cost: float = 0,
    notes: str = "",
    commit: bool = True,
) -> Transaction:
    """
    Append one ledger entry. The date is stamped by the server.

    Raises InvalidTTypeError if t_type is not DR or CR (None means DR).
    """
    t_type = t_type or DEBIT
    if t_type not in T_TYPES:
        raise InvalidTTypeError(f"t_type must be one of {', '.join(sorted(T_TYPES))}")

    tx = Transaction(
        type=entry_type,
        t_type=t_type,
        details=ledger_details.encode(details),
        amount=amount,
        cost=cost,
        notes=notes,
    )
    db.session.add(tx)
    if commit:
        db.session.commit()
    else:
        db.session.flush()  # ensures tx.id is assigned without committing
    return tx


def post_transaction(payload: dict[str, Any]) -> int:
    """
    Free-form ledger post from a client (manual expense, other income...).

    `type` is required; t_type defaults to DR; amount/cost default to 0.
    """
    entry_type = coerce_text(payload.get("type"))
    if not entry_type:
        raise MissingFieldsError("type is required")

    details = payload.get("details")
    if details is not None and not isinstance(details, dict):
        raise ValidationError("details must be a JSON object")

    t_type = payload.get("t_type")
    if isinstance(t_type, str):
        t_type = t_type.strip().upper()

    tx = append_transaction(
        entry_type=entry_type,
        t_type=t_type,
        details=details,
        amount=coerce_amount(payload.get("amount"), "amount"),
        cost=coerce_amount(payload.get("cost"), "cost"),
        notes=coerce_text(payload.get("notes")),
    )
    return tx.id


def _window(date_from: str | None, date_to: str | None) -> tuple[datetime, datetime]:
    try:
        start = parse_day(date_from, EARLIEST_DAY)
        end = parse_day(date_to, LATEST_DAY)
    except ValueError:
        raise ValidationError("from and to must be YYYY-MM-DD dates")
    offset = timedelta(minutes=current_app.config.get("REPORT_UTC_OFFSET_MINUTES", 0))
    return day_window(start, end, offset)


def _in_window(query, date_from: str | None, date_to: str | None):
    start, end = _window(date_from, date_to)
    return query.filter(Transaction.date >= start, Transaction.date < end)


def list_transactions() -> list[dict]:
    """All entries, newest first."""
    rows = (
        db.session.query(Transaction)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .all()
    )
    return [tx.to_dict() for tx in rows]


def transactions_in_range(date_from: str | None = None, date_to: str | None = None) -> list[dict]:
    """Entries dated within [from, to] (whole days), newest first."""
    rows = (
        _in_window(db.session.query(Transaction), date_from, date_to)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .all()
    )
    return [tx.to_dict() for tx in rows]


def profit_and_loss(date_from: str | None = None, date_to: str | None = None) -> dict:
    """
    revenue = SUM(amount), cost = SUM(cost), profit = revenue - cost.

    DR and CR entries are summed alike: a DR row with a nonzero amount
    counts towards revenue.
    """
    revenue, cost, count = _in_window(
        db.session.query(
            func.coalesce(func.sum(Transaction.amount), 0),
            func.coalesce(func.sum(Transaction.cost), 0),
            func.count(Transaction.id),
        ),
        date_from,
        date_to,
    ).one()

    revenue = float(revenue or 0)
    cost = float(cost or 0)
    return {
        "revenue": revenue,
        "cost": cost,
        "profit": revenue - cost,
        "count": int(count or 0),
    }


def balance_sheet(date_from: str | None = None, date_to: str | None = None) -> dict:
    """
    Debit/credit totals over the range.

    totalDr and totalCr sum `amount` per t_type; netBalance = totalCr - totalDr
    (positive means more came in than went out). Transactions are returned
    oldest first with their details decoded, `type` holding DR/CR
    and `category` the entry type.
    """
    rows = (
        _in_window(db.session.query(Transaction), date_from, date_to)
        .order_by(Transaction.date.asc(), Transaction.id.asc())
        .all()
    )

    total_dr = 0.0
    total_cr = 0.0
    for tx in rows:
        amount = float(tx.amount or 0)
        if tx.t_type == DEBIT:
            total_dr += amount
        elif tx.t_type == CREDIT:
            total_cr += amount

    return {
        "totalDr": total_dr,
        "totalCr": total_cr,
        "netBalance": total_cr - total_dr,
        "transactions": [tx.to_balance_row() for tx in rows],
    }
