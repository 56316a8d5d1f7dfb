"""
Ledger invariants (authoritative)

- Append-only: rows are inserted, never updated or deleted.
- date is system time, stamped on insert.
- t_type is DR (outflow/expense side) or CR (inflow/revenue side).
- details references products/services by value; no foreign keys.
"""
from __future__ import annotations

from sqlalchemy import event

from ..extensions import db
from ..time_utils import utcnow, to_utc_z
from . import details as ledger_details
from .catalog import Money

DEBIT = "DR"
CREDIT = "CR"
T_TYPES = frozenset({DEBIT, CREDIT})


class LedgerImmutableError(RuntimeError):
    """Raised when a flush would modify or remove a persisted ledger row."""


class Transaction(db.Model):
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_date", "date"),
        db.Index("ix_transactions_t_type_date", "t_type", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    type = db.Column(db.String(64), nullable=False)
    t_type = db.Column(db.String(2), nullable=False, default=DEBIT)

    # JSON text; see models/details.py for the per-type shapes
    details = db.Column(db.Text, nullable=False, default="{}")

    amount = db.Column(Money, nullable=False, default=0)
    cost = db.Column(Money, nullable=False, default=0)
    notes = db.Column(db.Text, nullable=False, default="")

    date = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Transaction id={self.id} type={self.type!r} t_type={self.t_type} amount={self.amount}>"

    @property
    def parsed_details(self) -> ledger_details.Details:
        return ledger_details.decode(self.type, self.details)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "t_type": self.t_type,
            "details": self.parsed_details.to_dict(),
            "amount": float(self.amount or 0),
            "cost": float(self.cost or 0),
            "notes": self.notes,
            "date": to_utc_z(self.date),
        }

    def to_balance_row(self) -> dict:
        """Balance-sheet row: `type` carries DR/CR, the entry category moves to `category`."""
        return {
            "id": self.id,
            "date": to_utc_z(self.date),
            "type": self.t_type,
            "category": self.type,
            "details": self.parsed_details.to_dict(),
            "amount": float(self.amount or 0),
            "cost": float(self.cost or 0),
            "notes": self.notes,
        }


@event.listens_for(Transaction, "before_update")
def _refuse_update(mapper, connection, target):
    raise LedgerImmutableError(f"Ledger entry {target.id} is append-only and cannot be updated")


@event.listens_for(Transaction, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise LedgerImmutableError(f"Ledger entry {target.id} is append-only and cannot be deleted")
