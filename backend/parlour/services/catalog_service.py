# backend/parlour/services/catalog_service.py
"""
Catalog Service: products and services.

Product creation with opening stock posts the purchase of that stock to the
ledger in the same database transaction, so a product never appears with
stock that has no matching expense entry.

Update semantics differ on purpose:
- update_product is a full overwrite and reports success for unknown ids.
- update_service merges into the stored row and raises ServiceNotFoundError.
"""
from __future__ import annotations

from typing import Any

from ..extensions import db
from ..models import Product, Service, DEBIT
from ..models.details import StockAddition
from ..validation import (
    MissingFieldsError,
    ServiceNotFoundError,
    coerce_amount,
    coerce_int,
    coerce_text,
    is_blank,
)
from .ledger_service import append_transaction


def _product_fields(payload: dict[str, Any]) -> dict[str, Any]:
    name = coerce_text(payload.get("name"))
    if not name:
        raise MissingFieldsError("name is required")
    return {
        "name": name,
        "sku": coerce_text(payload.get("sku")),
        "stock": coerce_int(payload.get("stock"), "stock"),
        "cost_price": coerce_amount(payload.get("cost_price"), "cost_price"),
        "sell_price": coerce_amount(payload.get("sell_price"), "sell_price"),
    }


def list_products() -> list[dict]:
    products = db.session.query(Product).order_by(Product.id.asc()).all()
    return [p.to_dict() for p in products]


def create_product(payload: dict[str, Any]) -> int:
    """
    Create a product from a request payload and return its id.

    Absent numeric fields default to 0 and sku to "". Opening stock > 0
    appends an expense/DR entry costing cost_price x stock.
    """
    fields = _product_fields(payload)

    p = Product(**fields)
    db.session.add(p)
    db.session.flush()  # ensure p.id exists before ledger append

    if p.stock > 0:
        append_transaction(
            entry_type="expense",
            t_type=DEBIT,
            details=StockAddition(product_id=p.id, quantity=p.stock),
            amount=0,
            cost=p.cost_price * p.stock,
            notes=f"Added {p.stock} units of {p.name}",
            commit=False,
        )

    db.session.commit()
    return p.id


def update_product(product_id: int, payload: dict[str, Any]) -> bool:
    """
    Overwrite every editable field of a product.

    Returns whether a row matched; callers report success either way.
    """
    fields = _product_fields(payload)

    matched = (
        db.session.query(Product)
        .filter(Product.id == product_id)
        .update(fields, synchronize_session=False)
    )
    db.session.commit()
    return bool(matched)


def delete_product(product_id: int) -> None:
    """Unconditional delete; past ledger entries keep their copy of the product data."""
    db.session.query(Product).filter(Product.id == product_id).delete(synchronize_session=False)
    db.session.commit()


def list_services() -> list[dict]:
    services = db.session.query(Service).order_by(Service.id.asc()).all()
    return [s.to_dict() for s in services]


def create_service(payload: dict[str, Any]) -> int:
    name = coerce_text(payload.get("name"))
    if not name:
        raise MissingFieldsError("name is required")

    s = Service(
        name=name,
        description=coerce_text(payload.get("description")),
        price=coerce_amount(payload.get("price"), "price"),
        cost=coerce_amount(payload.get("cost"), "cost"),
    )
    db.session.add(s)
    db.session.commit()
    return s.id


def update_service(service_id: int, payload: dict[str, Any]) -> dict:
    """
    Merge a payload into an existing service.

    Blank name/description keep the stored text; absent price/cost keep the
    stored amount (an explicit 0 is applied).
    """
    s = db.session.query(Service).filter_by(id=service_id).first()
    if s is None:
        raise ServiceNotFoundError()

    if not is_blank(payload.get("name")):
        s.name = coerce_text(payload.get("name"))
    if not is_blank(payload.get("description")):
        s.description = coerce_text(payload.get("description"))
    s.price = coerce_amount(payload.get("price"), "price", default=s.price)
    s.cost = coerce_amount(payload.get("cost"), "cost", default=s.cost)

    db.session.commit()
    return s.to_dict()
