# Overview: Service-layer operations for sales; encapsulates business logic and database work.

"""
Sale Workflow

Each call is one all-or-nothing attempt: validate, compute, then write the
ledger entry and the stock change in a single DB transaction.

Stock is never read-then-written. The decrement is a conditional UPDATE
(`stock = stock - q WHERE id = ? AND stock >= q`); zero affected rows means
another sale took the stock first, and the whole unit rolls back. Two
concurrent sales of the last unit therefore cannot both succeed.
"""
from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..models import Product, Service, CREDIT, DEBIT
from ..models.details import ProductSale, ServiceSale, StockAddition
from ..validation import (
    InsufficientStockError,
    MissingFieldsError,
    ProductNotFoundError,
    ServiceNotFoundError,
    coerce_amount,
    coerce_int,
    coerce_text,
    is_blank,
)
from .concurrency import lock_for_update, run_with_retry
from .ledger_service import append_transaction


def _load_product(product_id: int, *, lock: bool = False) -> Product:
    query = db.session.query(Product).filter_by(id=product_id)
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if product is None:
        raise ProductNotFoundError()
    return product


def sell_product(
    *,
    product_id: Any,
    quantity: Any,
    selling_price: Any,
    customer_name: str | None = None,
) -> dict:
    """
    Sell `quantity` units of a product at `selling_price` each.

    Raises:
        MissingFieldsError: product_id, quantity or selling_price absent, or quantity <= 0
        ProductNotFoundError: unknown product
        InsufficientStockError: stock < quantity (checked again atomically at write time)
    """
    if is_blank(product_id) or is_blank(quantity) or is_blank(selling_price):
        raise MissingFieldsError()

    product_id = coerce_int(product_id, "product_id")
    quantity = coerce_int(quantity, "quantity")
    selling_price = coerce_amount(selling_price, "selling_price")
    if quantity <= 0:
        raise MissingFieldsError("quantity must be greater than 0")

    def _op():
        product = _load_product(product_id, lock=True)
        if product.stock < quantity:
            raise InsufficientStockError()

        total_amount = selling_price * quantity
        total_cost = product.cost_price * quantity

        result = db.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InsufficientStockError()

        tx = append_transaction(
            entry_type="product_sale",
            t_type=CREDIT,
            details=ProductSale(
                product_id=product_id,
                name=product.name,
                quantity=quantity,
                selling_price=selling_price,
                customer_name=customer_name,
            ),
            amount=total_amount,
            cost=total_cost,
            notes=customer_name or "",
            commit=False,
        )
        db.session.commit()
        return {"transaction_id": tx.id, "amount": total_amount, "cost": total_cost}

    sale = run_with_retry(_op)
    current_app.logger.info(
        "Sold %s x product %s for %.2f (ledger entry %s)",
        quantity, product_id, sale["amount"], sale["transaction_id"],
    )
    return sale


def serve_service(
    *,
    service_id: Any,
    selling_price: Any = None,
    customer_name: str | None = None,
) -> dict:
    """
    Record a rendered service as a service_sale/CR entry.

    selling_price defaults to the service's list price when omitted.
    """
    if is_blank(service_id):
        raise MissingFieldsError("service_id is required")
    service_id = coerce_int(service_id, "service_id")

    def _op():
        service = db.session.query(Service).filter_by(id=service_id).first()
        if service is None:
            raise ServiceNotFoundError()

        amount = coerce_amount(selling_price, "selling_price", default=service.price)
        customer = customer_name or "Customer"

        tx = append_transaction(
            entry_type="service_sale",
            t_type=CREDIT,
            details=ServiceSale(
                service_id=service.id,
                service_name=service.name,
                customer_name=customer_name,
            ),
            amount=amount,
            cost=service.cost,
            notes=f"Served service: {service.name} for {customer}",
            commit=False,
        )
        db.session.commit()
        return {"transaction_id": tx.id, "amount": amount}

    served = run_with_retry(_op)
    current_app.logger.info(
        "Served service %s for %.2f (ledger entry %s)", service_id, served["amount"], served["transaction_id"]
    )
    return served


def add_stock(*, product_id: Any, quantity: Any, notes: str | None = None) -> dict:
    """
    Restock a product and book the purchase as an expense/DR entry.

    amount is 0 (no revenue); cost = cost_price x quantity.
    """
    if is_blank(product_id) or is_blank(quantity):
        raise MissingFieldsError("Missing product_id or quantity")

    product_id = coerce_int(product_id, "product_id")
    quantity = coerce_int(quantity, "quantity")
    if quantity <= 0:
        raise MissingFieldsError("quantity must be greater than 0")

    def _op():
        product = _load_product(product_id, lock=True)

        db.session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )

        tx = append_transaction(
            entry_type="expense",
            t_type=DEBIT,
            details=StockAddition(product_id=product_id, quantity=quantity, product_name=product.name),
            amount=0,
            cost=product.cost_price * quantity,
            notes=coerce_text(notes),
            commit=False,
        )
        db.session.commit()
        return {"transaction_id": tx.id, "quantity": quantity}

    restocked = run_with_retry(_op)
    current_app.logger.info("Added %s units to product %s", quantity, product_id)
    return restocked
