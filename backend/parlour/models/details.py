"""
Typed views over the JSON `details` column of a ledger entry.

The payload shape depends on the entry's `type`:

    expense       -> StockAddition   {product_id, quantity, product_name?}
    product_sale  -> ProductSale     {product_id, name, quantity, selling_price, customer_name}
    service_sale  -> ServiceSale     {service_id, service_name, customer_name}

Any other type, or a payload that does not carry the keys its tag requires,
is kept as an OpenDetails map. Stored text that is null or not valid JSON
decodes to an empty OpenDetails.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class StockAddition:
    product_id: int
    quantity: int
    product_name: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.product_name is None:
            data.pop("product_name")
        return data


@dataclass(frozen=True)
class ProductSale:
    product_id: int
    name: str
    quantity: int
    selling_price: float
    customer_name: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ServiceSale:
    service_id: int
    service_name: str
    customer_name: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class OpenDetails:
    values: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return dict(self.values)


Details = Union[StockAddition, ProductSale, ServiceSale, OpenDetails]

_SHAPES: dict[str, tuple[type, frozenset[str]]] = {
    "expense": (StockAddition, frozenset({"product_id", "quantity"})),
    "product_sale": (ProductSale, frozenset({"product_id", "name", "quantity", "selling_price"})),
    "service_sale": (ServiceSale, frozenset({"service_id", "service_name"})),
}


def from_payload(entry_type: str | None, payload: Any) -> Details:
    """Pick the tagged shape for `entry_type`, falling back to an open map."""
    if not isinstance(payload, dict):
        return OpenDetails()

    shape = _SHAPES.get(entry_type or "")
    if shape is None:
        return OpenDetails(dict(payload))

    cls, required = shape
    if not required.issubset(payload):
        return OpenDetails(dict(payload))

    known = {k: payload[k] for k in cls.__dataclass_fields__ if k in payload}
    # Extra keys would be lost in the typed view; keep them verbatim instead
    if len(known) != len(payload):
        return OpenDetails(dict(payload))
    return cls(**known)


def decode(entry_type: str | None, raw: str | None) -> Details:
    if not raw:
        return OpenDetails()
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return OpenDetails()
    return from_payload(entry_type, payload)


def encode(details: Details | dict | None) -> str:
    if details is None:
        return "{}"
    if isinstance(details, dict):
        return json.dumps(details)
    return json.dumps(details.to_dict())
