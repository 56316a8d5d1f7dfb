from __future__ import annotations

from ..extensions import db

# Money is tracked as floating point; Numeric keeps two decimals in storage
Money = db.Numeric(12, 2, asdecimal=False)


class Product(db.Model):
    """
    Stocked retail item.

    stock is a plain counter. Storage does not forbid negatives; the sale
    workflow only ever decrements it with a conditional update.
    """
    __tablename__ = "products"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    sku = db.Column(db.String(64), nullable=False, default="")
    stock = db.Column(db.Integer, nullable=False, default=0)
    cost_price = db.Column(Money, nullable=False, default=0)
    sell_price = db.Column(Money, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "stock": self.stock,
            "cost_price": self.cost_price,
            "sell_price": self.sell_price,
        }


class Service(db.Model):
    """Rendered service (haircut, facial...). Not depletable."""
    __tablename__ = "services"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    price = db.Column(Money, nullable=False, default=0)
    cost = db.Column(Money, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Service id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "cost": self.cost,
        }
