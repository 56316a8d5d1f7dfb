"""
Concurrency regression tests for the sale workflow.

Runs against a file-backed SQLite database so that each thread gets its own
connection, the way concurrent request handlers would.
"""

import threading

import pytest

from parlour import create_app
from parlour.extensions import db
from parlour.models import Product, Transaction
from parlour.services import sales_service
from parlour.validation import InsufficientStockError


@pytest.fixture
def file_app(tmp_path):
    db_path = tmp_path / "concurrency.db"
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
        "JWT_SECRET": "test-signing-key",
        "BCRYPT_ROUNDS": 4,
    })
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def _seed_product(app, stock: int) -> int:
    with app.app_context():
        product = Product(name="Last Bottle", stock=stock, cost_price=5, sell_price=20)
        db.session.add(product)
        db.session.commit()
        return product.id


def _sell_concurrently(app, product_id: int, workers: int) -> list:
    results = []
    lock = threading.Lock()
    start = threading.Barrier(workers)

    def worker():
        with app.app_context():
            try:
                start.wait()
                sales_service.sell_product(product_id=product_id, quantity=1, selling_price=20)
                with lock:
                    results.append("sold")
            except Exception as exc:
                with lock:
                    results.append(exc)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


def test_two_sales_of_last_unit_cannot_both_succeed(file_app):
    product_id = _seed_product(file_app, stock=1)

    results = _sell_concurrently(file_app, product_id, workers=2)

    assert results.count("sold") == 1
    failures = [r for r in results if r != "sold"]
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientStockError)

    with file_app.app_context():
        assert db.session.query(Product).filter_by(id=product_id).one().stock == 0
        assert db.session.query(Transaction).filter_by(type="product_sale").count() == 1


def test_stock_never_goes_negative_under_contention(file_app):
    product_id = _seed_product(file_app, stock=3)

    results = _sell_concurrently(file_app, product_id, workers=6)

    assert results.count("sold") == 3
    assert all(isinstance(r, InsufficientStockError) for r in results if r != "sold")

    with file_app.app_context():
        assert db.session.query(Product).filter_by(id=product_id).one().stock == 0
        assert db.session.query(Transaction).count() == 3
