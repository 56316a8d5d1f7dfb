"""
Ledger tests: free-form posts, listings, date filtering, immutability and
the typed views over the details column.
"""

from datetime import datetime

import pytest

from parlour.models import Transaction, LedgerImmutableError
from parlour.models import details as ledger_details
from parlour.services import ledger_service
from parlour.validation import InvalidTTypeError, ValidationError


def _add(db_session, *, date, t_type="DR", amount=0, cost=0, entry_type="expense", details="{}"):
    tx = Transaction(type=entry_type, t_type=t_type, amount=amount, cost=cost, notes="", details=details, date=date)
    db_session.add(tx)
    db_session.commit()
    return tx.id


class TestPostTransaction:

    def test_post_with_defaults(self, client, admin_headers, db_session):
        resp = client.post("/api/transactions", json={"type": "rent"}, headers=admin_headers)
        assert resp.status_code == 200

        db_session.expire_all()
        tx = db_session.query(Transaction).filter_by(id=resp.json["id"]).first()
        assert tx.t_type == "DR"
        assert tx.amount == 0
        assert tx.cost == 0
        assert tx.notes == ""
        assert tx.details == "{}"
        assert tx.date is not None

    def test_post_credit_with_details(self, client, admin_headers, db_session):
        resp = client.post("/api/transactions", json={
            "type": "other_income",
            "t_type": "CR",
            "details": {"source": "tips"},
            "amount": 120,
            "notes": "Weekend tips",
        }, headers=admin_headers)
        assert resp.status_code == 200

        listed = client.get("/api/transactions", headers=admin_headers).json
        assert listed[0]["t_type"] == "CR"
        assert listed[0]["details"] == {"source": "tips"}
        assert listed[0]["amount"] == 120

    def test_rejects_unknown_t_type(self, client, admin_headers, db_session):
        resp = client.post("/api/transactions", json={"type": "rent", "t_type": "XX"}, headers=admin_headers)
        assert resp.status_code == 400
        assert db_session.query(Transaction).count() == 0

    def test_t_type_is_case_insensitive(self, db_session):
        tx_id = ledger_service.post_transaction({"type": "rent", "t_type": "cr"})
        assert db_session.query(Transaction).filter_by(id=tx_id).one().t_type == "CR"

    def test_requires_type(self, client, admin_headers, db_session):
        resp = client.post("/api/transactions", json={"amount": 5}, headers=admin_headers)
        assert resp.status_code == 400

    def test_rejects_non_object_details(self, db_session):
        with pytest.raises(ValidationError):
            ledger_service.post_transaction({"type": "rent", "details": [1, 2]})

    def test_append_rejects_unknown_t_type(self, db_session):
        with pytest.raises(InvalidTTypeError):
            ledger_service.append_transaction(entry_type="rent", t_type="XX")


class TestListings:

    def test_newest_first(self, client, admin_headers, db_session):
        old = _add(db_session, date=datetime(2024, 1, 1, 9, 0))
        new = _add(db_session, date=datetime(2024, 3, 1, 9, 0))
        mid = _add(db_session, date=datetime(2024, 2, 1, 9, 0))

        rows = client.get("/api/transactions", headers=admin_headers).json
        assert [r["id"] for r in rows] == [new, mid, old]

    def test_listing_is_idempotent(self, client, admin_headers, db_session):
        _add(db_session, date=datetime(2024, 1, 1))
        _add(db_session, date=datetime(2024, 1, 2))
        first = client.get("/api/transactions", headers=admin_headers).json
        second = client.get("/api/transactions", headers=admin_headers).json
        assert first == second

    def test_date_range_is_inclusive_of_whole_days(self, client, admin_headers, db_session):
        _add(db_session, date=datetime(2024, 1, 9, 23, 59, 59))
        first_instant = _add(db_session, date=datetime(2024, 1, 10, 0, 0, 0))
        last_instant = _add(db_session, date=datetime(2024, 1, 12, 23, 59, 59, 900000))
        _add(db_session, date=datetime(2024, 1, 13, 0, 0, 0))

        rows = client.get(
            "/api/date/transactions?from=2024-01-10&to=2024-01-12", headers=admin_headers
        ).json
        assert [r["id"] for r in rows] == [last_instant, first_instant]

    def test_report_days_follow_shop_utc_offset(self, app, monkeypatch, client, admin_headers, db_session):
        # 20:00 UTC on 1 June is 01:30 on 2 June at UTC+05:30
        late_sale = _add(db_session, date=datetime(2024, 6, 1, 20, 0))
        monkeypatch.setitem(app.config, "REPORT_UTC_OFFSET_MINUTES", 330)

        first = client.get("/api/date/transactions?from=2024-06-01&to=2024-06-01", headers=admin_headers).json
        second = client.get("/api/date/transactions?from=2024-06-02&to=2024-06-02", headers=admin_headers).json
        assert first == []
        assert [r["id"] for r in second] == [late_sale]
        assert ledger_service.profit_and_loss("2024-06-02", "2024-06-02")["count"] == 1

    def test_date_range_defaults_to_everything(self, client, admin_headers, db_session):
        _add(db_session, date=datetime(1999, 5, 5))
        _add(db_session, date=datetime(2050, 5, 5))
        rows = client.get("/api/date/transactions", headers=admin_headers).json
        assert len(rows) == 2

    def test_bad_date_is_400(self, client, admin_headers, db_session):
        resp = client.get("/api/date/transactions?from=yesterday", headers=admin_headers)
        assert resp.status_code == 400


class TestImmutability:

    def test_update_is_refused(self, db_session):
        tx_id = _add(db_session, date=datetime(2024, 1, 1), amount=10)
        tx = db_session.query(Transaction).filter_by(id=tx_id).first()
        tx.amount = 999
        with pytest.raises(LedgerImmutableError):
            db_session.flush()
        db_session.rollback()

        assert db_session.query(Transaction).filter_by(id=tx_id).first().amount == 10

    def test_delete_is_refused(self, db_session):
        tx_id = _add(db_session, date=datetime(2024, 1, 1))
        tx = db_session.query(Transaction).filter_by(id=tx_id).first()
        db_session.delete(tx)
        with pytest.raises(LedgerImmutableError):
            db_session.flush()
        db_session.rollback()

        assert db_session.query(Transaction).count() == 1


class TestModuleDocs:

    def test_invariants_are_module_docstrings(self):
        from parlour.models import ledger as ledger_model

        assert "Append-only" in ledger_model.__doc__
        assert "Append-only" in ledger_service.__doc__


class TestDetails:

    def test_known_shapes_are_typed(self):
        sale = ledger_details.from_payload("product_sale", {
            "product_id": 1, "name": "Gel", "quantity": 2, "selling_price": 4.5, "customer_name": None,
        })
        assert isinstance(sale, ledger_details.ProductSale)

        stock = ledger_details.from_payload("expense", {"product_id": 1, "quantity": 3})
        assert stock == ledger_details.StockAddition(product_id=1, quantity=3)

        served = ledger_details.from_payload("service_sale", {"service_id": 2, "service_name": "Facial"})
        assert isinstance(served, ledger_details.ServiceSale)

    def test_unknown_type_is_open(self):
        details = ledger_details.from_payload("rent", {"month": "March"})
        assert details == ledger_details.OpenDetails({"month": "March"})

    def test_shape_mismatch_falls_back_to_open(self):
        # A manual expense post with its own keys keeps them all
        details = ledger_details.from_payload("expense", {"vendor": "Power Co", "bill": 12})
        assert isinstance(details, ledger_details.OpenDetails)
        assert details.to_dict() == {"vendor": "Power Co", "bill": 12}

    def test_extra_keys_are_preserved(self):
        details = ledger_details.from_payload("expense", {"product_id": 1, "quantity": 3, "batch": "A7"})
        assert details.to_dict() == {"product_id": 1, "quantity": 3, "batch": "A7"}

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", "42"])
    def test_unreadable_details_decode_to_empty(self, raw):
        assert ledger_details.decode("expense", raw).to_dict() == {}

    def test_stock_addition_omits_absent_name(self):
        assert ledger_details.StockAddition(product_id=1, quantity=2).to_dict() == {"product_id": 1, "quantity": 2}
