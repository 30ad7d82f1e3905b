"""HTTP API tests through FastAPI's TestClient against a temporary database."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from clinic.infrastructure.api.app import create_app
from clinic.infrastructure.config import Settings
from tests.fakes import NOW, fixed_clock


@pytest.fixture
def client(tmp_path):
    app = create_app(Settings(db_path=tmp_path / "api.db"), clock=fixed_clock())
    with TestClient(app) as client:
        yield client


def _client_at(tmp_path, now: datetime) -> TestClient:
    app = create_app(Settings(db_path=tmp_path / "api.db"), clock=fixed_clock(now))
    return TestClient(app)


@pytest.fixture
def seeded(client):
    client.post("/api/patients", json={"fullName": "Nguyễn Văn A", "phone": "0900000000"})
    client.post(
        "/api/products",
        json={"code": "G001", "name": "Gọng kính titan", "price": 300000, "quantity": 5},
    )
    client.post(
        "/api/vouchers",
        json={
            "code": "sale10",
            "type": "percent",
            "value": 10,
            "maxDiscount": 100000,
            "usageLimit": 1,
            "startDate": "2024-01-01T00:00:00Z",
            "endDate": "2024-12-31T23:59:59Z",
        },
    )
    return client


def _invoice_body(**overrides) -> dict:
    body = {
        "patientId": 1,
        "type": "glasses",
        "items": [{"productId": 1, "quantity": 2, "unitPrice": 1}],
        "processingFee": 50000,
        "shippingFee": 0,
        "serviceFee": 20000,
        "discount": 0,
    }
    body.update(overrides)
    return body


class TestHealth:

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body == {"ok": True, "service": "clinic", "time": NOW.isoformat()}


class TestInvoices:

    def test_create_ignores_client_prices(self, seeded):
        resp = seeded.post("/api/invoices", json=_invoice_body(voucherDiscount=999999))
        assert resp.status_code == 201
        body = resp.json()
        assert body["subtotal"] == 600000
        assert body["voucherDiscount"] == 0
        assert body["total"] == 737000
        assert body["items"][0]["unitPrice"] == 300000
        assert body["patient"]["fullName"] == "Nguyễn Văn A"
        assert body["code"].startswith("HK-2024")

    def test_create_with_voucher_redeems_it(self, seeded):
        body = seeded.post("/api/invoices", json=_invoice_body(voucherCode="SALE10")).json()
        assert body["voucherDiscount"] == 60000
        assert body["total"] == 737000 - 60000
        voucher = seeded.get("/api/vouchers").json()[0]
        assert voucher["usageCount"] == 1

    def test_create_then_delete_restores_stock(self, seeded):
        invoice = seeded.post("/api/invoices", json=_invoice_body()).json()
        assert seeded.get("/api/products/1").json()["quantity"] == 3

        assert seeded.delete(f"/api/invoices/{invoice['id']}").json() == {"success": True}
        assert seeded.get("/api/products/1").json()["quantity"] == 5
        assert seeded.get(f"/api/invoices/{invoice['id']}").status_code == 404

    def test_insufficient_stock_is_conflict(self, seeded):
        resp = seeded.post("/api/invoices", json=_invoice_body(items=[{"productId": 1, "quantity": 6}]))
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"
        assert seeded.get("/api/products/1").json()["quantity"] == 5

    def test_empty_cart_is_bad_request(self, seeded):
        resp = seeded.post("/api/invoices", json=_invoice_body(items=[]))
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_unknown_patient_is_not_found(self, seeded):
        resp = seeded.post("/api/invoices", json=_invoice_body(patientId=9))
        assert resp.status_code == 404
        assert resp.json() == {"error": "not_found", "message": "Patient #9 not found"}

    def test_malformed_body_is_bad_request(self, seeded):
        resp = seeded.post("/api/invoices", json={"patientId": "abc", "items": []})
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_quote(self, seeded):
        body = seeded.post(
            "/api/invoices/quote",
            json={"items": [{"productId": 1, "quantity": 1}], "voucherCode": "SALE10"},
        ).json()
        assert body["total"] == 407000 - 30000
        assert body["voucherDiscount"] == 30000

    def test_status_and_signature(self, seeded):
        invoice = seeded.post("/api/invoices", json=_invoice_body()).json()
        url = f"/api/invoices/{invoice['id']}"

        paid = seeded.patch(f"{url}/status", json={"status": "PAID"})
        assert paid.json()["status"] == "PAID"
        reopened = seeded.patch(f"{url}/status", json={"status": "UNPAID"})
        assert reopened.status_code == 400

        signed = seeded.patch(f"{url}/signature", json={"signature": "data:image/png;base64,AA"})
        assert signed.json()["signature"] == "data:image/png;base64,AA"

    def test_amount_beyond_storage_range_is_bad_request(self, seeded):
        resp = seeded.post("/api/invoices", json=_invoice_body(shippingFee=10**19))
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"
        assert seeded.get("/api/products/1").json()["quantity"] == 5

    def test_id_beyond_storage_range_is_bad_request(self, seeded):
        assert seeded.get(f"/api/invoices/{10**19}").status_code == 400
        assert seeded.delete(f"/api/products/{10**19}").status_code == 400

    def test_delete_after_product_removed_restores_the_rest(self, seeded):
        seeded.post("/api/products", json={"code": "L001", "name": "Tròng", "price": 150000, "quantity": 10})
        items = [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 3}]
        invoice = seeded.post("/api/invoices", json=_invoice_body(items=items)).json()
        assert seeded.get("/api/products/2").json()["quantity"] == 7

        assert seeded.delete("/api/products/1").json() == {"success": True}
        line = seeded.get(f"/api/invoices/{invoice['id']}").json()["items"][0]
        assert line["productCode"] is None
        assert line["productName"] == "Gọng kính titan"

        assert seeded.delete(f"/api/invoices/{invoice['id']}").json() == {"success": True}
        assert seeded.get("/api/products/2").json()["quantity"] == 10
        assert seeded.get("/api/products/1").status_code == 404

    def test_list_by_status(self, seeded):
        seeded.post("/api/invoices", json=_invoice_body(items=[{"productId": 1, "quantity": 1}]))
        assert len(seeded.get("/api/invoices").json()) == 1
        assert seeded.get("/api/invoices", params={"status": "PAID"}).json() == []


class TestVouchers:

    def test_validate_success(self, seeded):
        body = seeded.post("/api/vouchers/validate", json={"code": "sale10", "amount": 2000000}).json()
        assert body["valid"] is True
        assert body["discount"] == 100000
        assert body["voucher"]["code"] == "SALE10"

    def test_validate_unknown_code(self, seeded):
        resp = seeded.post("/api/vouchers/validate", json={"code": "NOPE", "amount": 1})
        assert resp.status_code == 404
        assert resp.json()["valid"] is False
        assert resp.json()["reason"] == "NOT_FOUND"

    def test_validate_below_minimum(self, seeded):
        seeded.post(
            "/api/vouchers",
            json={
                "code": "FIX50",
                "type": "fixed",
                "value": 50000,
                "minAmount": 300000,
                "startDate": "2024-01-01",
                "endDate": "2024-12-31",
            },
        )
        resp = seeded.post("/api/vouchers/validate", json={"code": "FIX50", "amount": 200000})
        assert resp.status_code == 400
        assert resp.json()["reason"] == "BELOW_MINIMUM"

    def test_validate_does_not_consume(self, seeded):
        for _ in range(3):
            seeded.post("/api/vouchers/validate", json={"code": "SALE10", "amount": 100000})
        assert seeded.get("/api/vouchers").json()[0]["usageCount"] == 0

    def test_update_and_delete(self, seeded):
        updated = seeded.put("/api/vouchers/1", json={"isActive": False, "maxDiscount": None})
        assert updated.json()["isActive"] is False
        assert updated.json()["maxDiscount"] is None
        resp = seeded.post("/api/vouchers/validate", json={"code": "SALE10", "amount": 100000})
        assert resp.json()["reason"] == "DISABLED"

        assert seeded.delete("/api/vouchers/1").json() == {"success": True}
        assert seeded.get("/api/vouchers").json() == []

    def test_date_only_end_date_covers_the_whole_day(self, tmp_path):
        last_day_noon = datetime(2024, 12, 31, 12, 0, tzinfo=timezone.utc)
        with _client_at(tmp_path, last_day_noon) as client:
            created = client.post(
                "/api/vouchers",
                json={"code": "D", "type": "fixed", "value": 10000,
                      "startDate": "2024-01-01", "endDate": "2024-12-31"},
            ).json()
            assert created["endDate"].startswith("2024-12-31T23:59:59")
            resp = client.post("/api/vouchers/validate", json={"code": "D", "amount": 100000})
            assert resp.status_code == 200
            assert resp.json()["valid"] is True

    def test_update_with_date_only_end_date(self, seeded):
        body = seeded.put("/api/vouchers/1", json={"endDate": "2024-06-30"}).json()
        assert body["endDate"].startswith("2024-06-30T23:59:59")

    def test_validate_negative_amount_keeps_response_shape(self, seeded):
        resp = seeded.post("/api/vouchers/validate", json={"code": "SALE10", "amount": -1})
        assert resp.status_code == 400
        body = resp.json()
        assert body["valid"] is False
        assert "cannot be negative" in body["message"]
        assert "reason" not in body

    def test_duplicate_code_is_conflict(self, seeded):
        resp = seeded.post(
            "/api/vouchers",
            json={"code": "SALE10", "type": "fixed", "value": 1000,
                  "startDate": "2024-01-01", "endDate": "2024-02-01"},
        )
        assert resp.status_code == 409


class TestProducts:

    def test_list_filters(self, seeded):
        seeded.post("/api/products", json={"name": "Nhỏ mắt", "price": 55000, "category": "medicine"})
        assert len(seeded.get("/api/products").json()) == 2
        assert [p["name"] for p in seeded.get("/api/products", params={"category": "medicine"}).json()] == ["Nhỏ mắt"]
        assert [p["code"] for p in seeded.get("/api/products", params={"q": "titan"}).json()] == ["G001"]

    def test_update(self, seeded):
        body = seeded.put("/api/products/1", json={"quantity": 2, "minStock": 3}).json()
        assert body["quantity"] == 2
        assert body["isLowStock"] is True
        assert [p["id"] for p in seeded.get("/api/products/alerts/low-stock").json()] == [1]

    def test_expiring_alert(self, seeded):
        seeded.post(
            "/api/products",
            json={"name": "Nhỏ mắt", "price": 55000, "category": "medicine",
                  "quantity": 50, "expiresAt": "2024-07-01"},
        )
        expiring = seeded.get("/api/products/alerts/expiring").json()
        assert [p["name"] for p in expiring] == ["Nhỏ mắt"]

    def test_recommendations(self, seeded):
        seeded.post(
            "/api/products",
            json={"code": "L1", "name": "Tròng cận", "price": 400000, "category": "lenses",
                  "sphRange": "-8.00 đến 0", "cylRange": "-2.00 đến 0"},
        )
        body = seeded.get(
            "/api/products/recommendations",
            params={"odSph": "-2.5", "osSph": "-3", "category": "lenses"},
        ).json()
        assert [p["code"] for p in body] == ["L1"]

    def test_null_category_is_rejected(self, seeded):
        resp = seeded.put("/api/products/1", json={"category": None})
        assert resp.status_code == 400
        assert seeded.get("/api/products/1").json()["category"] == "glasses"

    def test_delete(self, seeded):
        assert seeded.delete("/api/products/1").json() == {"success": True}
        assert seeded.get("/api/products").json() == []
        assert seeded.delete("/api/products/1").status_code == 404

    def test_expiring_days_out_of_range(self, seeded):
        assert seeded.get("/api/products/alerts/expiring", params={"days": 10**19}).status_code == 400

    def test_missing_product(self, seeded):
        assert seeded.get("/api/products/42").status_code == 404


class TestStats:

    def test_monthly_revenue_counts_paid_only(self, seeded):
        invoice = seeded.post("/api/invoices", json=_invoice_body()).json()
        assert sum(m["total"] for m in seeded.get("/api/stats/revenue/monthly").json()) == 0

        seeded.patch(f"/api/invoices/{invoice['id']}/status", json={"status": "PAID"})
        months = seeded.get("/api/stats/revenue/monthly", params={"year": 2024}).json()
        assert len(months) == 12
        assert months[5] == {"month": 6, "total": 737000}

    def test_year_out_of_range(self, seeded):
        resp = seeded.get("/api/stats/revenue/monthly", params={"year": 99999})
        assert resp.status_code == 400

    def test_categories(self, seeded):
        rows = seeded.get("/api/stats/products/categories").json()
        assert rows == [{"category": "glasses", "count": 1, "totalQuantity": 5}]


class TestPatients:

    def test_list_and_get(self, seeded):
        assert seeded.get("/api/patients").json()[0]["fullName"] == "Nguyễn Văn A"
        assert seeded.get("/api/patients/1").json()["phone"] == "0900000000"
        assert seeded.get("/api/patients/2").status_code == 404
