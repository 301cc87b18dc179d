import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import select

from storefront.config import get_settings
from storefront.database import Base, build_engine, session_factory
from storefront.dependencies import get_db
from storefront.main import app
from storefront.models import (
    DeliveryStaffWalletTransaction,
    Godown,
    GodownLocalBody,
    GodownStock,
    GodownWard,
    LocalBody,
    Order,
    Product,
    Profile,
)


class ApiTestBase(unittest.TestCase):
    def setUp(self):
        engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        self.Session = session_factory(engine)

        db = self.Session()
        db.add_all(
            [
                LocalBody(id=1, name="Kottakkal", ward_count=5),
                Godown(id=1, name="Micro A", godown_type="micro"),
                Product(id=1, name="Rice", price=100, mrp=110, section="featured"),
            ]
        )
        db.flush()
        db.add_all(
            [
                GodownLocalBody(godown_id=1, local_body_id=1),
                GodownWard(godown_id=1, local_body_id=1, ward_number=2),
                GodownStock(godown_id=1, product_id=1, quantity=8, purchase_price=80),
                Profile(user_id="cust-1", local_body_id=1, ward_number=2),
            ]
        )
        db.commit()
        db.close()

        def override_get_db():
            session = self.Session()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class StorefrontApiTest(ApiTestBase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_area_products(self):
        response = self.client.get("/catalog/area-products", params={"user_id": "cust-1"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["name"] for row in response.json()], ["Rice"])

    def test_checkout_and_delivery_flow(self):
        payload = {
            "user_id": "cust-1",
            "items": [{"id": 1, "name": "Rice", "price": 100, "mrp": 110, "quantity": 2}],
            "checkout_key": "cart-1",
        }
        response = self.client.post("/checkout", json=payload)
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["order_count"], 1)
        self.assertAlmostEqual(body["orders"][0]["total"], 207.0)
        order_id = body["orders"][0]["id"]

        retry = self.client.post("/checkout", json=payload)
        self.assertEqual(retry.json()["orders"][0]["id"], order_id)

        statuses = []
        for _ in range(4):
            response = self.client.post("/delivery/staff-1/orders/{}/advance".format(order_id))
            self.assertEqual(response.status_code, 200)
            statuses.append(response.json()["status"])
        self.assertEqual(statuses, ["accepted", "pickup", "shipped", "delivered"])

        response = self.client.post("/delivery/staff-1/orders/{}/advance".format(order_id))
        self.assertEqual(response.status_code, 409)

        dashboard = self.client.get("/delivery/staff-1/dashboard").json()
        self.assertAlmostEqual(dashboard["wallet_balance"], 30.0)
        self.assertEqual(len(dashboard["delivered_orders"]), 1)

    def test_checkout_rejects_coming_soon(self):
        payload = {
            "user_id": "cust-1",
            "items": [{"id": 1, "name": "Rice", "price": 100, "coming_soon": True}],
        }
        response = self.client.post("/checkout", json=payload)
        self.assertEqual(response.status_code, 400)

    def test_coupon_rejected(self):
        response = self.client.post("/checkout/coupon", json={"code": "SAVE10", "subtotal": 100})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid coupon code")

    def test_stock_control_and_export(self):
        response = self.client.get("/stock/control")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["stats"]["in_stock"], 1)
        self.assertEqual(body["items"][0]["godown_breakdown"][0]["godown"]["name"], "Micro A")

        self.assertEqual(self.client.get("/stock/control", params={"status": "bogus"}).status_code, 400)

        demand = self.client.get("/stock/demand").json()
        self.assertEqual(demand["slow_movers"][0]["product"]["name"], "Rice")

        export = self.client.get("/stock/export")
        self.assertEqual(export.status_code, 200)
        self.assertTrue(export.content.startswith(b"PK"))

    def test_purchase_validation(self):
        response = self.client.post("/stock/purchases", json={"godown_ids": [], "items": []})
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/stock/purchases",
            json={"godown_ids": [1], "items": [{"product_id": 1, "quantity": 4, "purchase_rate": 75}]},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["batch_count"], 1)

    def test_eligible_godowns(self):
        response = self.client.get("/godowns/eligible", params={"local_body_id": 1, "ward_number": 2})
        self.assertEqual(response.json()["godown_ids"], [1])
        response = self.client.get("/godowns/eligible", params={"local_body_id": 1, "ward_number": 4})
        self.assertEqual(response.json()["godown_ids"], [])


class ApiKeyProtectionTest(ApiTestBase):
    def setUp(self):
        self.env = patch.dict(os.environ, {"API_KEYS": "secret", "API_KEY_HEADER": "X-Storefront-Key"})
        self.env.start()
        get_settings.cache_clear()
        super().setUp()

        db = self.Session()
        shipped = Order(user_id="cust-1", items=[], total=50, status="shipped")
        awaiting = Order(user_id="cust-1", items=[], total=30, status="seller_confirmation_pending")
        db.add_all([shipped, awaiting])
        db.commit()
        self.shipped_id = shipped.id
        self.awaiting_id = awaiting.id
        db.close()

    def tearDown(self):
        super().tearDown()
        self.env.stop()
        get_settings.cache_clear()

    def _ledger(self):
        db = self.Session()
        try:
            return db.execute(select(DeliveryStaffWalletTransaction)).scalars().all()
        finally:
            db.close()

    def _status(self, order_id):
        db = self.Session()
        try:
            return db.get(Order, order_id).status
        finally:
            db.close()

    def test_advance_requires_key(self):
        response = self.client.post("/delivery/anyone/orders/{}/advance".format(self.shipped_id))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self._ledger(), [])
        self.assertEqual(self._status(self.shipped_id), "shipped")

        response = self.client.post(
            "/delivery/anyone/orders/{}/advance".format(self.shipped_id),
            headers={"X-API-Key": "secret"},
        )
        self.assertEqual(response.status_code, 401)

    def test_advance_with_configured_header(self):
        response = self.client.post(
            "/delivery/staff-1/orders/{}/advance".format(self.shipped_id),
            headers={"X-Storefront-Key": "secret"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "delivered")
        self.assertEqual([entry.staff_user_id for entry in self._ledger()], ["staff-1"])

    def test_seller_confirm_requires_key(self):
        response = self.client.post("/orders/{}/seller-confirm".format(self.awaiting_id))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self._status(self.awaiting_id), "seller_confirmation_pending")

        response = self.client.post(
            "/orders/{}/seller-confirm".format(self.awaiting_id),
            headers={"X-Storefront-Key": "secret"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "pending")


if __name__ == "__main__":
    unittest.main()
