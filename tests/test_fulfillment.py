import unittest

from sqlalchemy import create_engine, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from storefront.core.errors import NotFound, TransitionConflict
from storefront.database.base import Base
from storefront.models import DeliveryStaffWalletTransaction, Order, Product, SellerProduct
from storefront.services.fulfillment_service import (
    advance_order,
    confirm_seller_order,
    credit_delivery_fee,
    get_or_create_wallet,
    wallet_balance,
    wallet_transactions,
)


class FulfillmentTest(unittest.TestCase):
    def setUp(self):
        engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()
        self.db.add_all(
            [
                Product(id=1, name="Rice", stock=10),
                SellerProduct(id=1, seller_id="S1", name="Pickle", stock=5, is_approved=True),
                SellerProduct(id=2, seller_id="S1", name="Jam", stock=1, is_approved=True),
            ]
        )
        self.db.commit()

    def tearDown(self):
        self.db.close()

    def _order(self, status="pending", items=None, staff=None):
        order = Order(
            user_id="cust-1",
            items=items or [{"id": 1, "quantity": 2, "source": "product"}],
            total=100,
            status=status,
            assigned_delivery_staff_id=staff,
        )
        self.db.add(order)
        self.db.commit()
        return order

    def _deliver(self, order_id, staff="staff-1"):
        order = None
        for _ in range(4):
            order = advance_order(self.db, order_id, staff)
        return order

    def test_each_advance_moves_one_step(self):
        order = self._order(status="pickup")
        advanced = advance_order(self.db, order.id, "staff-1")
        self.assertEqual(advanced.status, "shipped")
        self.assertEqual(advanced.assigned_delivery_staff_id, "staff-1")
        self.assertEqual(advanced.version, 2)

    def test_delivery_credits_wallet_once(self):
        order = self._order()
        delivered = self._deliver(order.id)
        self.assertEqual(delivered.status, "delivered")
        self.assertAlmostEqual(wallet_balance(self.db, "staff-1"), 30.0)

        entries = wallet_transactions(self.db, "staff-1")
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].type, "credit")
        self.assertEqual(entries[0].description, "Delivery fee for order {}".format(str(order.id)[:8]))

        with self.assertRaises(TransitionConflict):
            advance_order(self.db, order.id, "staff-1")
        self.assertAlmostEqual(wallet_balance(self.db, "staff-1"), 30.0)

    def test_balance_is_sum_of_ledger(self):
        first = self._deliver(self._order().id)
        self._deliver(self._order().id)
        wallet = get_or_create_wallet(self.db, "staff-1")
        self.db.add(
            DeliveryStaffWalletTransaction(
                wallet_id=wallet.id,
                staff_user_id="staff-1",
                amount=12.5,
                type="debit",
                description="Payout",
            )
        )
        self.db.commit()
        self.assertAlmostEqual(wallet_balance(self.db, "staff-1"), 47.5)
        self.assertAlmostEqual(wallet_balance(self.db, "staff-2"), 0.0)

        with self.assertRaises(IntegrityError):
            credit_delivery_fee(self.db, first, "staff-1")
        self.db.rollback()

    def test_delivery_deducts_seller_stock_only(self):
        order = self._order(
            items=[
                {"id": 1, "quantity": 2, "source": "seller_product"},
                {"id": 2, "quantity": 3, "source": "seller_product"},
                {"id": 1, "quantity": 4, "source": "product"},
            ]
        )
        self._deliver(order.id)
        stocks = dict(self.db.execute(select(SellerProduct.id, SellerProduct.stock)).all())
        self.assertEqual(stocks, {1: 3, 2: 0})
        product_stock = self.db.execute(select(Product.stock).where(Product.id == 1)).scalar_one()
        self.assertEqual(product_stock, 10)

    def test_order_of_another_staff_member(self):
        order = self._order(staff="staff-2")
        with self.assertRaises(TransitionConflict):
            advance_order(self.db, order.id, "staff-1")

    def test_stale_version_is_rejected(self):
        order = self._order()
        self.db.execute(
            update(Order)
            .where(Order.id == order.id)
            .values(version=5)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

        with self.assertRaises(TransitionConflict):
            advance_order(self.db, order.id, "staff-1")
        reloaded = self.db.get(Order, order.id)
        self.assertEqual(reloaded.status, "pending")
        self.assertEqual(reloaded.version, 5)

    def test_missing_order(self):
        with self.assertRaises(NotFound):
            advance_order(self.db, 999, "staff-1")

    def test_seller_order_needs_confirmation(self):
        order = self._order(status="seller_confirmation_pending")
        with self.assertRaises(TransitionConflict):
            advance_order(self.db, order.id, "staff-1")

        confirmed = confirm_seller_order(self.db, order.id)
        self.assertEqual(confirmed.status, "pending")
        self.assertEqual(advance_order(self.db, order.id, "staff-1").status, "accepted")

        with self.assertRaises(TransitionConflict):
            confirm_seller_order(self.db, order.id)


if __name__ == "__main__":
    unittest.main()
