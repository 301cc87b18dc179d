import logging
from datetime import datetime, timezone

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.constants import (
    SOURCE_SELLER_PRODUCT,
    STATUS_DELIVERED,
    STATUS_PENDING,
    STATUS_SELLER_CONFIRMATION_PENDING,
    TXN_CREDIT,
    TXN_DEBIT,
)
from storefront.core.errors import NotFound, TransitionConflict
from storefront.core.status_flow import next_status
from storefront.models.order import Order
from storefront.models.seller_product import SellerProduct
from storefront.models.wallet import DeliveryStaffWallet, DeliveryStaffWalletTransaction

logger = logging.getLogger(__name__)


def get_or_create_wallet(db: Session, staff_user_id) -> DeliveryStaffWallet:
    wallet = db.execute(
        select(DeliveryStaffWallet).where(DeliveryStaffWallet.staff_user_id == staff_user_id)
    ).scalars().first()
    if wallet is None:
        wallet = DeliveryStaffWallet(staff_user_id=staff_user_id)
        db.add(wallet)
        db.flush()
    return wallet


def wallet_balance(db: Session, staff_user_id) -> float:
    """Balance derived from the ledger: credits minus debits."""
    signed_amount = case(
        (DeliveryStaffWalletTransaction.type == TXN_DEBIT, -DeliveryStaffWalletTransaction.amount),
        else_=DeliveryStaffWalletTransaction.amount,
    )
    total = db.execute(
        select(func.coalesce(func.sum(signed_amount), 0.0)).where(
            DeliveryStaffWalletTransaction.staff_user_id == staff_user_id
        )
    ).scalar_one()
    return float(total)


def wallet_transactions(db: Session, staff_user_id, limit=50):
    stmt = (
        select(DeliveryStaffWalletTransaction)
        .where(DeliveryStaffWalletTransaction.staff_user_id == staff_user_id)
        .order_by(DeliveryStaffWalletTransaction.created_at.desc(), DeliveryStaffWalletTransaction.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def credit_delivery_fee(db: Session, order: Order, staff_user_id, amount=None):
    if amount is None:
        amount = get_settings().DELIVERY_FEE
    wallet = get_or_create_wallet(db, staff_user_id)
    entry = DeliveryStaffWalletTransaction(
        wallet_id=wallet.id,
        staff_user_id=staff_user_id,
        order_id=order.id,
        amount=amount,
        type=TXN_CREDIT,
        description="Delivery fee for order {}".format(str(order.id)[:8]),
    )
    db.add(entry)
    db.flush()
    return entry


def deduct_seller_stock(db: Session, order: Order) -> int:
    """Decrement seller stock for every seller line of `order`, floored at 0.

    Platform lines are left alone; their stock lives in godown batches.
    Returns the number of seller products touched.
    """
    items = order.items if isinstance(order.items, list) else []
    touched = 0
    for item in items:
        if not isinstance(item, dict):
            continue
        if item.get("source") != SOURCE_SELLER_PRODUCT:
            continue
        product_id = item.get("id")
        quantity = item.get("quantity")
        if not product_id or not quantity:
            continue
        result = db.execute(
            update(SellerProduct)
            .where(SellerProduct.id == product_id)
            .values(
                stock=case(
                    (SellerProduct.stock > quantity, SellerProduct.stock - quantity),
                    else_=0,
                )
            )
            .execution_options(synchronize_session=False)
        )
        touched += result.rowcount
    return touched


def _transition(db: Session, order: Order, new_status, *, extra_values=None):
    values = {
        "status": new_status,
        "version": order.version + 1,
        "updated_at": datetime.now(timezone.utc),
    }
    if extra_values:
        values.update(extra_values)
    result = db.execute(
        update(Order)
        .where(
            Order.id == order.id,
            Order.status == order.status,
            Order.version == order.version,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise TransitionConflict(
            "Order {} changed while updating; refresh and retry".format(order.id)
        )


def advance_order(db: Session, order_id, staff_user_id):
    """Move an order one step along the delivery flow.

    The status change, the staff wallet credit and the seller stock
    decrement that accompany delivery are committed together or not at all.
    """
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order {} not found".format(order_id))
    if order.assigned_delivery_staff_id and order.assigned_delivery_staff_id != staff_user_id:
        raise TransitionConflict("Order {} is assigned to another staff member".format(order_id))

    new_status = next_status(order.status)
    if new_status is None:
        raise TransitionConflict(
            "Order {} cannot advance from status {}".format(order_id, order.status)
        )

    previous_status = order.status
    try:
        _transition(
            db,
            order,
            new_status,
            extra_values={"assigned_delivery_staff_id": order.assigned_delivery_staff_id or staff_user_id},
        )
        if new_status == STATUS_DELIVERED:
            credit_delivery_fee(db, order, staff_user_id)
            deduct_seller_stock(db, order)
        db.commit()
    except TransitionConflict:
        db.rollback()
        logger.warning(
            "Lost status race on order %s (%s -> %s)",
            order_id,
            previous_status,
            new_status,
            extra={"order_id": order_id, "staff_user_id": staff_user_id},
        )
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Delivery of order %s conflicted with a concurrent write", order_id)
        raise TransitionConflict(
            "Order {} conflicted with a concurrent update; refresh and retry".format(order_id)
        ) from exc
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Advancing order %s failed; nothing was written", order_id)
        raise

    db.refresh(order)
    logger.info(
        "Order %s %s -> %s by %s",
        order_id,
        previous_status,
        new_status,
        staff_user_id,
        extra={"order_id": order_id, "staff_user_id": staff_user_id},
    )
    return order


def confirm_seller_order(db: Session, order_id):
    """Seller accepts an order, releasing it into the delivery flow."""
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order {} not found".format(order_id))
    if order.status != STATUS_SELLER_CONFIRMATION_PENDING:
        raise TransitionConflict(
            "Order {} is not awaiting seller confirmation".format(order_id)
        )
    try:
        _transition(db, order, STATUS_PENDING)
        db.commit()
    except TransitionConflict:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Confirming seller order %s failed", order_id)
        raise
    db.refresh(order)
    return order


__all__ = [
    "advance_order",
    "confirm_seller_order",
    "credit_delivery_fee",
    "deduct_seller_stock",
    "get_or_create_wallet",
    "wallet_balance",
    "wallet_transactions",
]
