import logging
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.allocation import cart_subtotal, split_cart
from storefront.core.errors import ValidationFailed
from storefront.models.checkout import CheckoutKey
from storefront.models.order import Order

logger = logging.getLogger(__name__)

CASH_ON_DELIVERY = "cod"


class CouponResolver(Protocol):
    def resolve(self, code: str, subtotal: float) -> float: ...


class UnavailableCouponResolver:
    """Coupon lookup is not wired to a backend yet; every code is rejected."""

    def resolve(self, code: str, subtotal: float) -> float:
        raise ValidationFailed("Invalid coupon code")


def apply_coupon(code, subtotal, resolver: Optional[CouponResolver] = None) -> float:
    code = (code or "").strip()
    if not code:
        raise ValidationFailed("Enter a coupon code")
    resolver = resolver or UnavailableCouponResolver()
    return resolver.resolve(code, subtotal)


def shipping_label(payment_method) -> str:
    if not payment_method or payment_method == CASH_ON_DELIVERY:
        return "Cash on Delivery"
    return payment_method


def platform_fee_for(items, platform_fee=None) -> float:
    if not items:
        return 0.0
    if platform_fee is None:
        return get_settings().PLATFORM_FEE
    return platform_fee


def validate_cart(items, *, coupon_discount, wallet_deduction):
    if not items:
        raise ValidationFailed("Your cart is empty")
    coming_soon = [item.name for item in items if item.coming_soon]
    if coming_soon:
        raise ValidationFailed(
            "Coming soon items cannot be ordered yet: {}".format(", ".join(coming_soon))
        )
    if any(item.quantity <= 0 for item in items):
        raise ValidationFailed("Quantities must be positive")
    if coupon_discount < 0 or wallet_deduction < 0:
        raise ValidationFailed("Discounts must be non-negative")


def _existing_checkout(db: Session, user_id, checkout_key):
    stmt = (
        select(Order)
        .where(Order.user_id == user_id, Order.checkout_key == checkout_key)
        .order_by(Order.id)
    )
    return list(db.execute(stmt).scalars().all())


def place_orders(
    db: Session,
    user_id,
    items,
    *,
    payment_method=CASH_ON_DELIVERY,
    coupon_discount=0.0,
    wallet_deduction=0.0,
    platform_fee=None,
    checkout_key=None,
):
    """Split a cart into per-party orders and insert them atomically.

    With a `checkout_key`, a repeated submission returns the orders created
    by the first one instead of inserting them again. The key is claimed in
    `checkout_keys` inside the same transaction, so two submissions racing
    on one key still produce a single set of orders.
    """
    if not user_id:
        raise ValidationFailed("Please login to place an order")
    items = list(items)

    if checkout_key:
        existing = _existing_checkout(db, user_id, checkout_key)
        if existing:
            logger.warning(
                "Checkout %s for user %s already placed; returning existing orders",
                checkout_key,
                user_id,
                extra={"user_id": user_id, "checkout_key": checkout_key},
            )
            return existing

    validate_cart(items, coupon_discount=coupon_discount, wallet_deduction=wallet_deduction)

    fee = platform_fee_for(items, platform_fee)
    drafts = split_cart(
        items,
        platform_fee=fee,
        coupon_discount=coupon_discount,
        wallet_deduction=wallet_deduction,
    )
    label = shipping_label(payment_method)

    orders = [
        Order(
            user_id=user_id,
            items=[item.to_order_line() for item in draft.items],
            total=draft.total,
            status=draft.status,
            shipping_address=label,
            seller_id=draft.seller_id,
            checkout_key=checkout_key,
        )
        for draft in drafts
    ]
    try:
        if checkout_key:
            db.add(CheckoutKey(user_id=user_id, checkout_key=checkout_key, order_count=len(orders)))
            db.flush()
        db.add_all(orders)
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _existing_checkout(db, user_id, checkout_key) if checkout_key else []
        if not existing:
            logger.exception("Checkout failed for user %s; no orders were placed", user_id)
            raise
        logger.warning(
            "Checkout %s for user %s placed concurrently; returning existing orders",
            checkout_key,
            user_id,
            extra={"user_id": user_id, "checkout_key": checkout_key},
        )
        return existing
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Checkout failed for user %s; no orders were placed", user_id)
        raise

    for order in orders:
        db.refresh(order)
    logger.info(
        "Placed %d order(s) for user %s, subtotal %.2f, fee %.2f",
        len(orders),
        user_id,
        cart_subtotal(items),
        fee,
        extra={"user_id": user_id, "checkout_key": checkout_key},
    )
    return orders


def checkout_cart(db: Session, user_id, cart, **kwargs):
    """Place orders for everything in `cart` and empty it on success."""
    orders = place_orders(db, user_id, cart.items, **kwargs)
    cart.clear()
    return orders


__all__ = [
    "CouponResolver",
    "UnavailableCouponResolver",
    "apply_coupon",
    "checkout_cart",
    "place_orders",
    "platform_fee_for",
    "shipping_label",
    "validate_cart",
]
