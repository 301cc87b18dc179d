from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import StorefrontError
from storefront.dependencies import get_db, http_error
from storefront.schemas.order import (
    CheckoutRequest,
    CheckoutResult,
    CouponRequest,
    CouponResult,
    OrderRead,
)
from storefront.services.checkout_service import apply_coupon, place_orders

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.post("/coupon", response_model=CouponResult)
def check_coupon(payload: CouponRequest):
    try:
        discount = apply_coupon(payload.code, payload.subtotal)
    except StorefrontError as exc:
        raise http_error(exc) from exc
    return CouponResult(code=payload.code.strip(), discount=discount)


@router.post("", response_model=CheckoutResult, status_code=201)
def checkout(payload: CheckoutRequest, db: Session = Depends(get_db)):
    try:
        orders = place_orders(
            db,
            payload.user_id,
            payload.items,
            payment_method=payload.payment_method,
            coupon_discount=payload.coupon_discount,
            wallet_deduction=payload.wallet_deduction,
            checkout_key=payload.checkout_key,
        )
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc
    return CheckoutResult(
        order_count=len(orders),
        orders=[OrderRead.model_validate(order) for order in orders],
    )


__all__ = ["router"]
