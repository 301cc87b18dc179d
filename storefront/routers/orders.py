from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import StorefrontError
from storefront.dependencies import get_db, http_error, require_auth
from storefront.schemas.order import OrderRead
from storefront.services.delivery_service import assign_order
from storefront.services.fulfillment_service import confirm_seller_order

router = APIRouter(prefix="/orders", tags=["Orders"])


class OrderAssignment(BaseModel):
    staff_user_id: str


@router.post("/{order_id}/seller-confirm", response_model=OrderRead)
def seller_confirm(
    order_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return confirm_seller_order(db, order_id)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.post("/{order_id}/assign", response_model=OrderRead)
def assign(
    order_id: int,
    payload: OrderAssignment,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return assign_order(db, order_id, payload.staff_user_id)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


__all__ = ["router"]
