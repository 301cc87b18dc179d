from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import StorefrontError
from storefront.dependencies import get_db, http_error, require_auth
from storefront.schemas.delivery import (
    DeliveryStaffRead,
    StaffDashboardRead,
    WalletTransactionRead,
    WardAssignmentRequest,
)
from storefront.schemas.order import OrderRead
from storefront.services.delivery_service import assign_wards, list_delivery_staff, staff_dashboard
from storefront.services.fulfillment_service import advance_order, wallet_transactions

router = APIRouter(prefix="/delivery", tags=["Delivery"])


@router.get("/staff", response_model=List[DeliveryStaffRead])
def get_delivery_staff(db: Session = Depends(get_db), _auth=Depends(require_auth)):
    return list_delivery_staff(db)


@router.get("/{staff_user_id}/dashboard", response_model=StaffDashboardRead)
def get_dashboard(
    staff_user_id: str,
    date_from: Optional[date] = Query(None, description="Delivered orders created on or after"),
    date_to: Optional[date] = Query(None, description="Delivered orders created on or before"),
    db: Session = Depends(get_db),
):
    data = staff_dashboard(db, staff_user_id, date_from=date_from, date_to=date_to)
    return StaffDashboardRead.model_validate(data, from_attributes=True)


@router.get("/{staff_user_id}/wallet/transactions", response_model=List[WalletTransactionRead])
def get_wallet_transactions(
    staff_user_id: str,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return wallet_transactions(db, staff_user_id, limit=limit)


@router.post("/{staff_user_id}/orders/{order_id}/advance", response_model=OrderRead)
def advance(
    staff_user_id: str,
    order_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return advance_order(db, order_id, staff_user_id)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc


@router.put("/{staff_user_id}/wards")
def replace_wards(
    staff_user_id: str,
    payload: WardAssignmentRequest,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        wards = assign_wards(db, staff_user_id, payload.local_body_id, payload.ward_numbers)
    except (StorefrontError, SQLAlchemyError) as exc:
        raise http_error(exc) from exc
    return {
        "staff_user_id": staff_user_id,
        "local_body_id": payload.local_body_id,
        "ward_numbers": wards,
    }


__all__ = ["router"]
