import logging
from datetime import date, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.constants import STATUS_DELIVERED
from storefront.core.errors import NotFound, TransitionConflict, ValidationFailed
from storefront.core.status_flow import next_status
from storefront.models.delivery import DeliveryStaffWardAssignment
from storefront.models.locations import District, LocalBody
from storefront.models.order import Order
from storefront.models.profile import Profile
from storefront.services.fulfillment_service import wallet_balance

logger = logging.getLogger(__name__)

DELIVERY_STAFF = "delivery_staff"


def assign_wards(db: Session, staff_user_id, local_body_id, ward_numbers):
    """Replace a staff member's wards within one local body."""
    local_body = db.get(LocalBody, local_body_id)
    if local_body is None:
        raise NotFound("Local body {} not found".format(local_body_id))
    wards = sorted({int(ward) for ward in (ward_numbers or [])})
    invalid = [ward for ward in wards if ward < 1 or ward > (local_body.ward_count or 0)]
    if invalid:
        raise ValidationFailed(
            "Ward(s) {} outside 1..{}".format(", ".join(str(w) for w in invalid), local_body.ward_count)
        )

    try:
        db.execute(
            delete(DeliveryStaffWardAssignment).where(
                DeliveryStaffWardAssignment.staff_user_id == staff_user_id,
                DeliveryStaffWardAssignment.local_body_id == local_body_id,
            )
        )
        db.add_all(
            DeliveryStaffWardAssignment(
                staff_user_id=staff_user_id,
                local_body_id=local_body_id,
                ward_number=ward,
            )
            for ward in wards
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ward assignment failed for staff %s", staff_user_id)
        raise
    return wards


def assigned_wards(db: Session, staff_user_id):
    rows = db.execute(
        select(DeliveryStaffWardAssignment, LocalBody.name.label("local_body_name"))
        .outerjoin(LocalBody, LocalBody.id == DeliveryStaffWardAssignment.local_body_id)
        .where(DeliveryStaffWardAssignment.staff_user_id == staff_user_id)
        .order_by(DeliveryStaffWardAssignment.local_body_id, DeliveryStaffWardAssignment.ward_number)
    ).all()
    return [
        {
            "local_body_id": row.DeliveryStaffWardAssignment.local_body_id,
            "local_body_name": row.local_body_name or "",
            "ward_number": row.DeliveryStaffWardAssignment.ward_number,
        }
        for row in rows
    ]


def assign_order(db: Session, order_id, staff_user_id) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order {} not found".format(order_id))
    if order.status == STATUS_DELIVERED:
        raise TransitionConflict("Order {} is already delivered".format(order_id))
    result = db.execute(
        update(Order)
        .where(Order.id == order.id, Order.version == order.version)
        .values(assigned_delivery_staff_id=staff_user_id, version=order.version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise TransitionConflict("Order {} changed while assigning; refresh and retry".format(order_id))
    db.commit()
    db.refresh(order)
    return order


def _within(created_at, date_from: date | None, date_to: date | None) -> bool:
    day = created_at.date() if isinstance(created_at, datetime) else created_at
    if date_from and day < date_from:
        return False
    if date_to and day > date_to:
        return False
    return True


def staff_dashboard(db: Session, staff_user_id, *, date_from=None, date_to=None):
    orders = db.execute(
        select(Order)
        .where(Order.assigned_delivery_staff_id == staff_user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).scalars().all()

    active = [order for order in orders if order.status != STATUS_DELIVERED]
    delivered = [
        order
        for order in orders
        if order.status == STATUS_DELIVERED and _within(order.created_at, date_from, date_to)
    ]
    return {
        "staff_user_id": staff_user_id,
        "wallet_balance": wallet_balance(db, staff_user_id),
        "assigned_wards": assigned_wards(db, staff_user_id),
        "active_orders": [
            {"order": order, "next_status": next_status(order.status)} for order in active
        ],
        "delivered_orders": delivered,
    }


def list_delivery_staff(db: Session):
    profiles = db.execute(
        select(Profile).where(Profile.user_type == DELIVERY_STAFF).order_by(Profile.full_name)
    ).scalars().all()
    local_bodies = {lb.id: lb for lb in db.execute(select(LocalBody)).scalars()}
    districts = {district.id: district.name for district in db.execute(select(District)).scalars()}

    staff = []
    for profile in profiles:
        local_body = local_bodies.get(profile.local_body_id)
        staff.append(
            {
                "user_id": profile.user_id,
                "full_name": profile.full_name,
                "email": profile.email,
                "mobile_number": profile.mobile_number,
                "is_approved": bool(profile.is_approved),
                "local_body_id": profile.local_body_id,
                "ward_number": profile.ward_number,
                "local_body_name": local_body.name if local_body else None,
                "district_name": districts.get(local_body.district_id) if local_body else None,
                "assigned_wards": assigned_wards(db, profile.user_id),
            }
        )
    return staff


__all__ = [
    "assign_order",
    "assign_wards",
    "assigned_wards",
    "list_delivery_staff",
    "staff_dashboard",
]
