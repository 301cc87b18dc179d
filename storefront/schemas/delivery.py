from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from storefront.schemas.order import OrderRead


class WardAssignmentRequest(BaseModel):
    local_body_id: int
    ward_numbers: List[int]


class AssignedWardRead(BaseModel):
    local_body_id: int
    local_body_name: str
    ward_number: int


class ActiveOrderRead(BaseModel):
    order: OrderRead
    next_status: Optional[str] = None


class StaffDashboardRead(BaseModel):
    staff_user_id: str
    wallet_balance: float
    assigned_wards: List[AssignedWardRead]
    active_orders: List[ActiveOrderRead]
    delivered_orders: List[OrderRead]


class WalletTransactionRead(BaseModel):
    id: int
    order_id: Optional[int] = None
    amount: float
    type: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeliveryStaffRead(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    is_approved: bool
    local_body_id: Optional[int] = None
    ward_number: Optional[int] = None
    local_body_name: Optional[str] = None
    district_name: Optional[str] = None
    assigned_wards: List[AssignedWardRead]
