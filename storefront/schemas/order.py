from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.cart import CartItem


class OrderRead(BaseModel):
    id: int
    user_id: str
    items: List[Any]
    total: float
    status: str
    shipping_address: Optional[str] = None
    seller_id: Optional[str] = None
    assigned_delivery_staff_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckoutRequest(BaseModel):
    user_id: str
    items: List[CartItem]
    payment_method: str = "cod"
    coupon_discount: float = Field(default=0, ge=0)
    wallet_deduction: float = Field(default=0, ge=0)
    checkout_key: Optional[str] = Field(default=None, max_length=80)


class CheckoutResult(BaseModel):
    order_count: int
    orders: List[OrderRead]


class CouponRequest(BaseModel):
    code: str
    subtotal: float = Field(default=0, ge=0)


class CouponResult(BaseModel):
    code: str
    discount: float
