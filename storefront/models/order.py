from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Index, Integer, String

from storefront.database.base import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)

    # Snapshot of the cart lines at purchase time.
    items = Column(JSON, nullable=False, default=list)
    total = Column(Float, nullable=False)
    status = Column(String(40), nullable=False)
    shipping_address = Column(String)

    seller_id = Column(String)
    assigned_delivery_staff_id = Column(String)

    checkout_key = Column(String(80))
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_orders_created", "created_at"),
        Index("idx_orders_staff_status", "assigned_delivery_staff_id", "status"),
        Index("idx_orders_checkout_key", "user_id", "checkout_key"),
    )


__all__ = ["Order"]
