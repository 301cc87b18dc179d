from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from storefront.database.base import Base


class CheckoutKey(Base):
    """Claims a client checkout key; written in the same transaction as its orders."""

    __tablename__ = "checkout_keys"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    checkout_key = Column(String(80), nullable=False)
    order_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "checkout_key", name="uq_checkout_keys_user_key"),
    )


__all__ = ["CheckoutKey"]
