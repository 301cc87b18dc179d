from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String

from storefront.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String)

    price = Column(Float, nullable=False, default=0)
    mrp = Column(Float, nullable=False, default=0)
    discount_rate = Column(Float, nullable=False, default=0)
    purchase_rate = Column(Float, nullable=False, default=0)

    category = Column(String)
    section = Column(String)
    image_url = Column(String)

    is_active = Column(Boolean, nullable=False, default=True)
    # Denormalized counter maintained by admin edits; godown_stock is authoritative.
    stock = Column(Integer, nullable=False, default=0)
    coming_soon = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_products_active_section", "is_active", "section"),
        Index("idx_products_category", "category"),
    )


__all__ = ["Product"]
