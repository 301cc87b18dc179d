from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String

from storefront.database.base import Base


class GodownStock(Base):
    """One purchase batch of a product received into a godown."""

    __tablename__ = "godown_stock"

    id = Column(Integer, primary_key=True)
    godown_id = Column(Integer, ForeignKey("godowns.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    purchase_price = Column(Float, nullable=False, default=0)
    batch_number = Column(String)
    expiry_date = Column(Date)
    purchase_number = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_godown_stock_godown_product", "godown_id", "product_id"),
        Index("idx_godown_stock_created", "created_at"),
    )


__all__ = ["GodownStock"]
