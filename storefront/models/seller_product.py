from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String

from storefront.database.base import Base


class SellerProduct(Base):
    __tablename__ = "seller_products"

    id = Column(Integer, primary_key=True)
    seller_id = Column(String, nullable=False)

    name = Column(String, nullable=False)
    description = Column(String)
    price = Column(Float, nullable=False, default=0)
    mrp = Column(Float, nullable=False, default=0)
    discount_rate = Column(Float, nullable=False, default=0)
    category = Column(String)
    image_url = Column(String)

    stock = Column(Integer, nullable=False, default=0)
    area_godown_id = Column(Integer, ForeignKey("godowns.id"))

    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    coming_soon = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_seller_products_godown", "area_godown_id"),
        Index("idx_seller_products_seller", "seller_id"),
    )


__all__ = ["SellerProduct"]
