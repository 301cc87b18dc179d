from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String

from storefront.database.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, unique=True)

    full_name = Column(String)
    email = Column(String)
    mobile_number = Column(String)
    user_type = Column(String, nullable=False, default="customer")

    local_body_id = Column(Integer, ForeignKey("locations_local_bodies.id"))
    ward_number = Column(Integer)
    is_approved = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_profiles_user_type", "user_type"),
    )


__all__ = ["Profile"]
