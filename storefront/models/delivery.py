from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from storefront.database.base import Base


class DeliveryStaffWardAssignment(Base):
    __tablename__ = "delivery_staff_ward_assignments"

    id = Column(Integer, primary_key=True)
    staff_user_id = Column(String, nullable=False)
    local_body_id = Column(Integer, ForeignKey("locations_local_bodies.id"), nullable=False)
    ward_number = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("staff_user_id", "local_body_id", "ward_number", name="uq_staff_ward"),
    )


__all__ = ["DeliveryStaffWardAssignment"]
