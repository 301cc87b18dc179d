from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from storefront.database.base import Base


class District(Base):
    __tablename__ = "locations_districts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)


class LocalBody(Base):
    __tablename__ = "locations_local_bodies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    body_type = Column(String, nullable=False, default="panchayath")
    ward_count = Column(Integer, nullable=False, default=0)
    district_id = Column(Integer, ForeignKey("locations_districts.id"))
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["District", "LocalBody"]
