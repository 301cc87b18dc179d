from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint

from storefront.database.base import Base


class Godown(Base):
    __tablename__ = "godowns"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    godown_type = Column(String(10), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class GodownLocalBody(Base):
    __tablename__ = "godown_local_bodies"

    id = Column(Integer, primary_key=True)
    godown_id = Column(Integer, ForeignKey("godowns.id", ondelete="CASCADE"), nullable=False)
    local_body_id = Column(Integer, ForeignKey("locations_local_bodies.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("godown_id", "local_body_id", name="uq_godown_local_body"),
        Index("idx_godown_local_bodies_lb", "local_body_id"),
    )


class GodownWard(Base):
    __tablename__ = "godown_wards"

    id = Column(Integer, primary_key=True)
    godown_id = Column(Integer, ForeignKey("godowns.id", ondelete="CASCADE"), nullable=False)
    local_body_id = Column(Integer, ForeignKey("locations_local_bodies.id"), nullable=False)
    ward_number = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("godown_id", "local_body_id", "ward_number", name="uq_godown_ward"),
        Index("idx_godown_wards_lookup", "local_body_id", "ward_number"),
    )


__all__ = ["Godown", "GodownLocalBody", "GodownWard"]
