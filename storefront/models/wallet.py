from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint

from storefront.database.base import Base


class DeliveryStaffWallet(Base):
    __tablename__ = "delivery_staff_wallets"

    id = Column(Integer, primary_key=True)
    staff_user_id = Column(String, nullable=False, unique=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class DeliveryStaffWalletTransaction(Base):
    """Append-only ledger entry; the wallet balance is the sum of these rows."""

    __tablename__ = "delivery_staff_wallet_transactions"

    id = Column(Integer, primary_key=True)
    wallet_id = Column(Integer, ForeignKey("delivery_staff_wallets.id"), nullable=False)
    staff_user_id = Column(String, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"))

    amount = Column(Float, nullable=False)
    type = Column(String(10), nullable=False)
    description = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("order_id", "type", name="uq_wallet_txn_order_type"),
        Index("idx_wallet_txn_wallet", "wallet_id"),
    )


__all__ = ["DeliveryStaffWallet", "DeliveryStaffWalletTransaction"]
