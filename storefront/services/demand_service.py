from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.stock_rules import tally_demand
from storefront.models.order import Order


def load_recent_order_items(db: Session, limit=None):
    """Item snapshots of the most recent orders, newest first."""
    if limit is None:
        limit = get_settings().DEMAND_ORDER_WINDOW
    stmt = (
        select(Order.items)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def build_demand(db: Session, limit=None):
    return tally_demand(load_recent_order_items(db, limit=limit))


def most_demanded(aggregates, size=None):
    if size is None:
        size = get_settings().DEMAND_RANKING_SIZE
    return sorted(aggregates, key=lambda entry: entry["demand_score"], reverse=True)[:size]


def slow_movers(aggregates, size=None):
    if size is None:
        size = get_settings().DEMAND_RANKING_SIZE
    return sorted(aggregates, key=lambda entry: entry["demand_score"])[:size]


__all__ = ["build_demand", "load_recent_order_items", "most_demanded", "slow_movers"]
