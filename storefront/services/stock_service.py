import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.constants import GODOWN_MICRO, STOCK_IN, STOCK_LOW, STOCK_OUT
from storefront.core.errors import NotFound, ValidationFailed
from storefront.core.stock_rules import classify_stock_status, demand_score, reorder_level
from storefront.models.godown import Godown
from storefront.models.product import Product
from storefront.models.stock import GodownStock
from storefront.services.demand_service import build_demand, most_demanded, slow_movers

logger = logging.getLogger(__name__)


def _godown_info(godown):
    return {
        "id": godown.id,
        "name": godown.name,
        "godown_type": godown.godown_type,
        "is_active": bool(godown.is_active),
    }


def _unknown_godown(godown_id):
    return {"id": godown_id, "name": "Unknown", "godown_type": GODOWN_MICRO, "is_active": True}


def aggregate_stock(products, godowns, batches, demand=None):
    """Roll stock batches up per product.

    Every active product is listed once, with zero stock when it has no
    batches. Inactive products only show up while batches still reference
    them; batches for products that no longer exist are dropped.
    """
    settings = get_settings()
    demand = demand or {}
    godown_map = {godown.id: _godown_info(godown) for godown in godowns}

    grouped = {}
    for batch in batches:
        grouped.setdefault(batch.product_id, []).append(batch)

    listed = sorted(
        (product for product in products if product.is_active or product.id in grouped),
        key=lambda product: ((product.name or "").lower(), product.id),
    )

    results = []
    for product in listed:
        items = grouped.get(product.id, [])
        total_quantity = sum(batch.quantity for batch in items)
        total_value = sum(batch.quantity * batch.purchase_price for batch in items)

        by_godown = {}
        for batch in items:
            by_godown.setdefault(batch.godown_id, []).append(batch)
        breakdown = [
            {
                "godown": godown_map.get(godown_id) or _unknown_godown(godown_id),
                "quantity": sum(batch.quantity for batch in godown_batches),
                "batches": godown_batches,
            }
            for godown_id, godown_batches in by_godown.items()
        ]

        product_demand = demand.get(product.id) or {"count": 0, "quantity": 0}
        level = reorder_level(
            product_demand["quantity"],
            floor=settings.REORDER_FLOOR,
            averaging_days=settings.DEMAND_AVERAGING_DAYS,
            safety_days=settings.SAFETY_STOCK_DAYS,
        )
        results.append(
            {
                "product": product,
                "total_quantity": total_quantity,
                "total_value": total_value,
                "godown_breakdown": breakdown,
                "reorder_level": level,
                "status": classify_stock_status(total_quantity, level),
                "order_count": product_demand["count"],
                "order_quantity": product_demand["quantity"],
                "demand_score": demand_score(product_demand["count"], product_demand["quantity"]),
            }
        )
    return results


def load_stock_aggregates(db: Session):
    products = db.execute(select(Product)).scalars().all()
    godowns = db.execute(select(Godown)).scalars().all()
    batches = db.execute(select(GodownStock).order_by(GodownStock.created_at)).scalars().all()
    return aggregate_stock(products, godowns, batches, build_demand(db))


def _as_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def _any_batch(entry, predicate):
    return any(
        predicate(group, batch)
        for group in entry["godown_breakdown"]
        for batch in group["batches"]
    )


def filter_aggregates(
    aggregates,
    *,
    search=None,
    category=None,
    status=None,
    godown_type=None,
    godown_id=None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    result = aggregates
    if search:
        needle = search.strip().lower()
        result = [entry for entry in result if needle in (entry["product"].name or "").lower()]
    if category:
        result = [entry for entry in result if entry["product"].category == category]
    if status:
        result = [entry for entry in result if entry["status"] == status]
    if godown_type:
        result = [
            entry
            for entry in result
            if any(group["godown"]["godown_type"] == godown_type for group in entry["godown_breakdown"])
        ]
    if godown_id is not None:
        result = [
            entry
            for entry in result
            if any(group["godown"]["id"] == godown_id for group in entry["godown_breakdown"])
        ]
    if date_from:
        result = [
            entry
            for entry in result
            if _any_batch(entry, lambda _g, batch: _as_date(batch.created_at) >= date_from)
        ]
    if date_to:
        result = [
            entry
            for entry in result
            if _any_batch(entry, lambda _g, batch: _as_date(batch.created_at) <= date_to)
        ]
    return result


def stock_summary(aggregates):
    counts = {STOCK_IN: 0, STOCK_LOW: 0, STOCK_OUT: 0}
    total_value = 0.0
    for entry in aggregates:
        counts[entry["status"]] += 1
        total_value += entry["total_value"]
    return {
        "in_stock": counts[STOCK_IN],
        "low_stock": counts[STOCK_LOW],
        "out_of_stock": counts[STOCK_OUT],
        "total_value": total_value,
    }


def stock_control(db: Session, **filters):
    aggregates = load_stock_aggregates(db)
    filtered = filter_aggregates(aggregates, **filters)
    categories = sorted({entry["product"].category for entry in aggregates if entry["product"].category})
    return {
        "stats": stock_summary(aggregates),
        "categories": categories,
        "items": filtered,
        "most_demanded": most_demanded(filtered),
        "slow_movers": slow_movers(filtered),
    }


def record_purchase(db: Session, godown_ids, lines, *, purchase_number=None):
    """Receive the same purchase lines into every selected godown.

    A line whose MRP differs from the product's current MRP also updates the
    product. Everything is written in one transaction.
    """
    godown_ids = list(dict.fromkeys(godown_ids or []))
    if not godown_ids:
        raise ValidationFailed("Select at least one godown")
    valid_lines = [line for line in (lines or []) if line.product_id and line.quantity > 0]
    if not valid_lines:
        raise ValidationFailed("Add at least one product with quantity")

    godowns = db.execute(
        select(Godown).where(Godown.id.in_(godown_ids), Godown.is_active.is_(True))
    ).scalars().all()
    missing_godowns = set(godown_ids) - {godown.id for godown in godowns}
    if missing_godowns:
        raise ValidationFailed(
            "Unknown or inactive godown(s): {}".format(", ".join(str(gid) for gid in sorted(missing_godowns)))
        )

    product_ids = {line.product_id for line in valid_lines}
    products = {
        product.id: product
        for product in db.execute(select(Product).where(Product.id.in_(product_ids))).scalars()
    }
    missing_products = product_ids - set(products)
    if missing_products:
        raise ValidationFailed(
            "Unknown product(s): {}".format(", ".join(str(pid) for pid in sorted(missing_products)))
        )

    mrp_updates = 0
    try:
        for line in valid_lines:
            product = products[line.product_id]
            if line.mrp is not None and line.mrp != product.mrp:
                product.mrp = line.mrp
                mrp_updates += 1
        rows = [
            GodownStock(
                godown_id=godown_id,
                product_id=line.product_id,
                quantity=line.quantity,
                purchase_price=line.purchase_rate,
                batch_number=line.batch_number or None,
                expiry_date=line.expiry_date,
                purchase_number=purchase_number,
            )
            for godown_id in godown_ids
            for line in valid_lines
        ]
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Purchase entry failed for godowns %s", godown_ids)
        raise

    logger.info(
        "Stock added to %d godown(s), %d product(s), %d MRP update(s)",
        len(godown_ids),
        len(valid_lines),
        mrp_updates,
    )
    return {
        "godown_count": len(godown_ids),
        "product_count": len(valid_lines),
        "batch_count": len(rows),
        "mrp_updates": mrp_updates,
    }


def purchase_history(db: Session, *, date_from=None, date_to=None, godown_id=None, limit=None):
    if limit is None:
        limit = get_settings().PURCHASE_HISTORY_LIMIT
    stmt = (
        select(
            GodownStock,
            Godown.name.label("godown_name"),
            Product.name.label("product_name"),
        )
        .outerjoin(Godown, Godown.id == GodownStock.godown_id)
        .outerjoin(Product, Product.id == GodownStock.product_id)
        .order_by(GodownStock.created_at.desc(), GodownStock.id.desc())
        .limit(limit)
    )
    if date_from:
        stmt = stmt.where(GodownStock.created_at >= datetime.combine(date_from, datetime.min.time()))
    if date_to:
        stmt = stmt.where(GodownStock.created_at <= datetime.combine(date_to, datetime.max.time()))
    if godown_id is not None:
        stmt = stmt.where(GodownStock.godown_id == godown_id)

    history = []
    for row in db.execute(stmt).all():
        batch = row.GodownStock
        history.append(
            {
                "id": batch.id,
                "quantity": batch.quantity,
                "purchase_price": batch.purchase_price,
                "batch_number": batch.batch_number,
                "expiry_date": batch.expiry_date,
                "created_at": batch.created_at,
                "godown_id": batch.godown_id,
                "product_id": batch.product_id,
                "godown_name": row.godown_name or str(batch.godown_id),
                "product_name": row.product_name or str(batch.product_id),
            }
        )
    return history


def update_batch(db: Session, batch_id, changes: dict) -> GodownStock:
    batch = db.get(GodownStock, batch_id)
    if batch is None:
        raise NotFound("Stock batch {} not found".format(batch_id))
    if "quantity" in changes and changes["quantity"] is not None and changes["quantity"] < 0:
        raise ValidationFailed("quantity must be non-negative")
    if "purchase_price" in changes and changes["purchase_price"] is not None and changes["purchase_price"] < 0:
        raise ValidationFailed("purchase_price must be non-negative")

    for field in ("quantity", "purchase_price"):
        if changes.get(field) is not None:
            setattr(batch, field, changes[field])
    for field in ("batch_number", "expiry_date"):
        if field in changes:
            setattr(batch, field, changes[field] or None)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Updating stock batch %s failed", batch_id)
        raise
    db.refresh(batch)
    return batch


def delete_batch(db: Session, batch_id) -> None:
    batch = db.get(GodownStock, batch_id)
    if batch is None:
        raise NotFound("Stock batch {} not found".format(batch_id))
    try:
        db.delete(batch)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Deleting stock batch %s failed", batch_id)
        raise


__all__ = [
    "aggregate_stock",
    "delete_batch",
    "filter_aggregates",
    "load_stock_aggregates",
    "purchase_history",
    "record_purchase",
    "stock_control",
    "stock_summary",
    "update_batch",
]
