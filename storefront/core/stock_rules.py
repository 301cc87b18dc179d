import math

from storefront.core.constants import SOURCE_SELLER_PRODUCT, STOCK_IN, STOCK_LOW, STOCK_OUT

DEFAULT_REORDER_FLOOR = 5
DEFAULT_AVERAGING_DAYS = 30
DEFAULT_SAFETY_DAYS = 7


def reorder_level(
    total_quantity_demanded,
    *,
    floor=DEFAULT_REORDER_FLOOR,
    averaging_days=DEFAULT_AVERAGING_DAYS,
    safety_days=DEFAULT_SAFETY_DAYS,
):
    """Safety stock for `safety_days` at the flat average daily demand.

    The average is taken over a fixed `averaging_days` window regardless of
    how far back the sampled orders actually go.
    """
    avg_daily = (total_quantity_demanded or 0) / max(averaging_days, 1)
    return max(floor, math.ceil(avg_daily * safety_days))


def classify_stock_status(total_quantity, level):
    if total_quantity <= 0:
        return STOCK_OUT
    if total_quantity <= level:
        return STOCK_LOW
    return STOCK_IN


def demand_score(order_count, total_quantity):
    return order_count + total_quantity * 0.5


def _line_quantity(item):
    value = item.get("quantity")
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return 1
    return quantity or 1


def tally_demand(order_item_lists):
    """Count orders and units per product id across order item snapshots.

    Seller lines and lines without an id are ignored; a line with a missing
    or zero quantity counts as one unit.
    """
    demand = {}
    for items in order_item_lists:
        if not isinstance(items, list):
            continue
        for item in items:
            if not isinstance(item, dict):
                continue
            product_id = item.get("id")
            if product_id is None or item.get("source") == SOURCE_SELLER_PRODUCT:
                continue
            entry = demand.setdefault(product_id, {"count": 0, "quantity": 0})
            entry["count"] += 1
            entry["quantity"] += _line_quantity(item)
    return demand
