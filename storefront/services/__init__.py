from storefront.services.cart_service import Cart, InMemoryCartStorage, JsonFileCartStorage
from storefront.services.catalog_service import area_products, section_products
from storefront.services.checkout_service import apply_coupon, checkout_cart, place_orders
from storefront.services.fulfillment_service import advance_order, confirm_seller_order, wallet_balance
from storefront.services.geography_service import resolve_eligible_godown_ids
from storefront.services.stock_service import aggregate_stock, record_purchase, stock_control

__all__ = [
    "Cart",
    "InMemoryCartStorage",
    "JsonFileCartStorage",
    "advance_order",
    "aggregate_stock",
    "apply_coupon",
    "area_products",
    "checkout_cart",
    "confirm_seller_order",
    "place_orders",
    "record_purchase",
    "resolve_eligible_godown_ids",
    "section_products",
    "stock_control",
    "wallet_balance",
]
