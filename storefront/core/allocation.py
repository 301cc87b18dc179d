from dataclasses import dataclass, field
from typing import Optional

from storefront.core.constants import (
    STATUS_PENDING,
    STATUS_SELLER_CONFIRMATION_PENDING,
    UNKNOWN_SELLER,
)


@dataclass
class OrderDraft:
    seller_key: Optional[str]
    status: str
    items: list = field(default_factory=list)
    subtotal: float = 0.0
    coupon_share: float = 0.0
    wallet_share: float = 0.0
    fee_share: float = 0.0
    total: float = 0.0

    @property
    def seller_id(self):
        if self.seller_key is None or self.seller_key == UNKNOWN_SELLER:
            return None
        return self.seller_key

    @property
    def is_platform(self) -> bool:
        return self.seller_key is None


def _cents(value: float) -> float:
    return round(value, 2)


def cart_subtotal(items) -> float:
    return sum(item.price * item.quantity for item in items)


def clamp_wallet_deduction(wallet_deduction, subtotal, platform_fee, coupon_discount):
    payable = max(0.0, subtotal + platform_fee - coupon_discount)
    return min(max(0.0, wallet_deduction), payable)


def apportion_platform_fee(platform_fee, has_platform, seller_count):
    """Split the flat fee between the platform order and the seller orders.

    Returns (platform_share, [seller_share, ...]). When both party types are
    present each side carries half, the seller half divided evenly across
    seller orders. Shares are rounded to cents; the rounding remainder lands
    on the last share so the shares always sum to `platform_fee`.
    """
    if not has_platform and seller_count == 0:
        return 0.0, []

    if has_platform and seller_count:
        platform_share = platform_fee / 2
        seller_pool = platform_fee / 2
    elif has_platform:
        platform_share = platform_fee
        seller_pool = 0.0
    else:
        platform_share = 0.0
        seller_pool = platform_fee

    shares = []
    if has_platform:
        shares.append(_cents(platform_share))
    shares.extend(_cents(seller_pool / seller_count) for _ in range(seller_count))
    shares[-1] = _cents(platform_fee - sum(shares[:-1]))

    if has_platform:
        return shares[0], shares[1:]
    return 0.0, shares


def group_cart(items):
    """Partition cart lines into platform lines and seller lines by seller."""
    platform_items = []
    seller_groups = {}
    for item in items:
        if item.is_seller_item:
            seller_groups.setdefault(item.seller_id or UNKNOWN_SELLER, []).append(item)
        else:
            platform_items.append(item)
    return platform_items, seller_groups


def split_cart(items, *, platform_fee, coupon_discount=0.0, wallet_deduction=0.0):
    """Turn one cart into one order draft per fulfillment party.

    Coupon and wallet amounts are shared in proportion to each order's
    subtotal; the platform fee is apportioned by `apportion_platform_fee`.
    """
    items = list(items)
    subtotal = cart_subtotal(items)
    wallet_deduction = clamp_wallet_deduction(
        wallet_deduction, subtotal, platform_fee, coupon_discount
    )
    platform_items, seller_groups = group_cart(items)
    platform_fee_share, seller_fee_shares = apportion_platform_fee(
        platform_fee, bool(platform_items), len(seller_groups)
    )

    groups = []
    if platform_items:
        groups.append((None, STATUS_PENDING, platform_items, platform_fee_share))
    for (seller_key, seller_items), fee_share in zip(seller_groups.items(), seller_fee_shares):
        groups.append((seller_key, STATUS_SELLER_CONFIRMATION_PENDING, seller_items, fee_share))

    drafts = []
    for seller_key, status, group_items, fee_share in groups:
        group_subtotal = cart_subtotal(group_items)
        proportion = group_subtotal / subtotal if subtotal else 0.0
        coupon_share = coupon_discount * proportion
        wallet_share = wallet_deduction * proportion
        total = max(0.0, group_subtotal - coupon_share - wallet_share) + fee_share
        drafts.append(
            OrderDraft(
                seller_key=seller_key,
                status=status,
                items=group_items,
                subtotal=group_subtotal,
                coupon_share=_cents(coupon_share),
                wallet_share=_cents(wallet_share),
                fee_share=fee_share,
                total=_cents(total),
            )
        )
    return drafts


__all__ = [
    "OrderDraft",
    "apportion_platform_fee",
    "cart_subtotal",
    "clamp_wallet_deduction",
    "group_cart",
    "split_cart",
]
