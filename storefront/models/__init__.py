import importlib

from storefront.models.checkout import CheckoutKey
from storefront.models.delivery import DeliveryStaffWardAssignment
from storefront.models.godown import Godown, GodownLocalBody, GodownWard
from storefront.models.locations import District, LocalBody
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.profile import Profile
from storefront.models.seller_product import SellerProduct
from storefront.models.stock import GodownStock
from storefront.models.wallet import DeliveryStaffWallet, DeliveryStaffWalletTransaction


def import_all_models() -> None:
    for module_name in (
        "storefront.models.checkout",
        "storefront.models.delivery",
        "storefront.models.godown",
        "storefront.models.locations",
        "storefront.models.order",
        "storefront.models.product",
        "storefront.models.profile",
        "storefront.models.seller_product",
        "storefront.models.stock",
        "storefront.models.wallet",
    ):
        importlib.import_module(module_name)


__all__ = [
    "CheckoutKey",
    "DeliveryStaffWallet",
    "DeliveryStaffWalletTransaction",
    "DeliveryStaffWardAssignment",
    "District",
    "Godown",
    "GodownLocalBody",
    "GodownStock",
    "GodownWard",
    "LocalBody",
    "Order",
    "Product",
    "Profile",
    "SellerProduct",
    "import_all_models",
]
