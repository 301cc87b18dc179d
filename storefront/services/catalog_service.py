from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.constants import SECTION_LABELS, SELLER_SECTION, SOURCE_PRODUCT, SOURCE_SELLER_PRODUCT
from storefront.models.product import Product
from storefront.models.seller_product import SellerProduct
from storefront.models.stock import GodownStock
from storefront.services.geography_service import eligible_godown_ids_for_user


def _product_row(product, *, source, section, seller_id=None):
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "mrp": product.mrp,
        "discount_rate": product.discount_rate,
        "image_url": product.image_url,
        "description": product.description,
        "category": product.category,
        "section": section,
        "stock": product.stock,
        "coming_soon": bool(product.coming_soon),
        "source": source,
        "seller_id": seller_id,
    }


def area_products(db: Session, user_id):
    """Products a customer can buy from the godowns serving their ward."""
    godown_ids = eligible_godown_ids_for_user(db, user_id)
    if not godown_ids:
        return []

    stocked_ids = (
        db.execute(
            select(GodownStock.product_id)
            .where(GodownStock.godown_id.in_(godown_ids), GodownStock.quantity > 0)
            .distinct()
        )
        .scalars()
        .all()
    )

    results = []
    if stocked_ids:
        products = (
            db.execute(
                select(Product)
                .where(Product.id.in_(stocked_ids), Product.is_active.is_(True))
                .order_by(Product.name)
            )
            .scalars()
            .all()
        )
        results.extend(
            _product_row(product, source=SOURCE_PRODUCT, section=product.section)
            for product in products
        )

    seller_products = (
        db.execute(
            select(SellerProduct)
            .where(
                SellerProduct.area_godown_id.in_(godown_ids),
                SellerProduct.is_active.is_(True),
                SellerProduct.is_approved.is_(True),
                SellerProduct.stock > 0,
            )
            .order_by(SellerProduct.name)
        )
        .scalars()
        .all()
    )
    results.extend(
        _product_row(
            product,
            source=SOURCE_SELLER_PRODUCT,
            section=SELLER_SECTION,
            seller_id=product.seller_id,
        )
        for product in seller_products
    )
    return results


def section_products(db: Session):
    products = (
        db.execute(
            select(Product)
            .where(
                Product.is_active.is_(True),
                Product.section.is_not(None),
                Product.section != "",
            )
            .order_by(Product.name)
        )
        .scalars()
        .all()
    )
    grouped = {}
    for product in products:
        section = product.section
        if section not in grouped:
            grouped[section] = {
                "section": section,
                "label": SECTION_LABELS.get(section, section),
                "items": [],
            }
        grouped[section]["items"].append(
            _product_row(product, source=SOURCE_PRODUCT, section=section)
        )
    return list(grouped.values())


__all__ = ["area_products", "section_products"]
