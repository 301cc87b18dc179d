from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.dependencies import get_db
from storefront.schemas.product import CatalogProductRead, SectionGroupRead
from storefront.services.catalog_service import area_products, section_products

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/area-products", response_model=List[CatalogProductRead])
def list_area_products(
    user_id: str = Query(..., description="Customer user id"),
    db: Session = Depends(get_db),
):
    return area_products(db, user_id)


@router.get("/sections", response_model=List[SectionGroupRead])
def list_sections(db: Session = Depends(get_db)):
    return section_products(db)


__all__ = ["router"]
