from typing import List, Optional

from pydantic import BaseModel


class CatalogProductRead(BaseModel):
    id: int
    name: str
    price: float
    mrp: float
    discount_rate: float
    image_url: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    section: Optional[str] = None
    stock: int
    coming_soon: bool = False
    source: str
    seller_id: Optional[str] = None


class SectionGroupRead(BaseModel):
    section: str
    label: str
    items: List[CatalogProductRead]
