from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.constants import SOURCE_PRODUCT, SOURCE_SELLER_PRODUCT


class CartItemBase(BaseModel):
    id: int
    name: str
    price: float = Field(ge=0)
    mrp: float = Field(default=0, ge=0)
    image: Optional[str] = None
    source: Literal["product", "seller_product"] = SOURCE_PRODUCT
    seller_id: Optional[str] = None
    coming_soon: bool = False


class CartItem(CartItemBase):
    quantity: int = 1

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_key(self):
        return (self.source, self.id)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def is_seller_item(self) -> bool:
        return self.source == SOURCE_SELLER_PRODUCT

    def to_order_line(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "mrp": self.mrp,
            "quantity": self.quantity,
            "image": self.image,
            "source": self.source,
        }
