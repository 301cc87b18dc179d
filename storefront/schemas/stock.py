from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GodownRead(BaseModel):
    id: int
    name: str
    godown_type: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class StockBatchRead(BaseModel):
    id: int
    godown_id: int
    product_id: int
    quantity: int
    purchase_price: float
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    purchase_number: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StockProductRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    price: float
    mrp: float
    image_url: Optional[str] = None
    is_active: bool
    stock: int

    model_config = ConfigDict(from_attributes=True)


class GodownBreakdownRead(BaseModel):
    godown: GodownRead
    quantity: int
    batches: List[StockBatchRead]


class AggregatedStockRead(BaseModel):
    product: StockProductRead
    total_quantity: int
    total_value: float
    godown_breakdown: List[GodownBreakdownRead]
    reorder_level: int
    status: str
    order_count: int
    order_quantity: int
    demand_score: float


class StockStatsRead(BaseModel):
    in_stock: int
    low_stock: int
    out_of_stock: int
    total_value: float


class StockControlRead(BaseModel):
    stats: StockStatsRead
    categories: List[str]
    items: List[AggregatedStockRead]
    most_demanded: List[AggregatedStockRead]
    slow_movers: List[AggregatedStockRead]


class PurchaseLine(BaseModel):
    product_id: int
    quantity: int = Field(ge=0)
    purchase_rate: float = Field(default=0, ge=0)
    mrp: Optional[float] = Field(default=None, ge=0)
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None


class PurchaseRequest(BaseModel):
    godown_ids: List[int]
    items: List[PurchaseLine]
    purchase_number: Optional[str] = None


class PurchaseResult(BaseModel):
    godown_count: int
    product_count: int
    batch_count: int
    mrp_updates: int


class StockHistoryRead(BaseModel):
    id: int
    quantity: int
    purchase_price: float
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    created_at: datetime
    godown_id: int
    product_id: int
    godown_name: str
    product_name: str


class StockBatchUpdate(BaseModel):
    quantity: Optional[int] = None
    purchase_price: Optional[float] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None


class DemandRankingRead(BaseModel):
    most_demanded: List[AggregatedStockRead]
    slow_movers: List[AggregatedStockRead]
