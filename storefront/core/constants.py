GODOWN_MICRO = "micro"
GODOWN_LOCAL = "local"
GODOWN_AREA = "area"
GODOWN_TYPES = (GODOWN_MICRO, GODOWN_LOCAL, GODOWN_AREA)

SOURCE_PRODUCT = "product"
SOURCE_SELLER_PRODUCT = "seller_product"
UNKNOWN_SELLER = "unknown"

STATUS_SELLER_CONFIRMATION_PENDING = "seller_confirmation_pending"
STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_PICKUP = "pickup"
STATUS_SHIPPED = "shipped"
STATUS_DELIVERED = "delivered"
STATUS_FLOW = (
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_PICKUP,
    STATUS_SHIPPED,
    STATUS_DELIVERED,
)

STOCK_IN = "in_stock"
STOCK_LOW = "low_stock"
STOCK_OUT = "out_of_stock"
STOCK_STATUSES = (STOCK_IN, STOCK_LOW, STOCK_OUT)

TXN_CREDIT = "credit"
TXN_DEBIT = "debit"

SECTION_LABELS = {
    "featured": "Featured Products",
    "most_ordered": "Most Ordered Items",
    "new_arrivals": "New Arrivals",
    "low_budget": "Low Budget Picks",
    "sponsors": "Sponsors",
}
SELLER_SECTION = "seller"

