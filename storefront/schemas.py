# storefront/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case accepted on input as well
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Product
class ProductOut(CamelModel):
    id: int
    name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductList(CamelModel):
    products: List[ProductOut]


# Cart item
class CartAddRequest(CamelModel):
    product_id: int
    quantity: int = 1


class CartUpdateRequest(CamelModel):
    quantity: int


class CartItemOut(CamelModel):
    id: int
    product_id: int
    quantity: int


class CartItemDetails(CamelModel):
    id: int
    product_id: int
    product_name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int
    subtotal: float


# Cart summary (single response format of GET /api/cart)
class CartSummary(CamelModel):
    items: List[CartItemDetails]
    total: float


class CartCount(CamelModel):
    count: int


# Checkout
class CheckoutRequest(CamelModel):
    name: str
    email: str


class ReceiptItem(CamelModel):
    product_name: str
    quantity: int
    price: float
    subtotal: float


class Receipt(CamelModel):
    order_id: str
    customer_name: str
    customer_email: str
    items: List[ReceiptItem]
    total: float
    timestamp: datetime
