from sqlalchemy import (
    Column, Integer, String, Text, DateTime, func,
    Numeric, CheckConstraint, UniqueConstraint, Index
)
from .database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)         # exact money
    image_url = Column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_nonneg"),
    )


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    # no foreign key: the cart accepts a product id without checking the catalog
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("product_id", name="uq_cart_items_product"),  # one row per product, target of the add upsert
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_pos"),
        Index("ix_cart_items_created", "created_at"),
    )
