"""Demo catalog.

The catalog is read-only for the API, so the products come from here: on
startup (STOREFRONT_SEED_CATALOG) or from ``scripts/db_seed.py``.
"""
from decimal import Decimal

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Product

logger = structlog.get_logger(__name__)

# Fixed catalog so the demo always looks the same
DEMO_PRODUCTS = [
    {
        "name": "Wireless Headphones",
        "price": Decimal("79.99"),
        "description": "Over-ear Bluetooth headphones with active noise cancellation and 30 hours of battery.",
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
    },
    {
        "name": "Smart Watch",
        "price": Decimal("199.99"),
        "description": "Fitness tracking, heart-rate monitor and notifications on your wrist.",
        "image_url": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500",
    },
    {
        "name": "Laptop Stand",
        "price": Decimal("49.99"),
        "description": "Adjustable aluminium stand for laptops up to 17 inches.",
        "image_url": "https://images.unsplash.com/photo-1527864550417-7fd91fc51a46?w=500",
    },
    {
        "name": "Mechanical Keyboard",
        "price": Decimal("129.99"),
        "description": "Hot-swappable switches, RGB backlight, USB-C.",
        "image_url": "https://images.unsplash.com/photo-1511467687858-23d96c32e4ae?w=500",
    },
    {
        "name": "USB-C Hub",
        "price": Decimal("39.99"),
        "description": "7-in-1 hub with HDMI, SD card reader and 100W power delivery.",
        "image_url": "https://images.unsplash.com/photo-1625842268584-8f3296236761?w=500",
    },
    {
        "name": "Desk Lamp",
        "price": Decimal("34.99"),
        "description": "LED lamp with adjustable brightness and colour temperature.",
        "image_url": "https://images.unsplash.com/photo-1507473885765-e6ed057f782c?w=500",
    },
]


async def seed_products(session: AsyncSession, products=None) -> int:
    """Insert the demo products into an empty catalog. Returns how many were added."""
    existing = (await session.execute(select(func.count()).select_from(Product))).scalar_one()
    if existing:
        logger.info("Catalog already seeded", products=existing)
        return 0

    rows = DEMO_PRODUCTS if products is None else products
    session.add_all(Product(**row) for row in rows)
    await session.commit()
    logger.info("Catalog seeded", products=len(rows))
    return len(rows)
