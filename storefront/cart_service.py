"""Operations on the single shared cart.

Every operation touches the cart store through one statement, or, for
checkout, one transaction, so concurrent requests are serialized by the
database instead of by the caller:

- ``add_item`` is an INSERT ... ON CONFLICT (product_id) DO UPDATE upsert;
- ``update_item`` and ``remove_item`` are single UPDATE/DELETE ... RETURNING;
- ``checkout`` consumes the cart with DELETE ... RETURNING and rolls back when
  nothing purchasable was in it.

Totals are computed with ``Decimal`` and never stored.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import InvalidInputError, NotFoundError
from .models import CartItem, Product
from .schemas import (
    CartItemDetails,
    CartItemOut,
    CartSummary,
    Receipt,
    ReceiptItem,
)

logger = structlog.get_logger(__name__)

ORDER_ID_ALPHABET = string.digits + string.ascii_uppercase
ORDER_ID_SUFFIX_LENGTH = 9

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _upsert_insert(session: AsyncSession):
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"cart upsert is not supported on {dialect!r}") from None


def generate_order_id() -> str:
    """Best-effort unique order id, e.g. ``ORD-1718000000000-4K2ZQ9XA1``."""
    suffix = "".join(secrets.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_SUFFIX_LENGTH))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


async def add_item(session: AsyncSession, product_id: int, quantity: int) -> CartItemOut:
    """Add ``quantity`` of a product, incrementing its existing row if any."""
    table = CartItem.__table__
    stmt = _upsert_insert(session)(table).values(product_id=product_id, quantity=quantity)
    stmt = stmt.on_conflict_do_update(
        index_elements=["product_id"],
        set_={"quantity": table.c.quantity + stmt.excluded.quantity},
    ).returning(table.c.id, table.c.product_id, table.c.quantity)

    result = await session.execute(stmt)
    row = result.one()
    await session.commit()

    logger.info("Cart item added", item_id=row.id, product_id=row.product_id, quantity=row.quantity)
    return CartItemOut(id=row.id, product_id=row.product_id, quantity=row.quantity)


async def get_cart(session: AsyncSession) -> CartSummary:
    """All cart lines with product details, newest first, plus the grand total."""
    result = await session.execute(
        select(
            CartItem.id,
            CartItem.product_id,
            Product.name,
            Product.price,
            Product.description,
            Product.image_url,
            CartItem.quantity,
        )
        .join(Product, Product.id == CartItem.product_id)
        .order_by(CartItem.created_at.desc(), CartItem.id.desc())
    )

    items: List[CartItemDetails] = []
    total = Decimal("0")
    for row in result.all():
        price = Decimal(row.price)
        subtotal = price * row.quantity
        total += subtotal
        items.append(
            CartItemDetails(
                id=row.id,
                product_id=row.product_id,
                product_name=row.name,
                price=float(price),
                description=row.description,
                image_url=row.image_url,
                quantity=row.quantity,
                subtotal=float(subtotal),
            )
        )
    return CartSummary(items=items, total=float(total))


async def count_items(session: AsyncSession) -> int:
    """Number of cart lines that refer to a catalog product."""
    result = await session.execute(
        select(func.count())
        .select_from(CartItem)
        .join(Product, Product.id == CartItem.product_id)
    )
    return result.scalar_one()


async def update_item(session: AsyncSession, item_id: int, quantity: int) -> CartItemOut:
    """Set the absolute quantity of one cart line."""
    if quantity <= 0:
        raise InvalidInputError("quantity must be greater than 0")

    result = await session.execute(
        update(CartItem)
        .where(CartItem.id == item_id)
        .values(quantity=quantity)
        .returning(CartItem.id, CartItem.product_id, CartItem.quantity)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("cart item not found")
    await session.commit()

    logger.info("Cart item updated", item_id=row.id, quantity=row.quantity)
    return CartItemOut(id=row.id, product_id=row.product_id, quantity=row.quantity)


async def remove_item(session: AsyncSession, item_id: int) -> None:
    result = await session.execute(
        delete(CartItem).where(CartItem.id == item_id).returning(CartItem.id)
    )
    if result.one_or_none() is None:
        raise NotFoundError("cart item not found")
    await session.commit()

    logger.info("Cart item removed", item_id=item_id)


async def checkout(session: AsyncSession, customer_name: str, customer_email: str) -> Receipt:
    """Consume the whole cart and return a mock receipt.

    The cart rows are deleted and read back in the same transaction, so two
    concurrent checkouts cannot both settle the same items: the later one
    finds the cart empty. An empty cart rolls the transaction back and raises
    ``InvalidInputError``.
    """
    if not customer_name.strip() or not customer_email.strip():
        raise InvalidInputError("name and email are required")

    deleted = await session.execute(
        delete(CartItem).returning(
            CartItem.id, CartItem.product_id, CartItem.quantity, CartItem.created_at
        )
    )
    rows = deleted.all()

    products = {}
    if rows:
        res = await session.execute(
            select(Product).where(Product.id.in_({r.product_id for r in rows}))
        )
        products = {p.id: p for p in res.scalars().all()}

    # rows without a catalog product never show in the cart, they are dropped silently
    purchased = [r for r in rows if r.product_id in products]
    if not purchased:
        await session.rollback()
        raise InvalidInputError("cart is empty")
    purchased.sort(key=lambda r: (r.created_at, r.id), reverse=True)

    items: List[ReceiptItem] = []
    total = Decimal("0")
    for r in purchased:
        product = products[r.product_id]
        price = Decimal(product.price)
        subtotal = price * r.quantity
        total += subtotal
        items.append(
            ReceiptItem(
                product_name=product.name,
                quantity=r.quantity,
                price=float(price),
                subtotal=float(subtotal),
            )
        )
    await session.commit()

    receipt = Receipt(
        order_id=generate_order_id(),
        customer_name=customer_name,
        customer_email=customer_email,
        items=items,
        total=float(total),
        timestamp=datetime.now(timezone.utc),
    )
    logger.info(
        "Checkout completed",
        order_id=receipt.order_id,
        lines=len(items),
        total=str(total),
    )
    return receipt
