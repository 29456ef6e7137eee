import asyncio
import re

import pytest
from sqlalchemy import func, select

from storefront import cart_service
from storefront.errors import InvalidInputError, NotFoundError
from storefront.models import CartItem


async def _rows(session_maker):
    async with session_maker() as session:
        res = await session.execute(select(CartItem).order_by(CartItem.id))
        return [(r.id, r.product_id, r.quantity) for r in res.scalars().all()]


async def test_add_creates_row_then_increments(session_maker):
    async with session_maker() as session:
        first = await cart_service.add_item(session, 1, 2)
    async with session_maker() as session:
        second = await cart_service.add_item(session, 1, 3)

    assert first.quantity == 2
    assert second.id == first.id
    assert second.product_id == 1
    assert second.quantity == 5
    assert await _rows(session_maker) == [(first.id, 1, 5)]


async def test_add_accepts_unknown_product(session_maker):
    async with session_maker() as session:
        item = await cart_service.add_item(session, 999, 1)
    assert item.product_id == 999

    # dangling rows never reach the joined projections
    async with session_maker() as session:
        cart = await cart_service.get_cart(session)
        count = await cart_service.count_items(session)
    assert cart.items == []
    assert cart.total == 0
    assert count == 0


async def test_concurrent_adds_keep_one_row_per_product(session_maker):
    async def add(qty):
        async with session_maker() as session:
            return await cart_service.add_item(session, 2, qty)

    await asyncio.gather(*(add(q) for q in (1, 2, 3, 4, 5)))

    rows = await _rows(session_maker)
    assert len(rows) == 1
    assert rows[0][1:] == (2, 15)


async def test_get_cart_empty(session_maker):
    async with session_maker() as session:
        cart = await cart_service.get_cart(session)
    assert cart.items == []
    assert cart.total == 0


async def test_get_cart_subtotals_total_and_order(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 1, 2)
    async with session_maker() as session:
        await cart_service.add_item(session, 3, 1)

    async with session_maker() as session:
        cart = await cart_service.get_cart(session)

    # newest first
    assert [i.product_id for i in cart.items] == [3, 1]
    headphones = cart.items[1]
    assert headphones.product_name == "Wireless Headphones"
    assert headphones.description == "Over-ear"
    assert headphones.subtotal == pytest.approx(159.98)
    assert cart.total == pytest.approx(sum(i.price * i.quantity for i in cart.items))
    assert cart.total == pytest.approx(199.97)


async def test_update_sets_absolute_quantity(session_maker):
    async with session_maker() as session:
        item = await cart_service.add_item(session, 1, 4)
    async with session_maker() as session:
        updated = await cart_service.update_item(session, item.id, 1)
    assert updated.quantity == 1
    assert await _rows(session_maker) == [(item.id, 1, 1)]


@pytest.mark.parametrize("quantity", [0, -3])
async def test_update_rejects_non_positive_quantity(session_maker, quantity):
    async with session_maker() as session:
        item = await cart_service.add_item(session, 1, 2)
    async with session_maker() as session:
        with pytest.raises(InvalidInputError):
            await cart_service.update_item(session, item.id, quantity)
    assert await _rows(session_maker) == [(item.id, 1, 2)]


async def test_update_missing_item(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 1, 2)
    before = await _rows(session_maker)
    async with session_maker() as session:
        with pytest.raises(NotFoundError):
            await cart_service.update_item(session, 12345, 3)
    assert await _rows(session_maker) == before


async def test_remove_twice(session_maker):
    async with session_maker() as session:
        item = await cart_service.add_item(session, 1, 1)
    async with session_maker() as session:
        await cart_service.remove_item(session, item.id)
    async with session_maker() as session:
        with pytest.raises(NotFoundError):
            await cart_service.remove_item(session, item.id)
    assert await _rows(session_maker) == []


async def test_checkout_empty_cart(session_maker):
    async with session_maker() as session:
        with pytest.raises(InvalidInputError):
            await cart_service.checkout(session, "Jane Doe", "jane@x.com")
    assert await _rows(session_maker) == []


async def test_checkout_with_only_unknown_products_leaves_cart_untouched(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 999, 2)
    before = await _rows(session_maker)
    async with session_maker() as session:
        with pytest.raises(InvalidInputError):
            await cart_service.checkout(session, "Jane Doe", "jane@x.com")
    assert await _rows(session_maker) == before


@pytest.mark.parametrize("name,email", [("", "jane@x.com"), ("Jane", "   ")])
async def test_checkout_requires_name_and_email(session_maker, name, email):
    async with session_maker() as session:
        await cart_service.add_item(session, 1, 1)
    async with session_maker() as session:
        with pytest.raises(InvalidInputError):
            await cart_service.checkout(session, name, email)
    assert len(await _rows(session_maker)) == 1


async def test_checkout_returns_receipt_and_clears_cart(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 1, 2)
    async with session_maker() as session:
        await cart_service.add_item(session, 2, 1)
    async with session_maker() as session:
        before = await cart_service.get_cart(session)

    async with session_maker() as session:
        receipt = await cart_service.checkout(session, "Jane Doe", "jane@x.com")

    assert receipt.total == pytest.approx(before.total)
    assert receipt.customer_name == "Jane Doe"
    assert receipt.customer_email == "jane@x.com"
    assert [(i.product_name, i.quantity) for i in receipt.items] == [
        ("Laptop Stand", 1),
        ("Wireless Headphones", 2),
    ]
    assert receipt.items[1].subtotal == pytest.approx(159.98)
    assert re.fullmatch(r"ORD-\d+-[0-9A-Z]{9}", receipt.order_id)
    assert receipt.timestamp.tzinfo is not None

    async with session_maker() as session:
        after = await cart_service.get_cart(session)
    assert after.items == []
    assert after.total == 0


async def test_concurrent_checkouts_settle_cart_once(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 1, 1)

    async def attempt():
        async with session_maker() as session:
            return await cart_service.checkout(session, "Jane Doe", "jane@x.com")

    results = await asyncio.gather(attempt(), attempt(), return_exceptions=True)

    receipts = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(receipts) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], InvalidInputError)
    assert receipts[0].total == pytest.approx(79.99)

    async with session_maker() as session:
        count = (await session.execute(select(func.count()).select_from(CartItem))).scalar_one()
    assert count == 0


def test_order_ids_differ():
    ids = {cart_service.generate_order_id() for _ in range(50)}
    assert len(ids) == 50


async def test_checkout_after_reading_cart_in_same_session(session_maker):
    async with session_maker() as session:
        await cart_service.add_item(session, 3, 2)
        before = await cart_service.get_cart(session)
        receipt = await cart_service.checkout(session, "Jane", "j@x.com")
        after = await cart_service.get_cart(session)

    assert receipt.total == pytest.approx(before.total)
    assert [i.product_name for i in receipt.items] == ["USB-C Hub"]
    assert after.items == []
    assert await _rows(session_maker) == []


async def test_empty_checkout_keeps_session_usable(session_maker):
    async with session_maker() as session:
        await cart_service.get_cart(session)
        with pytest.raises(InvalidInputError):
            await cart_service.checkout(session, "Jane", "j@x.com")
        item = await cart_service.add_item(session, 1, 1)
    assert await _rows(session_maker) == [(item.id, 1, 1)]
