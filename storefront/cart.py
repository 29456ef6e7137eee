# storefront/cart.py
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from . import cart_service
from .database import get_session
from .schemas import CartAddRequest, CartCount, CartItemOut, CartSummary, CartUpdateRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])

# cart_items.id is a 32-bit INTEGER column
MAX_ITEM_ID = 2**31 - 1


@router.get("", response_model=CartSummary)
async def get_cart(session: AsyncSession = Depends(get_session)):
    return await cart_service.get_cart(session)


@router.get("/count", response_model=CartCount)
async def get_cart_count(session: AsyncSession = Depends(get_session)):
    # badge in the page header: a failed read shows 0 instead of breaking the page
    try:
        count = await cart_service.count_items(session)
    except SQLAlchemyError:
        logger.warning("Cart count unavailable", exc_info=True)
        count = 0
    return {"count": count}


@router.post("", response_model=CartItemOut, status_code=status.HTTP_201_CREATED)
async def add_to_cart(payload: CartAddRequest, session: AsyncSession = Depends(get_session)):
    return await cart_service.add_item(session, payload.product_id, payload.quantity)


@router.put("/{item_id}", response_model=CartItemOut)
async def update_cart_item(
    payload: CartUpdateRequest,
    item_id: int = Path(..., le=MAX_ITEM_ID),
    session: AsyncSession = Depends(get_session),
):
    return await cart_service.update_item(session, item_id, payload.quantity)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_cart_item(
    item_id: int = Path(..., le=MAX_ITEM_ID),
    session: AsyncSession = Depends(get_session),
):
    await cart_service.remove_item(session, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
