# storefront/checkout.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from . import cart_service
from .database import get_session
from .schemas import CheckoutRequest, Receipt

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


# Mock checkout: empties the cart and returns a receipt, nothing is charged or stored
@router.post("", response_model=Receipt)
async def process_checkout(payload: CheckoutRequest, session: AsyncSession = Depends(get_session)):
    return await cart_service.checkout(session, payload.name, payload.email)
