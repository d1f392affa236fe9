"""Price lookup endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_user, get_price_service
from models import User
from schemas import CurrentPriceResponse, PricePoint
from services.price_service import PriceService

router = APIRouter(prefix="/api/prices", tags=["prices"])


@router.get("/{symbol}", response_model=CurrentPriceResponse)
def get_current_price(
    symbol: str,
    user: User = Depends(get_current_user),
    price_service: PriceService = Depends(get_price_service),
):
    """Current USD price of a symbol."""
    symbol = symbol.upper()
    quote = price_service.get_current_price_by_symbol(symbol)
    return CurrentPriceResponse(symbol=symbol, price=quote.price, timestamp=quote.timestamp)


@router.get("/{symbol}/history", response_model=list[PricePoint])
def get_price_history(
    symbol: str,
    start: Optional[datetime] = Query(None, description="Range start (inclusive)"),
    end: Optional[datetime] = Query(None, description="Range end (inclusive)"),
    user: User = Depends(get_current_user),
    price_service: PriceService = Depends(get_price_service),
):
    """Daily price history of a symbol.

    Pass both ``start`` and ``end`` or neither; with neither, the provider's
    most recent history is returned.
    """
    points = price_service.get_historical_price_range(symbol, start, end)
    return [PricePoint(price=p.price, timestamp=p.timestamp) for p in points]
