"""Pydantic schemas for price lookup endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class PricePoint(BaseModel):
    """A price at a point in time."""

    price: Decimal
    timestamp: datetime


class CurrentPriceResponse(PricePoint):
    """Current price of a symbol."""

    symbol: str
