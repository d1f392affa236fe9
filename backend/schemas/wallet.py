"""Pydantic schemas for wallet endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class WalletAssetInput(BaseModel):
    """Schema for adding or updating a holding."""

    symbol: str = Field(min_length=1, max_length=10)
    price: Decimal = Field(ge=0)  # Purchase price in USD
    quantity: Decimal = Field(ge=0)

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, v: str) -> str:
        """Reject whitespace-only symbols."""
        if not v.strip():
            raise ValueError("Symbol is required")
        return v.strip()


class AssetValue(BaseModel):
    """Valuation of one asset position."""

    symbol: str
    quantity: Decimal
    price: Decimal
    value: Decimal
    timestamp: Optional[datetime] = None  # Set for current-price valuations


class Balance(BaseModel):
    """Total value and per-asset breakdown of a portfolio."""

    total: Decimal
    assets: list[AssetValue]


class WalletInfo(BaseModel):
    """Original (purchase-time) and current valuations of a user's wallet."""

    id: str
    original: Balance
    current: Balance
