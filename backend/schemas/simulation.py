"""Pydantic schemas for the portfolio simulation endpoint."""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from schemas.wallet import AssetValue


class SimulationAssetInput(BaseModel):
    """One hypothetical position: symbol, quantity and baseline investment."""

    symbol: str = Field(min_length=1, max_length=10)
    quantity: Decimal = Field(ge=0)
    value: Decimal = Field(ge=0)  # User-asserted original investment

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, v: str) -> str:
        """Reject whitespace-only symbols."""
        if not v.strip():
            raise ValueError("Symbol is required")
        return v.strip()


class SimulationRequest(BaseModel):
    """A point-in-time simulation request."""

    timestamp: datetime
    assets: list[SimulationAssetInput] = Field(min_length=1, max_length=10)

    @field_validator("timestamp")
    @classmethod
    def not_in_future(cls, v: datetime) -> datetime:
        """Normalize to UTC and reject future timestamps."""
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        if v > datetime.now(timezone.utc):
            raise ValueError("Date must not be in the future")
        return v


class SimulationResult(BaseModel):
    """Simulated portfolio value and best/worst performers."""

    timestamp: datetime
    total: Decimal
    best_asset: str
    best_performance: Decimal
    worst_asset: str
    worst_performance: Decimal
    assets: list[AssetValue]
