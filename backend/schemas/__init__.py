"""Pydantic schemas for API request/response validation."""

from schemas.auth import UserAuthRequest, UserLoginResponse, UserRegisterResponse
from schemas.price import CurrentPriceResponse, PricePoint
from schemas.simulation import SimulationAssetInput, SimulationRequest, SimulationResult
from schemas.wallet import AssetValue, Balance, WalletAssetInput, WalletInfo

__all__ = [
    "AssetValue",
    "Balance",
    "CurrentPriceResponse",
    "PricePoint",
    "SimulationAssetInput",
    "SimulationRequest",
    "SimulationResult",
    "UserAuthRequest",
    "UserLoginResponse",
    "UserRegisterResponse",
    "WalletAssetInput",
    "WalletInfo",
]
