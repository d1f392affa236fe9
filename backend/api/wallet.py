"""Wallet API endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from api.dependencies import get_current_user, get_price_service
from database import get_db
from models import User
from schemas import WalletAssetInput, WalletInfo
from services.price_service import PriceService
from services.wallet_service import WalletService

router = APIRouter(prefix="/api/wallet", tags=["wallet"])


@router.get("/info", response_model=WalletInfo)
def get_wallet_info(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Original and current valuation of the caller's wallet."""
    return WalletService.info(db, user)


@router.post("/asset")
def add_asset(
    data: WalletAssetInput,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    price_service: PriceService = Depends(get_price_service),
):
    """Add a holding. Fails with 409 if the symbol is already held."""
    WalletService.add_asset(
        db, user, data.symbol, data.quantity, data.price, price_service
    )
    return Response(status_code=200)


@router.put("/asset")
def update_asset(
    data: WalletAssetInput,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Overwrite quantity and purchase price of an existing holding."""
    WalletService.update_asset(db, user, data.symbol, data.quantity, data.price)
    return Response(status_code=200)
