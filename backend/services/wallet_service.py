"""Service for managing a user's wallet holdings."""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import User, UserAsset
from schemas.wallet import WalletInfo
from services import wallet_balance_calculator
from services.asset_service import AssetService
from services.exceptions import AssetAlreadyExistsError, AssetNotFoundError
from services.price_service import PriceService

logger = logging.getLogger(__name__)


class WalletService:
    """CRUD operations on a user's holdings plus wallet valuation."""

    @staticmethod
    def get_holding(db: Session, user: User, symbol: str) -> Optional[UserAsset]:
        return db.get(UserAsset, (user.id, symbol.upper()))

    @staticmethod
    def get_holdings(db: Session, user: User) -> list[UserAsset]:
        return (
            db.query(UserAsset)
            .filter(UserAsset.user_id == user.id)
            .order_by(UserAsset.created_at, UserAsset.asset_id)
            .all()
        )

    @staticmethod
    def add_asset(
        db: Session,
        user: User,
        symbol: str,
        quantity: Decimal,
        price: Decimal,
        price_service: PriceService,
    ) -> UserAsset:
        """Add a new holding to the user's wallet.

        The Asset row is created on first use, seeded with the provider's
        current price.

        Args:
            db: Database session
            user: Wallet owner
            symbol: Asset symbol (case-insensitive)
            quantity: Units held
            price: Purchase price per unit in USD
            price_service: Used to seed a new Asset

        Returns:
            The created UserAsset

        Raises:
            AssetAlreadyExistsError: If the user already holds the symbol.
            PriceFetchError: If a new Asset's price cannot be fetched.
        """
        symbol = symbol.upper()
        if WalletService.get_holding(db, user, symbol) is not None:
            raise AssetAlreadyExistsError(f"Asset {symbol} already exists in wallet")

        asset = AssetService.find_or_create(db, symbol, price_service)
        holding = UserAsset(
            user_id=user.id,
            asset_id=asset.id,
            quantity=quantity,
            purchase_price=price,
        )
        db.add(holding)
        try:
            db.commit()
        except IntegrityError as exc:
            # Another request added the same holding after our check
            db.rollback()
            raise AssetAlreadyExistsError(f"Asset {symbol} already exists in wallet") from exc
        db.refresh(holding)
        logger.info("Added %s to wallet of user %s", symbol, user.id)
        return holding

    @staticmethod
    def update_asset(
        db: Session,
        user: User,
        symbol: str,
        quantity: Decimal,
        price: Decimal,
    ) -> UserAsset:
        """Overwrite the quantity and purchase price of an existing holding.

        Raises:
            AssetNotFoundError: If the user does not hold the symbol.
        """
        symbol = symbol.upper()
        holding = WalletService.get_holding(db, user, symbol)
        if holding is None:
            raise AssetNotFoundError(f"No user asset found for symbol: {symbol}")

        holding.quantity = quantity
        holding.purchase_price = price
        db.commit()
        db.refresh(holding)
        logger.info("Updated %s in wallet of user %s", symbol, user.id)
        return holding

    @staticmethod
    def info(db: Session, user: User) -> WalletInfo:
        """Original and current valuations of the user's wallet."""
        holdings = WalletService.get_holdings(db, user)
        return WalletInfo(
            id=user.id,
            original=wallet_balance_calculator.original_balance(holdings),
            current=wallet_balance_calculator.current_balance(db, holdings),
        )
