"""Service for managing Asset records."""

import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Asset
from services.price_service import AssetPrice, PriceService

logger = logging.getLogger(__name__)

STREAM_BATCH_SIZE = 100


class AssetService:
    """Centralized operations on the Asset table."""

    @staticmethod
    def page_ids(db: Session, after: Optional[str], limit: int) -> list[str]:
        """Return up to ``limit`` asset ids greater than ``after``, in order."""
        query = db.query(Asset.id)
        if after is not None:
            query = query.filter(Asset.id > after)
        return [row.id for row in query.order_by(Asset.id).limit(limit).all()]

    @staticmethod
    def stream_ids(
        session_factory: Callable[[], Session], batch_size: int = STREAM_BATCH_SIZE
    ) -> Iterator[str]:
        """Lazily yield every Asset id in id order.

        Ids are read one keyset page at a time, each page on its own
        short-lived session. No read cursor stays open while the caller
        works through a page, so callers may commit on other sessions
        between items (SQLite would otherwise report "database is locked").
        """
        after = None
        while True:
            with session_factory() as db:
                ids = AssetService.page_ids(db, after, batch_size)
            yield from ids
            if len(ids) < batch_size:
                return
            after = ids[-1]

    @staticmethod
    def find_by_id(db: Session, symbol: str) -> Optional[Asset]:
        return db.get(Asset, symbol.upper())

    @staticmethod
    def find_by_ids(db: Session, symbols: list[str]) -> list[Asset]:
        """Load all requested assets in a single query."""
        if not symbols:
            return []
        ids = {s.upper() for s in symbols}
        return db.query(Asset).filter(Asset.id.in_(ids)).all()

    @staticmethod
    def find_or_create(db: Session, symbol: str, price_service: PriceService) -> Asset:
        """Return the Asset for a symbol, creating it on first use.

        A new asset is seeded with the provider's current price; its
        created/updated timestamps are the provider-reported quote time.

        Args:
            db: Database session
            symbol: Asset symbol (case-insensitive)
            price_service: Used only when the asset does not exist yet

        Returns:
            The Asset record (flushed but not committed)

        Raises:
            PriceFetchError: If a new asset's price cannot be fetched.

        If a concurrent request inserts the same symbol first, the session
        is rolled back and the other request's row is returned.
        """
        symbol = symbol.upper()
        asset = db.get(Asset, symbol)
        if asset is not None:
            return asset

        quote = price_service.get_current_price_by_symbol(symbol)
        asset = Asset(
            id=symbol,
            usd_price=quote.price,
            created_at=quote.timestamp,
            updated_at=quote.timestamp,
        )
        db.add(asset)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            existing = db.get(Asset, symbol)
            if existing is None:
                raise
            logger.info("Asset %s was created concurrently, reusing it", symbol)
            return existing
        logger.info("Created asset: %s at %s USD", symbol, quote.price)
        return asset

    @staticmethod
    def apply_price(db: Session, symbol: str, price: AssetPrice) -> Optional[Asset]:
        """Overwrite an asset's cached USD price.

        ``updated_at`` is set to the current wall-clock time, not the quote
        time. Returns None if the asset no longer exists.
        """
        asset = db.get(Asset, symbol.upper())
        if asset is None:
            logger.warning("Asset %s disappeared before its price could be applied", symbol)
            return None
        asset.usd_price = price.price
        asset.updated_at = datetime.now(timezone.utc)
        db.flush()
        return asset
