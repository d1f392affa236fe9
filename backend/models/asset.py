"""Asset model - one row per symbol held by any user."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, Numeric, String
from sqlalchemy.orm import relationship

from database import Base


class Asset(Base):
    """A tradeable crypto asset with its last known USD price.

    The primary key is the upper-cased symbol (e.g. "BTC"). Rows are created
    the first time any user adds the symbol and are only mutated by the
    price refresh job afterwards.
    """

    __tablename__ = "assets"

    id = Column(String(10), primary_key=True)
    usd_price = Column(Numeric(20, 8), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    holdings = relationship("UserAsset", back_populates="asset")
