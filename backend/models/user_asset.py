"""UserAsset model - a user's position in one asset."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base


class UserAsset(Base):
    """A holding: quantity and purchase price of one asset for one user.

    The composite primary key (user_id, asset_id) allows at most one
    holding per user and symbol.
    """

    __tablename__ = "user_assets"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    asset_id = Column(
        String(10), ForeignKey("assets.id", ondelete="RESTRICT"), primary_key=True
    )
    quantity = Column(Numeric(20, 8), nullable=False, default=Decimal("0"))
    purchase_price = Column(Numeric(20, 8), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user = relationship("User", back_populates="holdings")
    asset = relationship("Asset", back_populates="holdings")
