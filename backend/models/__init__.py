"""SQLAlchemy ORM models."""

from .asset import Asset
from .user import User
from .user_asset import UserAsset

__all__ = ["Asset", "User", "UserAsset"]
