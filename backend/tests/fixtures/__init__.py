"""Test fixtures and sample data."""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from models import Asset, User, UserAsset
from sqlalchemy.orm import Session

from services.user_service import UserService, hash_password

TEST_PASSWORD = "correct-horse-battery"

PRICE_TIMESTAMP = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def create_asset(db: Session, symbol: str, usd_price: Decimal) -> Asset:
    """Create an Asset row priced at ``usd_price``.

    This is a helper function (not a fixture) for tests that need several
    assets.
    """
    asset = Asset(
        id=symbol,
        usd_price=usd_price,
        created_at=PRICE_TIMESTAMP,
        updated_at=PRICE_TIMESTAMP,
    )
    db.add(asset)
    db.flush()
    return asset


def create_holding(
    db: Session, user: User, symbol: str, quantity: Decimal, purchase_price: Decimal
) -> UserAsset:
    """Create a UserAsset for an existing Asset."""
    holding = UserAsset(
        user_id=user.id,
        asset_id=symbol,
        quantity=quantity,
        purchase_price=purchase_price,
    )
    db.add(holding)
    db.flush()
    return holding


def auth_headers(user: User) -> dict[str, str]:
    """Bearer headers for requests made as ``user``."""
    return {"Authorization": f"Bearer {UserService.create_access_token(user)}"}


@pytest.fixture
def user(db: Session) -> User:
    """Create a test user."""
    u = User(email="alice@example.com", password_hash=hash_password(TEST_PASSWORD))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second user."""
    u = User(email="bob@example.com", password_hash=hash_password(TEST_PASSWORD))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def btc_asset(db: Session) -> Asset:
    """Create a BTC asset."""
    asset = create_asset(db, "BTC", Decimal("95000.00"))
    db.commit()
    return asset


@pytest.fixture
def eth_asset(db: Session) -> Asset:
    """Create an ETH asset."""
    asset = create_asset(db, "ETH", Decimal("3500.00"))
    db.commit()
    return asset


@pytest.fixture
def btc_holding(db: Session, user: User, btc_asset: Asset) -> UserAsset:
    """Give the test user 0.5 BTC bought at 60000."""
    holding = create_holding(db, user, "BTC", Decimal("0.5"), Decimal("60000"))
    db.commit()
    return holding
