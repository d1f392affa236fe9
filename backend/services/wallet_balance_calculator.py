"""Original and current valuations of a set of holdings."""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy.orm import Session

from models import UserAsset
from schemas.wallet import AssetValue, Balance
from services.asset_service import AssetService
from services.exceptions import AssetNotFoundError


def original_balance(holdings: Sequence[UserAsset]) -> Balance:
    """Value holdings at their purchase prices."""
    assets = [
        AssetValue(
            symbol=h.asset_id,
            quantity=h.quantity,
            price=h.purchase_price,
            value=h.quantity * h.purchase_price,
        )
        for h in holdings
    ]
    return Balance(total=sum((a.value for a in assets), Decimal("0")), assets=assets)


def current_balance(db: Session, holdings: Sequence[UserAsset]) -> Balance:
    """Value holdings at the cached asset prices.

    All referenced assets are loaded in one query. Each entry carries the
    time its price was last refreshed.

    Raises:
        AssetNotFoundError: If a holding references an asset with no record.
    """
    by_id = {
        asset.id: asset
        for asset in AssetService.find_by_ids(db, [h.asset_id for h in holdings])
    }

    assets = []
    for holding in holdings:
        asset = by_id.get(holding.asset_id.upper())
        if asset is None:
            raise AssetNotFoundError(f"No asset found for symbol: {holding.asset_id}")
        assets.append(
            AssetValue(
                symbol=holding.asset_id,
                quantity=holding.quantity,
                price=asset.usd_price,
                value=holding.quantity * asset.usd_price,
                timestamp=asset.updated_at,
            )
        )
    return Balance(total=sum((a.value for a in assets), Decimal("0")), assets=assets)
