"""Tests for the wallet balance calculator."""

from decimal import Decimal

import pytest

from models import UserAsset
from services.asset_service import AssetService
from services.exceptions import AssetNotFoundError
from services.wallet_balance_calculator import current_balance, original_balance
from tests.fixtures import PRICE_TIMESTAMP, create_asset, create_holding


class TestOriginalBalance:
    def test_values_at_purchase_price(self):
        holdings = [
            UserAsset(asset_id="BTC", quantity=Decimal("0.5"), purchase_price=Decimal("60000")),
            UserAsset(asset_id="ETH", quantity=Decimal("2"), purchase_price=Decimal("1800.50")),
        ]

        balance = original_balance(holdings)

        assert balance.total == Decimal("33601.00")
        assert [a.symbol for a in balance.assets] == ["BTC", "ETH"]
        assert balance.assets[0].value == Decimal("30000")
        assert balance.assets[1].price == Decimal("1800.50")
        assert all(a.timestamp is None for a in balance.assets)

    def test_empty(self):
        balance = original_balance([])
        assert balance.total == Decimal("0")
        assert balance.assets == []


class TestCurrentBalance:
    def test_values_at_cached_price(self, db, user):
        create_asset(db, "BTC", Decimal("95000"))
        create_asset(db, "ETH", Decimal("3500"))
        holdings = [
            create_holding(db, user, "ETH", Decimal("2"), Decimal("1800")),
            create_holding(db, user, "BTC", Decimal("0.5"), Decimal("60000")),
        ]

        balance = current_balance(db, holdings)

        assert [a.symbol for a in balance.assets] == ["ETH", "BTC"]
        assert balance.assets[0].value == Decimal("7000")
        assert balance.assets[1].value == Decimal("47500")
        assert balance.total == Decimal("54500")
        assert balance.assets[1].timestamp.replace(tzinfo=None) == PRICE_TIMESTAMP.replace(tzinfo=None)

    def test_assets_loaded_in_one_query(self, db, user, monkeypatch):
        create_asset(db, "BTC", Decimal("95000"))
        create_asset(db, "ETH", Decimal("3500"))
        holdings = [
            create_holding(db, user, "BTC", Decimal("1"), Decimal("1")),
            create_holding(db, user, "ETH", Decimal("1"), Decimal("1")),
        ]
        calls = []
        original = AssetService.find_by_ids

        def spy(session, symbols):
            calls.append(list(symbols))
            return original(session, symbols)

        monkeypatch.setattr(AssetService, "find_by_ids", spy)
        current_balance(db, holdings)

        assert calls == [["BTC", "ETH"]]

    def test_missing_asset_raises_with_symbol(self, db):
        holdings = [
            UserAsset(asset_id="DOGE", quantity=Decimal("1"), purchase_price=Decimal("1")),
        ]

        with pytest.raises(AssetNotFoundError, match="No asset found for symbol: DOGE"):
            current_balance(db, holdings)

    def test_empty(self, db):
        balance = current_balance(db, [])
        assert balance.total == Decimal("0")
        assert balance.assets == []
