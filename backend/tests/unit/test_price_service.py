"""Tests for CoinCapPriceService."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from integrations.price_provider_protocol import ProviderAssetQuote, ProviderHistoryPoint
from services.exceptions import InvalidInputError, PriceFetchError
from services.price_service import (
    MAX_SYMBOLS_PER_REQUEST,
    CoinCapPriceService,
    parse_price,
)
from services.symbol_resolver import SymbolResolutionCache
from tests.fixtures.mocks import SAMPLE_TIMESTAMP_MS, MockPriceProviderClient

SAMPLE_TIMESTAMP = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def client():
    return MockPriceProviderClient()


@pytest.fixture
def service(client):
    return CoinCapPriceService(client)


class TestParsePrice:
    def test_parses_decimal_string(self):
        assert parse_price("94321.1234", "BTC") == Decimal("94321.1234")

    def test_strips_whitespace(self):
        assert parse_price(" 1.5 ", "BTC") == Decimal("1.5")

    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", "Infinity", "-1"])
    def test_rejects_bad_values(self, raw):
        with pytest.raises(PriceFetchError):
            parse_price(raw, "BTC")

    def test_zero_is_allowed(self):
        assert parse_price("0", "DEAD") == Decimal("0")


class TestCurrentPrices:
    def test_single_symbol(self, service, client):
        price = service.get_current_price_by_symbol("BTC")

        assert price.price == Decimal("94321.1234")
        assert price.timestamp == SAMPLE_TIMESTAMP
        assert client.symbol_requests == ["BTC"]

    def test_batch_keys_match_input_and_order(self, service, client):
        prices = service.get_current_prices_by_symbols(["ETH", "BTC"])

        assert list(prices) == ["ETH", "BTC"]
        assert prices["ETH"].price == Decimal("3456.78")
        assert prices["BTC"].price == Decimal("94321.1234")
        assert client.symbol_requests == ["ETH,BTC"]
        assert client.calls["get_price_by_symbols"] == 1

    def test_batch_shares_provider_timestamp(self, service):
        prices = service.get_current_prices_by_symbols(["BTC", "ETH"])

        assert {p.timestamp for p in prices.values()} == {SAMPLE_TIMESTAMP}

    def test_empty_list_rejected_without_provider_call(self, service, client):
        with pytest.raises(InvalidInputError):
            service.get_current_prices_by_symbols([])
        assert client.calls["get_price_by_symbols"] == 0

    def test_too_many_symbols_rejected_without_provider_call(self, service, client):
        symbols = [f"S{i}" for i in range(MAX_SYMBOLS_PER_REQUEST + 1)]
        with pytest.raises(InvalidInputError, match="100"):
            service.get_current_prices_by_symbols(symbols)
        assert client.calls["get_price_by_symbols"] == 0

    def test_hundred_symbols_accepted(self):
        symbols = [f"S{i}" for i in range(MAX_SYMBOLS_PER_REQUEST)]
        client = MockPriceProviderClient(symbol_prices={s: "1" for s in symbols})

        prices = CoinCapPriceService(client).get_current_prices_by_symbols(symbols)

        assert len(prices) == MAX_SYMBOLS_PER_REQUEST

    def test_blank_symbol_rejected(self, service, client):
        with pytest.raises(InvalidInputError):
            service.get_current_prices_by_symbols(["BTC", " "])
        with pytest.raises(InvalidInputError):
            service.get_current_price_by_symbol("")
        assert client.calls["get_price_by_symbols"] == 0

    def test_empty_response_raises(self):
        service = CoinCapPriceService(MockPriceProviderClient(symbol_prices={}))

        with pytest.raises(PriceFetchError, match="empty data"):
            service.get_current_price_by_symbol("BTC")

    def test_short_response_raises(self, service):
        with pytest.raises(PriceFetchError, match="1 prices for 2 symbols"):
            service.get_current_prices_by_symbols(["BTC", "NOPE"])

    def test_non_numeric_price_raises(self):
        service = CoinCapPriceService(MockPriceProviderClient(symbol_prices={"BTC": "n/a"}))

        with pytest.raises(PriceFetchError, match="Invalid price"):
            service.get_current_price_by_symbol("BTC")

    def test_provider_failure_wrapped(self):
        service = CoinCapPriceService(MockPriceProviderClient(fail_with="api"))

        with pytest.raises(PriceFetchError, match="BTC"):
            service.get_current_price_by_symbol("BTC")


class TestCurrentPriceBySlug:
    def test_returns_quote(self):
        client = MockPriceProviderClient(
            quotes={
                "bitcoin": ProviderAssetQuote(
                    id="bitcoin", symbol="BTC", price_usd="94000.5",
                    timestamp_ms=SAMPLE_TIMESTAMP_MS,
                )
            }
        )

        price = CoinCapPriceService(client).get_current_price_by_slug("bitcoin")

        assert price.price == Decimal("94000.5")
        assert price.timestamp == SAMPLE_TIMESTAMP

    def test_missing_price_raises(self):
        client = MockPriceProviderClient(
            quotes={
                "bitcoin": ProviderAssetQuote(
                    id="bitcoin", symbol="BTC", price_usd=None,
                    timestamp_ms=SAMPLE_TIMESTAMP_MS,
                )
            }
        )

        with pytest.raises(PriceFetchError):
            CoinCapPriceService(client).get_current_price_by_slug("bitcoin")

    def test_empty_slug_rejected(self, service):
        with pytest.raises(InvalidInputError):
            service.get_current_price_by_slug("")


class TestHistoricalPriceRange:
    def _history_client(self):
        return MockPriceProviderClient(
            history={
                "bitcoin": [
                    ProviderHistoryPoint(price_usd="93000.5", time_ms=1735603200000),
                    ProviderHistoryPoint(price_usd="94000.5", time_ms=1735689600000),
                ]
            }
        )

    def test_resolves_symbol_and_queries_daily_interval(self):
        client = self._history_client()
        service = CoinCapPriceService(client)
        start = SAMPLE_TIMESTAMP - timedelta(days=1)

        points = service.get_historical_price_range("btc", start, SAMPLE_TIMESTAMP)

        assert [p.price for p in points] == [Decimal("93000.5"), Decimal("94000.5")]
        assert points[1].timestamp == SAMPLE_TIMESTAMP
        assert client.history_requests == [
            ("bitcoin", "d1", 1735603200000, 1735689600000)
        ]

    def test_both_bounds_none_omits_range(self):
        client = self._history_client()

        points = CoinCapPriceService(client).get_historical_price_range("BTC", None, None)

        assert len(points) == 2
        assert client.history_requests == [("bitcoin", "d1", None, None)]

    def test_empty_history_returns_empty_list(self, service, client):
        assert service.get_historical_price_range("ETH", None, None) == []

    def test_start_after_end_rejected(self, service, client):
        with pytest.raises(InvalidInputError, match="before"):
            service.get_historical_price_range(
                "BTC", SAMPLE_TIMESTAMP, SAMPLE_TIMESTAMP - timedelta(seconds=1)
            )
        assert client.calls["search_assets"] == 0

    @pytest.mark.parametrize(
        "start,end", [(SAMPLE_TIMESTAMP, None), (None, SAMPLE_TIMESTAMP)]
    )
    def test_exactly_one_bound_rejected(self, service, start, end):
        with pytest.raises(InvalidInputError, match="Both start and end"):
            service.get_historical_price_range("BTC", start, end)

    def test_equal_bounds_accepted(self, service):
        assert service.get_historical_price_range(
            "ETH", SAMPLE_TIMESTAMP, SAMPLE_TIMESTAMP
        ) == []

    def test_unknown_symbol_raises(self, service):
        with pytest.raises(PriceFetchError, match="No asset found for symbol: XYZ"):
            service.get_historical_price_range("XYZ", None, None)

    def test_history_failure_wrapped(self):
        client = MockPriceProviderClient()
        service = CoinCapPriceService(client)
        service.symbol_cache.resolve("BTC")
        client._fail_with = "connection"

        with pytest.raises(PriceFetchError, match="bitcoin"):
            service.get_historical_price_range("BTC", None, None)

    def test_slug_resolution_is_cached(self):
        client = self._history_client()
        service = CoinCapPriceService(client)

        service.get_historical_price_range("BTC", None, None)
        service.get_historical_price_range("BTC", None, None)

        assert client.calls["search_assets"] == 1
        assert client.calls["get_asset_history"] == 2

    def test_injected_cache_is_used(self):
        client = self._history_client()
        cache = SymbolResolutionCache(client)
        cache.resolve("BTC")

        service = CoinCapPriceService(client, symbol_cache=cache)
        service.get_historical_price_range("BTC", None, None)

        assert service.symbol_cache is cache
        assert client.calls["search_assets"] == 1

    def test_by_slug_with_custom_interval(self):
        client = self._history_client()

        CoinCapPriceService(client).get_historical_price_range_by_slug(
            "bitcoin", None, None, interval="h1"
        )

        assert client.history_requests == [("bitcoin", "h1", None, None)]
