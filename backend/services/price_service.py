"""Price service: single point of access for asset price queries."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Protocol

from integrations.exceptions import ProviderError
from integrations.parsing_utils import ensure_utc, parse_millis_timestamp, to_millis
from integrations.price_provider_protocol import PriceProviderClient
from services.exceptions import InvalidInputError, PriceFetchError
from services.symbol_resolver import SymbolResolutionCache

logger = logging.getLogger(__name__)

MAX_SYMBOLS_PER_REQUEST = 100
HISTORY_INTERVAL = "d1"


@dataclass(frozen=True)
class AssetPrice:
    """A provider-reported USD price at a point in time."""

    timestamp: datetime
    price: Decimal


class PriceService(Protocol):
    """Protocol for "what is this asset worth" lookups."""

    def get_current_price_by_symbol(self, symbol: str) -> AssetPrice:
        ...

    def get_current_prices_by_symbols(self, symbols: list[str]) -> dict[str, AssetPrice]:
        ...

    def get_current_price_by_slug(self, slug: str) -> AssetPrice:
        ...

    def get_historical_price_range(
        self, symbol: str, start: Optional[datetime], end: Optional[datetime]
    ) -> list[AssetPrice]:
        ...


def parse_price(raw, context: str) -> Decimal:
    """Parse a provider price string into a non-negative Decimal.

    Raises:
        PriceFetchError: If the value is missing, non-numeric, not finite,
            or negative. Bad values are never coerced to zero.
    """
    if raw is None:
        raise PriceFetchError(f"Missing price data received for {context}")
    try:
        price = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise PriceFetchError(f"Invalid price data received for {context}: {raw!r}") from exc
    if not price.is_finite() or price < 0:
        raise PriceFetchError(f"Invalid price data received for {context}: {raw!r}")
    return price


def _parse_timestamp(raw_ms, context: str) -> datetime:
    timestamp = parse_millis_timestamp(raw_ms)
    if timestamp is None:
        raise PriceFetchError(f"Invalid timestamp received for {context}: {raw_ms!r}")
    return timestamp


def _validate_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    if (start is None) != (end is None):
        raise InvalidInputError("Both start and end timestamps or none must be provided")
    if start is not None and ensure_utc(start) > ensure_utc(end):
        raise InvalidInputError("Start timestamp must be before end timestamp")


class CoinCapPriceService:
    """PriceService implementation on top of a CoinCap-shaped client.

    Current prices go through the batch by-symbol endpoint, even for a
    single symbol. Historical lookups resolve the symbol to a slug through
    the injected :class:`SymbolResolutionCache` first.
    """

    def __init__(
        self,
        client: PriceProviderClient,
        symbol_cache: Optional[SymbolResolutionCache] = None,
    ):
        """Initialize with a provider client and an optional slug cache.

        Args:
            client: Price provider client.
            symbol_cache: Symbol -> slug cache. If None, a new cache bound
                          to ``client`` is created, so separate service
                          instances never share resolutions.
        """
        self._client = client
        self._symbol_cache = symbol_cache or SymbolResolutionCache(client)

    @property
    def symbol_cache(self) -> SymbolResolutionCache:
        return self._symbol_cache

    def get_current_price_by_symbol(self, symbol: str) -> AssetPrice:
        """Get the current price of one symbol (e.g. BTC, ETH, USDC)."""
        if not symbol or not symbol.strip():
            raise InvalidInputError("Symbol cannot be empty")
        return self.get_current_prices_by_symbols([symbol])[symbol]

    def get_current_prices_by_symbols(self, symbols: list[str]) -> dict[str, AssetPrice]:
        """Get current prices for up to 100 symbols in one provider call.

        The provider returns prices in request order, so the i-th price is
        assigned to the i-th requested symbol.

        Raises:
            InvalidInputError: If the list is empty, has more than 100
                entries, or contains an empty symbol.
            PriceFetchError: On transport failure, empty or short response,
                or unparseable price data.
        """
        if not symbols:
            raise InvalidInputError("Symbols cannot be empty")
        if len(symbols) > MAX_SYMBOLS_PER_REQUEST:
            raise InvalidInputError(
                f"Maximum number of symbols to fetch is {MAX_SYMBOLS_PER_REQUEST}"
            )
        if any(not s or not s.strip() for s in symbols):
            raise InvalidInputError("Symbol cannot be empty")

        symbols_csv = ",".join(symbols)
        try:
            response = self._client.get_price_by_symbols(symbols_csv)
        except ProviderError as exc:
            logger.warning("Price fetch failed for %s: %s", symbols_csv, exc)
            raise PriceFetchError(f"Failed to fetch asset price for symbol(s): {symbols_csv}") from exc

        if response is None or not response.prices:
            raise PriceFetchError(
                f"Failed to fetch asset price for symbol(s): {symbols_csv}. "
                "Provider returned an empty data response"
            )
        if len(response.prices) != len(symbols):
            raise PriceFetchError(
                f"Failed to fetch asset price for symbol(s): {symbols_csv}. "
                f"Provider returned {len(response.prices)} prices for {len(symbols)} symbols"
            )

        timestamp = _parse_timestamp(response.timestamp_ms, symbols_csv)
        return {
            symbol: AssetPrice(timestamp=timestamp, price=parse_price(raw, f"symbol {symbol}"))
            for symbol, raw in zip(symbols, response.prices)
        }

    def get_current_price_by_slug(self, slug: str) -> AssetPrice:
        """Get the current price of an asset by provider slug (e.g. bitcoin)."""
        if not slug or not slug.strip():
            raise InvalidInputError("Slug cannot be empty")
        try:
            quote = self._client.get_asset(slug)
        except ProviderError as exc:
            logger.warning("Price fetch failed for slug %s: %s", slug, exc)
            raise PriceFetchError(f"Failed to fetch asset price for slug: {slug}") from exc

        return AssetPrice(
            timestamp=_parse_timestamp(quote.timestamp_ms, f"slug {slug}"),
            price=parse_price(quote.price_usd, f"slug {slug}"),
        )

    def get_historical_price_range(
        self, symbol: str, start: Optional[datetime], end: Optional[datetime]
    ) -> list[AssetPrice]:
        """Get daily historical prices for a symbol.

        Pass both bounds or neither; with neither, the provider's most
        recent history is returned.

        Returns:
            Price points in provider order, or an empty list when the
            provider has no data in range.
        """
        if not symbol or not symbol.strip():
            raise InvalidInputError("Symbol cannot be empty")
        _validate_range(start, end)

        slug = self._symbol_cache.resolve(symbol)
        return self.get_historical_price_range_by_slug(slug, start, end)

    def get_historical_price_range_by_slug(
        self,
        slug: str,
        start: Optional[datetime],
        end: Optional[datetime],
        interval: str = HISTORY_INTERVAL,
    ) -> list[AssetPrice]:
        """Get historical prices for a provider slug at the given interval."""
        if not slug or not slug.strip():
            raise InvalidInputError("Slug cannot be empty")
        _validate_range(start, end)

        start_ms = to_millis(start) if start is not None else None
        end_ms = to_millis(end) if end is not None else None
        try:
            points = self._client.get_asset_history(slug, interval, start_ms, end_ms)
        except ProviderError as exc:
            logger.warning("History fetch failed for slug %s: %s", slug, exc)
            raise PriceFetchError(f"Failed to fetch historical asset prices for slug: {slug}") from exc

        if not points:
            return []

        return [
            AssetPrice(
                timestamp=_parse_timestamp(point.time_ms, f"slug {slug}"),
                price=parse_price(point.price_usd, f"slug {slug}"),
            )
            for point in points
        ]
