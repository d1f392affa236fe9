"""Price provider protocol definitions.

Defines the raw interface the price service consumes. Implementations
return provider-shaped data (prices as strings, epoch-millisecond
timestamps); parsing and validation happen in the price service.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class ProviderAsset:
    """A candidate returned by an asset search."""

    id: str  # Provider slug, e.g. "bitcoin"
    symbol: str
    name: str = ""
    price_usd: Optional[str] = None


@dataclass
class ProviderAssetQuote:
    """Current quote for a single asset looked up by slug."""

    id: str
    symbol: str
    price_usd: Optional[str]
    timestamp_ms: int


@dataclass
class ProviderHistoryPoint:
    """One point of an asset's price history."""

    price_usd: str
    time_ms: int


@dataclass
class ProviderSymbolPrices:
    """Prices for a batch of symbols, in request order."""

    prices: list[str]
    timestamp_ms: int


class PriceProviderClient(Protocol):
    """Protocol for remote price providers."""

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'coincap')."""
        ...

    def search_assets(
        self, query: str, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> list[ProviderAsset]:
        """Search assets by free text (symbol or slug)."""
        ...

    def get_asset(self, slug: str) -> ProviderAssetQuote:
        """Fetch the current quote of one asset by slug."""
        ...

    def get_asset_history(
        self,
        slug: str,
        interval: str,
        start_ms: Optional[int] = None,
        end_ms: Optional[int] = None,
    ) -> list[ProviderHistoryPoint]:
        """Fetch price history for a slug.

        Omitting both bounds returns the provider's most recent history.
        """
        ...

    def get_price_by_symbols(self, symbols_csv: str) -> ProviderSymbolPrices:
        """Fetch current prices for comma-separated symbols.

        The returned prices are in the same order as the requested symbols.
        """
        ...
