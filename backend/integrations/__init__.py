"""External API integrations.

This package contains:
- Price provider protocol: raw interface consumed by the price service
- CoinCap client: Integration with the CoinCap v3 REST API
- Typed provider exceptions
"""

from integrations.price_provider_protocol import (
    PriceProviderClient,
    ProviderAsset,
    ProviderAssetQuote,
    ProviderHistoryPoint,
    ProviderSymbolPrices,
)

__all__ = [
    "PriceProviderClient",
    "ProviderAsset",
    "ProviderAssetQuote",
    "ProviderHistoryPoint",
    "ProviderSymbolPrices",
]
