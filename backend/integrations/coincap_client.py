"""CoinCap v3 REST client for cryptocurrency prices."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from integrations.exceptions import (
    ProviderAPIError,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderRateLimitError,
)
from integrations.price_provider_protocol import (
    ProviderAsset,
    ProviderAssetQuote,
    ProviderHistoryPoint,
    ProviderSymbolPrices,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://rest.coincap.io/v3"
PROVIDER_NAME = "coincap"


def _retry_after(response: httpx.Response) -> Optional[float]:
    """Seconds from a numeric Retry-After header, or None."""
    try:
        return float(response.headers["Retry-After"])
    except (KeyError, ValueError):
        return None


class CoinCapClient:
    """Price provider backed by the CoinCap v3 API.

    Every call is a single attempt. A 429 surfaces as
    :class:`ProviderRateLimitError` and is never retried here. Failures
    are translated into the typed exceptions of
    :mod:`integrations.exceptions`.
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the HTTP client.

        Args:
            api_token: CoinCap API key, sent as a bearer token. If empty,
                       requests go out unauthenticated.
            base_url: API root, overridable for testing.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict:
        """Issue a GET and return the decoded JSON object."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self._client.get(path, params=params or None)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status in (401, 403):
                raise ProviderAuthError(
                    f"CoinCap authentication failed (HTTP {status})",
                    provider_name=PROVIDER_NAME,
                ) from exc
            if status == 429:
                raise ProviderRateLimitError(
                    f"CoinCap rate limit exceeded for {path}",
                    provider_name=PROVIDER_NAME,
                    retry_after=_retry_after(exc.response),
                ) from exc
            raise ProviderAPIError(
                f"CoinCap API error (HTTP {status}) for {path}",
                provider_name=PROVIDER_NAME,
                status_code=status,
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderConnectionError(
                f"CoinCap connection failed: {exc}",
                provider_name=PROVIDER_NAME,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderDataError(
                f"CoinCap returned invalid JSON for {path}",
                provider_name=PROVIDER_NAME,
            ) from exc

        if not isinstance(payload, dict):
            raise ProviderDataError(
                f"CoinCap returned an unexpected payload for {path}",
                provider_name=PROVIDER_NAME,
            )
        return payload

    @staticmethod
    def _data_list(payload: dict, path: str) -> list:
        data = payload.get("data")
        if data is None:
            return []
        if not isinstance(data, list):
            raise ProviderDataError(
                f"CoinCap 'data' for {path} is not a list",
                provider_name=PROVIDER_NAME,
            )
        return data

    def search_assets(
        self, query: str, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> list[ProviderAsset]:
        """Search assets by symbol or slug.

        Args:
            query: Free-text search, e.g. "BTC" or "bitcoin".
            limit: Maximum number of candidates.
            offset: Number of candidates to skip.

        Returns:
            Candidates in provider ranking order.
        """
        path = "/assets"
        payload = self._get(path, {"search": query, "limit": limit, "offset": offset})
        results = []
        for item in self._data_list(payload, path):
            if not isinstance(item, dict) or "id" not in item:
                raise ProviderDataError(
                    f"CoinCap search result missing 'id' for query {query!r}",
                    provider_name=PROVIDER_NAME,
                )
            results.append(
                ProviderAsset(
                    id=item["id"],
                    symbol=item.get("symbol") or "",
                    name=item.get("name") or "",
                    price_usd=item.get("priceUsd"),
                )
            )
        logger.debug("CoinCap: search %r returned %d candidates", query, len(results))
        return results

    def get_asset(self, slug: str) -> ProviderAssetQuote:
        """Fetch the current quote for a slug (e.g. "bitcoin")."""
        path = f"/assets/{quote(slug, safe='')}"
        payload = self._get(path)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ProviderDataError(
                f"CoinCap returned no asset data for {slug!r}",
                provider_name=PROVIDER_NAME,
            )
        return ProviderAssetQuote(
            id=data.get("id") or slug,
            symbol=data.get("symbol") or "",
            price_usd=data.get("priceUsd"),
            timestamp_ms=self._timestamp(payload, path),
        )

    def get_asset_history(
        self,
        slug: str,
        interval: str,
        start_ms: Optional[int] = None,
        end_ms: Optional[int] = None,
    ) -> list[ProviderHistoryPoint]:
        """Fetch price history for a slug at the given interval (m1 ... d1)."""
        path = f"/assets/{quote(slug, safe='')}/history"
        payload = self._get(
            path, {"interval": interval, "start": start_ms, "end": end_ms}
        )
        points = []
        for item in self._data_list(payload, path):
            try:
                points.append(
                    ProviderHistoryPoint(
                        price_usd=item["priceUsd"],
                        time_ms=int(item["time"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ProviderDataError(
                    f"CoinCap history entry for {slug!r} is malformed: {item!r}",
                    provider_name=PROVIDER_NAME,
                ) from exc
        return points

    def get_price_by_symbols(self, symbols_csv: str) -> ProviderSymbolPrices:
        """Fetch current USD prices for comma-separated symbols.

        CoinCap answers with a bare list of price strings in request order.
        """
        path = f"/price/bysymbol/{quote(symbols_csv, safe=',')}"
        payload = self._get(path)
        prices = self._data_list(payload, path)
        return ProviderSymbolPrices(
            prices=[str(p) for p in prices],
            timestamp_ms=self._timestamp(payload, path),
        )

    @staticmethod
    def _timestamp(payload: dict, path: str) -> int:
        try:
            return int(payload["timestamp"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderDataError(
                f"CoinCap response for {path} has no valid timestamp",
                provider_name=PROVIDER_NAME,
            ) from exc
