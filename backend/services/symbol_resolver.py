"""Symbol -> provider slug resolution with a process-lifetime cache."""

import logging
import threading
from typing import Optional

from integrations.exceptions import ProviderError
from integrations.price_provider_protocol import PriceProviderClient
from services.exceptions import InvalidInputError, PriceFetchError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 8


class SymbolResolutionCache:
    """Maps asset symbols (e.g. "BTC") to provider slugs (e.g. "bitcoin").

    Entries are keyed by the upper-cased symbol and never expire. Reads and
    inserts are guarded by an internal lock; the provider search happens
    outside the lock, so two concurrent misses for the same symbol may both
    hit the provider and store the same slug.
    """

    def __init__(self, client: PriceProviderClient, search_limit: int = DEFAULT_SEARCH_LIMIT):
        self._client = client
        self._search_limit = search_limit
        self._slugs: dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slugs)

    def get(self, symbol: str) -> Optional[str]:
        """Return the cached slug for a symbol, or None on a miss."""
        with self._lock:
            return self._slugs.get(symbol.upper())

    def resolve(self, symbol: str) -> str:
        """Resolve a symbol to its provider slug.

        Only an exact, case-insensitive symbol match among the search
        candidates is accepted.

        Raises:
            InvalidInputError: If the symbol is empty.
            PriceFetchError: If the search fails or no candidate matches.
        """
        if not symbol or not symbol.strip():
            raise InvalidInputError("Symbol cannot be empty")

        upper = symbol.strip().upper()
        cached = self.get(upper)
        if cached is not None:
            return cached

        try:
            candidates = self._client.search_assets(
                upper, limit=self._search_limit, offset=0
            )
        except ProviderError as exc:
            logger.warning("Symbol search failed for %s: %s", upper, exc)
            raise PriceFetchError(f"Failed to find asset for symbol: {upper}") from exc

        match = next(
            (c for c in candidates if (c.symbol or "").upper() == upper),
            None,
        )
        if match is None:
            logger.warning(
                "No exact match for symbol %s among %d candidates",
                upper, len(candidates),
            )
            raise PriceFetchError(f"No asset found for symbol: {upper}")

        with self._lock:
            slug = self._slugs.setdefault(upper, match.id)
        logger.info("Resolved symbol %s -> %s", upper, slug)
        return slug
