"""Simulation service: values a hypothetical portfolio at a past instant."""

import logging
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from schemas.simulation import SimulationRequest, SimulationResult
from schemas.wallet import AssetValue
from services.exceptions import SimulationConsistencyError
from services.price_service import PriceService

logger = logging.getLogger(__name__)

# How far before the requested instant to look for a historical price.
HISTORICAL_PRICE_WINDOW = timedelta(minutes=5)

PERFORMANCE_QUANTUM = Decimal("0.000001")
HUNDRED = Decimal("100")


def performance_percent(value: Decimal, baseline: Decimal) -> Decimal:
    """Percentage change from baseline to value.

    The ratio is rounded half-up to 6 places before scaling to a
    percentage. A zero baseline yields 0.
    """
    if baseline == 0:
        return Decimal("0")
    ratio = ((value - baseline) / baseline).quantize(
        PERFORMANCE_QUANTUM, rounding=ROUND_HALF_UP
    )
    return ratio * HUNDRED


class SimulationService:
    """Answers "what would this portfolio have been worth at time T?"."""

    def __init__(self, price_service: PriceService):
        self._price_service = price_service

    def simulate(self, request: SimulationRequest) -> SimulationResult:
        """Value each requested asset at ``request.timestamp``.

        Each asset is priced with the first historical point in the window
        ``[T - 5 minutes, T]``. Assets without a price point in that window
        are left out of the result and of the total.

        Raises:
            PriceFetchError: If the provider fails for any asset.
            SimulationConsistencyError: If a priced asset cannot be matched
                back to its request entry.
        """
        timestamp = request.timestamp
        start = timestamp - HISTORICAL_PRICE_WINDOW

        asset_values: list[AssetValue] = []
        for entry in request.assets:
            prices = self._price_service.get_historical_price_range(
                entry.symbol, start, timestamp
            )
            if not prices:
                logger.info(
                    "No historical price for %s at %s, excluding from simulation",
                    entry.symbol, timestamp.isoformat(),
                )
                continue
            price = prices[0].price
            asset_values.append(
                AssetValue(
                    symbol=entry.symbol,
                    quantity=entry.quantity,
                    price=price,
                    value=entry.quantity * price,
                )
            )

        total = sum((a.value for a in asset_values), Decimal("0"))

        baselines = {entry.symbol: entry.value for entry in request.assets}
        performances: list[tuple[str, Decimal]] = []
        for asset in asset_values:
            if asset.symbol not in baselines:
                raise SimulationConsistencyError(
                    f"Simulated asset {asset.symbol} has no matching request entry"
                )
            performances.append(
                (asset.symbol, performance_percent(asset.value, baselines[asset.symbol]))
            )

        if performances:
            best_asset, best_performance = max(performances, key=lambda p: p[1])
            worst_asset, worst_performance = min(performances, key=lambda p: p[1])
        else:
            best_asset, best_performance = "", Decimal("0")
            worst_asset, worst_performance = "", Decimal("0")

        return SimulationResult(
            timestamp=timestamp,
            total=total,
            best_asset=best_asset,
            best_performance=best_performance,
            worst_asset=worst_asset,
            worst_performance=worst_performance,
            assets=asset_values,
        )
