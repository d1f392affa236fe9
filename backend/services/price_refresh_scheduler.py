"""Background refresh of cached asset prices."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from services.asset_service import AssetService
from services.price_service import PriceService

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3
DEFAULT_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True)
class RefreshSummary:
    """Outcome of one full refresh run."""

    refreshed: int
    failed: int


class PriceRefreshScheduler:
    """Periodically refreshes the USD price of every persisted Asset.

    Each run walks the asset ids lazily, one keyset page at a time, and
    refreshes assets on a thread pool. A bounded semaphore caps in-flight
    refreshes at ``concurrency`` and applies backpressure to the table
    scan. A failure on one asset is logged and never affects the others or
    the run as a whole.

    Runs never overlap: a run that starts while another is still active is
    skipped. Once :meth:`stop` is called, an active run submits no further
    assets.
    """

    def __init__(
        self,
        price_service: PriceService,
        session_factory: Callable[[], Session],
        concurrency: int = DEFAULT_CONCURRENCY,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        """Initialize the scheduler.

        Args:
            price_service: Source of current prices.
            session_factory: Creates a new Session; every refresh task and
                             every page of the asset scan uses its own
                             session.
            concurrency: Maximum number of refreshes in flight.
            interval_seconds: Delay between scheduled runs.
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._price_service = price_service
        self._session_factory = session_factory
        self._concurrency = concurrency
        self._interval_seconds = interval_seconds
        self._run_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._timer_thread: Optional[threading.Thread] = None

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def is_refresh_in_progress(self) -> bool:
        """Check whether a refresh run is currently active."""
        acquired = self._run_lock.acquire(blocking=False)
        if acquired:
            self._run_lock.release()
            return False
        return True

    def refresh_all_prices(self) -> Optional[RefreshSummary]:
        """Refresh every asset's price. Never raises; only logs.

        Returns:
            Per-asset counts, or None if the run was skipped or failed as a
            whole.
        """
        if not self._run_lock.acquire(blocking=False):
            logger.info("Asset price refresh already in progress, skipping this run")
            return None

        try:
            return self._run()
        except Exception:
            logger.error("Asset price refresh failed", exc_info=True)
            return None
        finally:
            self._run_lock.release()

    def _run(self) -> RefreshSummary:
        logger.info("Starting asset price refresh")
        permits = threading.BoundedSemaphore(self._concurrency)
        counts = {"refreshed": 0, "failed": 0}
        counts_lock = threading.Lock()

        def on_done(future: Future) -> None:
            permits.release()
            ok = future.exception() is None and future.result()
            with counts_lock:
                counts["refreshed" if ok else "failed"] += 1

        with ThreadPoolExecutor(
            max_workers=self._concurrency, thread_name_prefix="price-refresh"
        ) as executor:
            for symbol in AssetService.stream_ids(self._session_factory):
                permits.acquire()
                if self._stop_event.is_set():
                    permits.release()
                    logger.info("Price refresh stopped, skipping remaining assets")
                    break
                try:
                    future = executor.submit(self.refresh_asset, symbol)
                except Exception:
                    permits.release()
                    raise
                future.add_done_callback(on_done)

        logger.info(
            "Asset price refresh completed: %d refreshed, %d failed",
            counts["refreshed"], counts["failed"],
        )
        return RefreshSummary(refreshed=counts["refreshed"], failed=counts["failed"])

    def refresh_asset(self, symbol: str) -> bool:
        """Fetch and persist the current price of one asset.

        Returns:
            True if the price was updated, False if anything failed (the
            asset is then left unchanged).
        """
        try:
            logger.debug("Updating price for asset: %s", symbol)
            price = self._price_service.get_current_price_by_symbol(symbol)
            with self._session_factory() as db:
                asset = AssetService.apply_price(db, symbol, price)
                if asset is None:
                    return False
                db.commit()
            logger.debug("Updated price for %s: %s USD", symbol, price.price)
            return True
        except Exception:
            logger.warning("Failed to update price for asset: %s", symbol, exc_info=True)
            return False

    def start(self) -> None:
        """Start the background timer thread (no-op if already running)."""
        if self._timer_thread is not None and self._timer_thread.is_alive():
            return
        self._stop_event.clear()
        self._timer_thread = threading.Thread(
            target=self._run_timer, name="price-refresh-timer", daemon=True
        )
        self._timer_thread.start()
        logger.info(
            "Price refresh scheduled every %.1fs (concurrency %d)",
            self._interval_seconds, self._concurrency,
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the timer thread and wait for an in-flight run to finish.

        The in-flight run submits no further assets; refreshes already
        submitted complete. ``timeout`` bounds the whole wait.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        self._stop_event.set()
        if self._timer_thread is not None:
            self._timer_thread.join(timeout)
            self._timer_thread = None

        remaining = -1 if deadline is None else max(0.0, deadline - time.monotonic())
        if self._run_lock.acquire(timeout=remaining):
            self._run_lock.release()
        else:
            logger.warning("Asset price refresh still running after stop timeout")

    def _run_timer(self) -> None:
        # Runs start on their own thread; the run lock skips a tick while
        # the previous run is still active.
        while not self._stop_event.wait(self._interval_seconds):
            threading.Thread(
                target=self.refresh_all_prices, name="price-refresh-run", daemon=True
            ).start()
