"""Tests for the one-off price refresh script."""

from contextlib import nullcontext
from decimal import Decimal
from unittest.mock import patch

from models import Asset
from scripts.refresh_prices import main, refresh_prices
from services.price_refresh_scheduler import RefreshSummary
from tests.fixtures import create_asset
from tests.fixtures.mocks import MockPriceService


class TestRefreshPrices:
    def test_refreshes_requested_symbols(self, db, capsys):
        create_asset(db, "BTC", Decimal("1"))
        create_asset(db, "ETH", Decimal("1"))
        db.commit()
        price_service = MockPriceService(current={"BTC": Decimal("95000")})

        failed = refresh_prices(
            ["btc", "eth"],
            price_service=price_service,
            session_factory=lambda: nullcontext(db),
        )

        assert failed == 1
        assert db.get(Asset, "BTC").usd_price == Decimal("95000")
        assert db.get(Asset, "ETH").usd_price == Decimal("1")
        out = capsys.readouterr().out
        assert "Refreshed BTC" in out
        assert "Failed to refresh ETH" in out

    @patch("scripts.refresh_prices.PriceRefreshScheduler")
    def test_full_run_without_symbols(self, mock_scheduler_cls, capsys):
        mock_scheduler_cls.return_value.refresh_all_prices.return_value = RefreshSummary(
            refreshed=3, failed=0
        )
        price_service = MockPriceService()

        failed = refresh_prices(
            concurrency=4, price_service=price_service, session_factory=object
        )

        assert failed == 0
        mock_scheduler_cls.return_value.refresh_all_prices.assert_called_once()
        mock_scheduler_cls.return_value.refresh_asset.assert_not_called()
        kwargs = mock_scheduler_cls.call_args.kwargs
        assert kwargs["price_service"] is price_service
        assert kwargs["concurrency"] == 4
        assert "Summary: 3 refreshed, 0 failed" in capsys.readouterr().out

    def test_full_run_reports_asset_failures(self, file_session_factory):
        with file_session_factory() as db:
            create_asset(db, "BTC", Decimal("1"))
            create_asset(db, "ETH", Decimal("1"))
            db.commit()
        price_service = MockPriceService(current={"BTC": Decimal("95000")})

        failed = refresh_prices(
            price_service=price_service, session_factory=file_session_factory
        )

        assert failed == 1
        with file_session_factory() as db:
            assert db.get(Asset, "BTC").usd_price == Decimal("95000")

    @patch("scripts.refresh_prices.PriceRefreshScheduler")
    def test_failed_full_run_counts_as_failure(self, mock_scheduler_cls, capsys):
        mock_scheduler_cls.return_value.refresh_all_prices.return_value = None

        assert refresh_prices(price_service=MockPriceService(), session_factory=object) == 1
        assert "Refresh run failed" in capsys.readouterr().out


class TestMain:
    @patch("scripts.refresh_prices.setup_logging")
    @patch("scripts.refresh_prices.refresh_prices", return_value=0)
    def test_passes_arguments(self, mock_refresh, mock_setup_logging):
        assert main(["--symbol", "BTC", "--symbol", "eth", "--concurrency", "2"]) == 0
        mock_refresh.assert_called_once_with(["BTC", "eth"], 2)
        mock_setup_logging.assert_called_once_with(None)

    @patch("scripts.refresh_prices.setup_logging")
    @patch("scripts.refresh_prices.refresh_prices", return_value=2)
    def test_failures_give_nonzero_exit(self, mock_refresh, mock_setup_logging):
        assert main([]) == 1
        mock_refresh.assert_called_once_with(None, None)

    @patch("scripts.refresh_prices.setup_logging")
    @patch("scripts.refresh_prices.refresh_prices", return_value=0)
    def test_verbose_logs_at_debug(self, mock_refresh, mock_setup_logging):
        main(["--verbose"])
        mock_setup_logging.assert_called_once_with("DEBUG")
