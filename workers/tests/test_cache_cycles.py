from unittest.mock import MagicMock

import pytest

from core.models import PricePoint
from core.snapshot import BurnStats, CacheSnapshot, ForecastStats, WalletStats
from sources.backoff import UpstreamError
from workers.cache.fast_cycle_worker import FastCycle
from workers.cache.price_cycle_worker import PriceCycle

WALLET = "WalletAAA"
MINT = "MintBBB"
SOURCE = "SourceCCC"
FORECAST = {"totalVolume": 10, "totalFees": 2, "totalWinnings": 3, "totalLifetimeUsers": 4}


class Clock:
    def __init__(self, start=1_000):
        self.now = start

    def __call__(self):
        self.now += 1_000
        return self.now


@pytest.fixture
def helius():
    client = MagicMock()
    client.get_token_supply_ui.return_value = 400_000_000
    client.get_all_enhanced_transactions.return_value = []
    client.fetch_token_price_usd.return_value = 0.002
    client.fetch_sol_price_usd.return_value = 150.0
    return client


@pytest.fixture
def forecast():
    client = MagicMock()
    client.enabled = True
    client.fetch_platform_stats.return_value = dict(FORECAST)
    return client


@pytest.fixture
def price_history():
    history = MagicMock()
    history.get.return_value = [PricePoint(100_000, 10.0), PricePoint(300_000, 30.0)]
    return history


@pytest.fixture
def snapshot():
    return CacheSnapshot()


def _fast(snapshot, helius, price_history, forecast=None):
    return FastCycle(
        snapshot,
        helius,
        price_history,
        forecast,
        clock=Clock(),
        mint=MINT,
        total_supply=1_000_000_000,
        wallet=WALLET,
        purchase_source=SOURCE,
    )


class TestFastCycle:
    def test_burn_from_supply(self, snapshot, helius, price_history, forecast):
        assert _fast(snapshot, helius, price_history, forecast).run() is True

        burn = snapshot.read().burn
        assert burn.burnedAmount == 600_000_000
        assert burn.burnedPercent == pytest.approx(60.0)

    def test_empty_history_reports_zero_and_keeps_prices(self, snapshot, helius, price_history, forecast):
        snapshot.commit_prices(0.002, 150.0, 500)

        _fast(snapshot, helius, price_history, forecast).run()

        view = snapshot.read()
        assert view.wallet == WalletStats(ctoFeesSol=0.0, ctoFeesUsd=0.0, purchasedFromSource=0.0)
        assert view.prices.tokenPriceUsd == 0.002
        assert view.prices.solPriceUsd == 150.0
        price_history.get.assert_not_called()

    def test_full_pipeline(self, snapshot, helius, price_history, forecast):
        helius.get_all_enhanced_transactions.return_value = [
            {
                "timestamp": 100,
                "signature": "s1",
                "nativeTransfers": [{"toUserAccount": WALLET, "amount": 2_000_000_000}],
                "tokenTransfers": [
                    {"mint": MINT, "toUserAccount": WALLET, "fromUserAccount": SOURCE, "tokenAmount": 1000},
                ],
            },
            {
                "timestamp": 300,
                "signature": "s2",
                "nativeTransfers": [{"toUserAccount": WALLET, "amount": 1_000_000_000}],
                "tokenTransfers": [],
            },
        ]

        _fast(snapshot, helius, price_history, forecast).run()

        view = snapshot.read()
        assert view.wallet.ctoFeesSol == 3.0
        assert view.wallet.ctoFeesUsd == pytest.approx(2 * 10.0 + 1 * 30.0)
        assert view.wallet.purchasedFromSource == 1000
        assert view.forecast == ForecastStats(**FORECAST)
        price_history.get.assert_called_once_with(100, 300)
        helius.get_all_enhanced_transactions.assert_called_once_with(WALLET)

    def test_undated_receipts_count_in_fees_only(self, snapshot, helius, price_history):
        helius.get_all_enhanced_transactions.return_value = [
            {"signature": "s1", "nativeTransfers": [{"toUserAccount": WALLET, "amount": 1_000_000_000}]},
        ]

        assert _fast(snapshot, helius, price_history).run() is True

        wallet = snapshot.read().wallet
        assert wallet.ctoFeesSol == 1.0
        assert wallet.ctoFeesUsd == 0.0
        price_history.get.assert_not_called()

    def test_failure_keeps_previous_records_and_advances_timestamp(self, snapshot, helius, price_history, forecast):
        cycle = _fast(snapshot, helius, price_history, forecast)
        cycle.run()
        before = snapshot.read()

        helius.get_all_enhanced_transactions.side_effect = UpstreamError("down")
        assert cycle.run() is False

        after = snapshot.read()
        assert after.burn == before.burn
        assert after.wallet == before.wallet
        assert after.forecast == before.forecast
        assert after.last_updated > before.last_updated

    def test_failure_on_cold_cache_still_marks_attempt(self, snapshot, helius, price_history):
        helius.get_token_supply_ui.side_effect = UpstreamError("down")

        assert _fast(snapshot, helius, price_history).run() is False

        view = snapshot.read()
        assert view.is_initialized
        assert view.burn is None

    def test_forecast_outage_keeps_previous_forecast(self, snapshot, helius, price_history, forecast):
        cycle = _fast(snapshot, helius, price_history, forecast)
        cycle.run()

        helius.get_token_supply_ui.return_value = 300_000_000
        forecast.fetch_platform_stats.return_value = None
        assert cycle.run() is True

        view = snapshot.read()
        assert view.forecast == ForecastStats(**FORECAST)
        assert view.burn.burnedPercent == pytest.approx(70.0)

    def test_disabled_forecast_reports_zeros(self, snapshot, helius, price_history, forecast):
        forecast.enabled = False
        _fast(snapshot, helius, price_history, forecast).run()

        assert snapshot.read().forecast == ForecastStats()
        forecast.fetch_platform_stats.assert_not_called()

    def test_never_touches_prices(self, snapshot, helius, price_history):
        _fast(snapshot, helius, price_history).run()

        helius.fetch_token_price_usd.assert_not_called()
        helius.fetch_sol_price_usd.assert_not_called()


class TestPriceCycle:
    def test_updates_prices_only(self, snapshot, helius):
        burn = BurnStats(1.0, 2.0, 3.0)
        snapshot.commit_fast_cycle(burn, WalletStats(), ForecastStats(), 500)

        assert PriceCycle(snapshot, helius, clock=Clock(), mint=MINT).run() is True

        view = snapshot.read()
        assert view.prices.tokenPriceUsd == 0.002
        assert view.prices.solPriceUsd == 150.0
        assert view.burn == burn
        assert view.last_updated == 2_000
        helius.fetch_token_price_usd.assert_called_once_with(MINT)

    def test_unknown_price_keeps_last_known(self, snapshot, helius):
        cycle = PriceCycle(snapshot, helius, clock=Clock(), mint=MINT)
        cycle.run()

        helius.fetch_token_price_usd.return_value = 0.0
        assert cycle.run() is False

        assert snapshot.read().prices.tokenPriceUsd == 0.002

    def test_unexpected_error_advances_timestamp(self, snapshot, helius):
        helius.fetch_sol_price_usd.side_effect = RuntimeError("boom")

        assert PriceCycle(snapshot, helius, clock=Clock(), mint=MINT).run() is False
        assert snapshot.read().last_updated == 2_000
