from unittest.mock import MagicMock

import pytest

from core.config import Settings


def make_response(status: int = 200, payload=None):
    res = MagicMock()
    res.status_code = status
    res.ok = 200 <= status < 300
    res.json.return_value = payload
    return res


@pytest.fixture
def settings():
    return Settings(
        helius_api_key="test-key",
        coingecko_api_key="cg-key",
        forecast_api_url="https://forecast.test",
        price_cache_path="",
        fast_cycle_seconds=60,
        price_cycle_seconds=600,
        price_stagger_seconds=30,
    )


@pytest.fixture
def session():
    return MagicMock()
