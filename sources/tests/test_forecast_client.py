from conftest import make_response
from sources.forecast import ForecastClient


class TestForecastClient:
    def test_reads_platform_stats(self, session):
        session.request.return_value = make_response(200, {
            "platformStats": {
                "totalVolume": 12.5,
                "totalFees": 1.25,
                "totalWinnings": 8,
                "totalLifetimeUsers": 42,
            }
        })

        stats = ForecastClient("https://forecast.test/", session=session).fetch_platform_stats()

        assert stats == {"totalVolume": 12.5, "totalFees": 1.25, "totalWinnings": 8, "totalLifetimeUsers": 42}
        args, _ = session.request.call_args
        assert args == ("GET", "https://forecast.test/api/state")

    def test_missing_fields_default_to_zero(self, session):
        session.request.return_value = make_response(200, {"platformStats": {"totalVolume": 3}})

        stats = ForecastClient("https://forecast.test", session=session).fetch_platform_stats()

        assert stats == {"totalVolume": 3, "totalFees": 0, "totalWinnings": 0, "totalLifetimeUsers": 0}

    def test_missing_platform_stats(self, session):
        session.request.return_value = make_response(200, {})
        stats = ForecastClient("https://forecast.test", session=session).fetch_platform_stats()
        assert set(stats.values()) == {0}

    def test_failure_returns_none(self, session):
        session.request.return_value = make_response(404)
        assert ForecastClient("https://forecast.test", session=session).fetch_platform_stats() is None

    def test_empty_url_disables(self, session):
        assert not ForecastClient("", session=session).enabled
        assert ForecastClient("https://forecast.test", session=session).enabled
