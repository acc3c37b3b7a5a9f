"""
Unit tests for the recommendation generator.
"""

import pytest
import pandas as pd
from datetime import date, timedelta

import sys
sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])

from analysis.models import PricePoint, Trend
from analysis.signal_generator import Recommendation, SignalGenerator, TechnicalInsight
from data.cache import MemoryCache


def make_series(prices) -> list:
    start = date(2024, 1, 1)
    epoch = 1704067200000
    return [
        PricePoint(date=start + timedelta(days=i), price=float(p), timestamp=epoch + i * 86_400_000)
        for i, p in enumerate(prices)
    ]


class FakeMarketData:
    """Stands in for MarketData with canned histories."""

    def __init__(self, histories):
        self.histories = histories
        self.calls = []

    def get_price_points(self, symbol):
        self.calls.append(symbol)
        if symbol not in self.histories:
            raise ValueError(f"No price history for {symbol}")
        return self.histories[symbol]

    def fetch_many(self, symbols, max_workers=5):
        results = {}
        for symbol in symbols:
            try:
                results[symbol] = self.get_price_points(symbol)
            except ValueError:
                continue
        return results


@pytest.fixture
def uptrend() -> list:
    """40 closes rising 100 -> 139."""
    return make_series(range(100, 140))


@pytest.fixture
def downtrend() -> list:
    """40 closes falling 200 -> 161."""
    return make_series(range(200, 160, -1))


class TestRecommendationMapping:
    """Tests for score thresholds."""

    @pytest.mark.parametrize("score,expected", [
        (100, Recommendation.BUY),
        (65, Recommendation.BUY),
        (64, Recommendation.HOLD),
        (45, Recommendation.HOLD),
        (44, Recommendation.SELL),
        (0, Recommendation.SELL),
    ])
    def test_thresholds(self, score, expected):
        assert SignalGenerator.recommendation_for(score) == expected


class TestAnalyze:
    """Tests for analyzing supplied history."""

    def test_uptrend_from_price_points(self, uptrend):
        # RSI 100 (-20), positive histogram (+15), momentum ~6.9% (+15)
        insight = SignalGenerator().analyze("aapl", uptrend)

        assert isinstance(insight, TechnicalInsight)
        assert insight.symbol == "AAPL"
        assert insight.price == 139.0
        assert insight.score == 60
        assert insight.recommendation == Recommendation.HOLD
        assert insight.indicators.trend == Trend.BULLISH
        assert insight.data_points == 40
        assert "RSI at 100.0" in insight.explanation

    def test_uptrend_from_dataframe(self, uptrend):
        index = pd.date_range("2024-01-01", periods=40, freq="D", tz="UTC")
        df = pd.DataFrame({"close": [float(p) for p in range(100, 140)]}, index=index)

        from_frame = SignalGenerator().analyze("AAPL", df)
        from_points = SignalGenerator().analyze("AAPL", uptrend)

        assert from_frame.score == from_points.score
        assert from_frame.indicators.rsi == from_points.indicators.rsi

    def test_downtrend_is_sell(self, downtrend):
        # RSI 0 (+20), negative histogram (-15), momentum ~-5.3% (-15)
        insight = SignalGenerator().analyze("XYZ", downtrend)

        assert insight.score == 40
        assert insight.recommendation == Recommendation.SELL
        assert insight.indicators.trend == Trend.BEARISH

    def test_empty_history(self):
        insight = SignalGenerator().analyze("NONE", [])

        assert insight.price == 0.0
        assert insight.data_points == 0
        assert insight.recommendation == Recommendation.HOLD

    def test_to_dict(self, uptrend):
        data = SignalGenerator().analyze("AAPL", uptrend).to_dict()

        assert data["recommendation"] == "HOLD"
        assert data["score"] == 60
        assert data["confidence"] == 90
        assert data["indicators"]["trend"] == "bullish"


class TestGenerateInsight:
    """Tests for fetching and caching."""

    def test_uses_cache(self, uptrend):
        market_data = FakeMarketData({"AAPL": uptrend})
        generator = SignalGenerator(market_data=market_data, cache=MemoryCache())

        first = generator.generate_insight("AAPL")
        second = generator.generate_insight("AAPL")

        assert market_data.calls == ["AAPL"]
        assert first.score == second.score

    def test_without_cache_fetches_each_time(self, uptrend):
        market_data = FakeMarketData({"AAPL": uptrend})
        generator = SignalGenerator(market_data=market_data)

        generator.generate_insight("AAPL")
        generator.generate_insight("AAPL")

        assert market_data.calls == ["AAPL", "AAPL"]

    def test_no_source_raises(self):
        with pytest.raises(ValueError):
            SignalGenerator().generate_insight("AAPL")

    def test_unknown_symbol_raises(self):
        generator = SignalGenerator(market_data=FakeMarketData({}))
        with pytest.raises(ValueError):
            generator.generate_insight("NOPE")


class TestScanForSignals:
    """Tests for multi-symbol scans."""

    def test_sorted_by_score_and_skips_failures(self, uptrend, downtrend):
        market_data = FakeMarketData({"UP": uptrend, "DOWN": downtrend})
        generator = SignalGenerator(market_data=market_data, cache=MemoryCache())

        insights = generator.scan_for_signals(["DOWN", "BAD", "UP"])

        assert [i.symbol for i in insights] == ["UP", "DOWN"]
        assert insights[0].score >= insights[1].score

    def test_cached_symbols_not_refetched(self, uptrend, downtrend):
        market_data = FakeMarketData({"UP": uptrend, "DOWN": downtrend})
        generator = SignalGenerator(market_data=market_data, cache=MemoryCache())

        generator.scan_for_signals(["UP"])
        generator.scan_for_signals(["UP", "DOWN"])

        assert market_data.calls == ["UP", "DOWN"]

    def test_without_source_uses_cache_only(self, uptrend):
        cache = MemoryCache()
        SignalGenerator(market_data=FakeMarketData({"UP": uptrend}), cache=cache).scan_for_signals(["UP"])

        insights = SignalGenerator(cache=cache).scan_for_signals(["UP", "DOWN"])
        assert [i.symbol for i in insights] == ["UP"]

    def test_unreadable_cache_entry_is_refetched(self, uptrend, downtrend):
        cache = MemoryCache()
        cache.set("BAD:3mo:1d", [{"price": 1.0}])
        cache.set("ODD:3mo:1d", [1, 2])
        market_data = FakeMarketData({"BAD": downtrend, "GOOD": uptrend})
        generator = SignalGenerator(market_data=market_data, cache=cache)

        insights = generator.scan_for_signals(["BAD", "ODD", "GOOD"])

        assert [i.symbol for i in insights] == ["GOOD", "BAD"]
        assert sorted(market_data.calls) == ["BAD", "GOOD", "ODD"]
        assert cache.get("BAD:3mo:1d")[0]["price"] == 200.0


class TestSummary:
    """Tests for text summaries."""

    def test_summary_contents(self, uptrend):
        generator = SignalGenerator()
        summary = generator.get_signal_summary(generator.analyze("AAPL", uptrend))

        assert "INSIGHT: HOLD AAPL" in summary
        assert "Technical Score: 60/100" in summary
        assert "Trend: bullish" in summary
        assert "Support: $" in summary
        assert "Resistance: $" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
