"""
Recommendation generator built on the technical analysis engine.
"""

import pandas as pd
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union
from dataclasses import dataclass
from enum import Enum

import config
from analysis.models import PricePoint, TechnicalIndicators
from analysis.technical_analysis import TechnicalAnalyzer
from data.cache import PriceCache
from data.market_data import MarketData, frame_to_price_points
from utils.logger import get_logger

logger = get_logger(__name__)


class Recommendation(Enum):
    """Recommendation types."""
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"


@dataclass
class TechnicalInsight:
    """Technical recommendation with supporting data."""
    symbol: str
    price: float
    recommendation: Recommendation
    score: int
    indicators: TechnicalIndicators
    explanation: str
    data_points: int
    generated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "price": self.price,
            "recommendation": self.recommendation.value.upper(),
            "score": self.score,
            "confidence": self.indicators.confidence,
            "indicators": self.indicators.to_dict(),
            "explanation": self.explanation,
            "data_points": self.data_points,
            "generated_at": self.generated_at,
        }


class SignalGenerator:
    """Generate recommendations from price history."""

    def __init__(
        self,
        market_data: Optional[MarketData] = None,
        cache: Optional[PriceCache] = None,
        analyzer: Optional[TechnicalAnalyzer] = None
    ):
        """
        Initialize signal generator.

        Args:
            market_data: Price history source (needed for fetching by symbol)
            cache: Optional cache for fetched price history
            analyzer: Technical analysis engine
        """
        self.market_data = market_data
        self.cache = cache
        self.analyzer = analyzer or TechnicalAnalyzer()

    @staticmethod
    def recommendation_for(score: int) -> Recommendation:
        """Map a technical score to a recommendation."""
        if score >= config.BUY_SCORE_THRESHOLD:
            return Recommendation.BUY
        if score <= config.SELL_SCORE_THRESHOLD:
            return Recommendation.SELL
        return Recommendation.HOLD

    def analyze(
        self,
        symbol: str,
        data: Union[pd.DataFrame, Sequence[PricePoint]]
    ) -> TechnicalInsight:
        """
        Analyze price history and build a recommendation.

        Args:
            symbol: Stock symbol
            data: DataFrame with a 'close' column, or price points oldest first

        Returns:
            TechnicalInsight for the latest price
        """
        if isinstance(data, pd.DataFrame):
            series = frame_to_price_points(data)
        else:
            series = list(data)

        current_price = series[-1].price if series else 0.0

        indicators = self.analyzer.analyze_technical(series)
        score = self.analyzer.calculate_technical_score(indicators, current_price)

        return TechnicalInsight(
            symbol=symbol.upper(),
            price=current_price,
            recommendation=self.recommendation_for(score),
            score=score,
            indicators=indicators,
            explanation=self.analyzer.explain(indicators, score, current_price),
            data_points=len(series),
            generated_at=datetime.now(timezone.utc).isoformat(),
        )

    def _cache_key(self, symbol: str) -> str:
        return f"{symbol.upper()}:{config.HISTORY_RANGE}:{config.HISTORY_INTERVAL}"

    def _cached_points(self, symbol: str) -> Optional[List[PricePoint]]:
        if self.cache is None:
            return None
        cached = self.cache.get(self._cache_key(symbol))
        if cached is None:
            return None
        try:
            points = [PricePoint.from_dict(p) for p in cached]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable cache entry for %s: %s", symbol, e)
            return None
        logger.debug("Cache hit for %s", symbol)
        return points

    def _store_points(self, symbol: str, points: List[PricePoint]):
        if self.cache is not None:
            self.cache.set(self._cache_key(symbol), [p.to_dict() for p in points])

    def get_price_points(self, symbol: str) -> List[PricePoint]:
        """
        Get price history for a symbol, from cache when fresh.

        Raises:
            ValueError: If no market data source is configured or no data exists
        """
        points = self._cached_points(symbol)
        if points is not None:
            return points

        if self.market_data is None:
            raise ValueError(f"No market data source to fetch {symbol}")

        points = self.market_data.get_price_points(symbol)
        self._store_points(symbol, points)
        return points

    def generate_insight(self, symbol: str) -> TechnicalInsight:
        """
        Fetch price history and build a recommendation for one symbol.

        Args:
            symbol: Stock symbol

        Returns:
            TechnicalInsight
        """
        logger.info("Generating technical insight for %s", symbol)
        return self.analyze(symbol, self.get_price_points(symbol))

    def scan_for_signals(self, symbols: List[str]) -> List[TechnicalInsight]:
        """
        Build recommendations for several symbols.

        Args:
            symbols: Stock symbols

        Returns:
            Insights sorted by score, highest first
        """
        histories = {}
        missing = []

        for symbol in symbols:
            points = self._cached_points(symbol)
            if points is None:
                missing.append(symbol)
            else:
                histories[symbol] = points

        if missing:
            if self.market_data is None:
                logger.error("No market data source for %d uncached symbols", len(missing))
            else:
                for symbol, points in self.market_data.fetch_many(missing).items():
                    self._store_points(symbol, points)
                    histories[symbol] = points

        insights = []
        for symbol in symbols:
            if symbol not in histories:
                continue
            try:
                insight = self.analyze(symbol, histories[symbol])
                insights.append(insight)
                logger.info(
                    "Insight: %s %s - score %d (%.0f%% confidence)",
                    insight.recommendation.value.upper(),
                    insight.symbol,
                    insight.score,
                    insight.indicators.confidence
                )
            except Exception as e:
                logger.error("Error analyzing %s: %s", symbol, e)

        insights.sort(key=lambda i: i.score, reverse=True)
        return insights

    def get_signal_summary(self, insight: TechnicalInsight) -> str:
        """
        Get a human-readable summary of an insight.

        Args:
            insight: Technical insight

        Returns:
            Summary string
        """
        ind = insight.indicators
        lines = [
            f"{'=' * 50}",
            f"INSIGHT: {insight.recommendation.value.upper()} {insight.symbol}",
            f"Price: ${insight.price:.2f}",
            f"Technical Score: {insight.score}/100",
            f"Confidence: {ind.confidence:.0f}%",
            f"Trend: {ind.trend.value}",
            "Indicators:",
            f"  RSI: {ind.rsi:.1f}",
            f"  MACD: {ind.macd.macd:.4f} (hist {ind.macd.histogram:.4f})",
            f"  Momentum: {ind.momentum:+.2f}%",
        ]

        sr = ind.support_resistance
        if sr:
            if sr.pivot_point:
                lines.append(f"  Pivot: ${sr.pivot_point:.2f}")
            if sr.support:
                lines.append("  Support: " + ", ".join(f"${s:.2f}" for s in sr.support))
            if sr.resistance:
                lines.append("  Resistance: " + ", ".join(f"${r:.2f}" for r in sr.resistance))

        lines.append(f"Outlook: {insight.explanation}")
        lines.append(f"{'=' * 50}")
        return "\n".join(lines)
