"""
Technical analysis engine.

Turns an ordered price history into indicator values, a trend call, a
confidence value and a 0-100 technical score. Every call is independent and
never raises; short or degenerate input resolves to neutral defaults.
"""

from typing import Optional, Sequence

import config
from analysis.indicators import Indicators
from analysis.models import PricePoint, SupportResistance, TechnicalIndicators, Trend
from analysis.support_resistance import SupportResistanceCalculator
from utils.logger import get_logger

logger = get_logger(__name__)


class TechnicalAnalyzer:
    """Compute technical indicators and score them."""

    @staticmethod
    def classify_trend(rsi: float, histogram: float, momentum: float) -> Trend:
        """All three signals must agree for a directional trend."""
        if rsi > config.TREND_RSI_BULLISH and histogram > 0 and momentum > 0:
            return Trend.BULLISH
        if rsi < config.TREND_RSI_BEARISH and histogram < 0 and momentum < 0:
            return Trend.BEARISH
        return Trend.NEUTRAL

    @staticmethod
    def calculate_confidence(
        point_count: int,
        trend: Trend,
        rsi: float,
        histogram: float,
        momentum: float
    ) -> float:
        """
        Calculate confidence in the analysis.

        Args:
            point_count: Number of price points analysed
            trend: Classified trend
            rsi: RSI value
            histogram: MACD histogram
            momentum: Momentum percent

        Returns:
            Confidence in [CONFIDENCE_MIN, CONFIDENCE_MAX]
        """
        confidence = config.CONFIDENCE_BASE

        for min_points, bonus in config.CONFIDENCE_DATA_BONUS:
            if point_count >= min_points:
                confidence += bonus
                break

        if trend == Trend.BULLISH:
            aligned = sum([rsi > 50, histogram > 0, momentum > 0])
        elif trend == Trend.BEARISH:
            aligned = sum([rsi < 50, histogram < 0, momentum < 0])
        else:
            aligned = 0

        confidence += (aligned / 3) * config.CONFIDENCE_ALIGNMENT_BONUS

        return float(max(config.CONFIDENCE_MIN, min(config.CONFIDENCE_MAX, confidence)))

    def analyze_technical(self, series: Sequence[PricePoint]) -> TechnicalIndicators:
        """
        Analyze all technical indicators.

        Args:
            series: Price points, oldest first

        Returns:
            TechnicalIndicators for the latest point
        """
        prices = [p.price for p in series]

        rsi = Indicators.rsi(prices)
        macd = Indicators.macd(prices)
        momentum = Indicators.momentum(prices)
        support_resistance = SupportResistanceCalculator.calculate(series)

        trend = self.classify_trend(rsi, macd.histogram, momentum)
        confidence = self.calculate_confidence(
            len(series), trend, rsi, macd.histogram, momentum
        )

        logger.debug(
            "Technical analysis over %d points: RSI=%.1f hist=%.4f momentum=%.2f%% trend=%s",
            len(series), rsi, macd.histogram, momentum, trend.value
        )

        return TechnicalIndicators(
            rsi=rsi,
            macd=macd,
            momentum=momentum,
            trend=trend,
            confidence=confidence,
            support_resistance=support_resistance,
        )

    def calculate_technical_score(
        self,
        indicators: TechnicalIndicators,
        current_price: Optional[float] = None
    ) -> int:
        """
        Calculate technical score (0-100).

        Args:
            indicators: Result of analyze_technical
            current_price: Latest price for support/resistance checks

        Returns:
            Integer score, higher is more bullish
        """
        score = 50

        # RSI
        if indicators.rsi > config.RSI_OVERBOUGHT:
            score -= 20
        elif indicators.rsi < config.RSI_OVERSOLD:
            score += 20
        elif config.RSI_HEALTHY_LOW <= indicators.rsi <= config.RSI_HEALTHY_HIGH:
            score += 15

        # MACD
        if indicators.macd.histogram > 0:
            score += 15
        else:
            score -= 15

        # Momentum
        if indicators.momentum > config.MOMENTUM_STRONG:
            score += 15
        elif indicators.momentum < -config.MOMENTUM_STRONG:
            score -= 15

        levels = indicators.support_resistance
        if levels is not None and current_price and current_price > 0:
            score += self._level_adjustment(levels, current_price)

        return max(0, min(100, score))

    @staticmethod
    def _level_adjustment(levels: SupportResistance, price: float) -> int:
        """Score change from the price's position relative to S/R levels."""
        adjustment = 0

        near_support = any(
            abs(price - s) / price < config.NEAR_LEVEL_PERCENT for s in levels.support
        )
        near_resistance = any(
            abs(price - r) / price < config.NEAR_LEVEL_PERCENT for r in levels.resistance
        )

        if near_support and not near_resistance:
            adjustment += 10
        elif near_resistance and not near_support:
            adjustment -= 10

        if TechnicalAnalyzer._broke_resistance(levels, price) is not None:
            adjustment += 15

        if TechnicalAnalyzer._broke_support(levels, price) is not None:
            adjustment -= 15

        return adjustment

    @staticmethod
    def _broke_resistance(levels: SupportResistance, price: float) -> Optional[float]:
        """First resistance the price sits just above, if any."""
        for r in levels.resistance:
            if r > 0 and price > r and (price - r) / r < config.BREAKOUT_PERCENT:
                return r
        return None

    @staticmethod
    def _broke_support(levels: SupportResistance, price: float) -> Optional[float]:
        """First support the price sits just below, if any."""
        for s in levels.support:
            if s > 0 and price < s and (s - price) / s < config.BREAKOUT_PERCENT:
                return s
        return None

    def explain(
        self,
        indicators: TechnicalIndicators,
        score: int,
        current_price: Optional[float] = None
    ) -> str:
        """
        Build a short narrative of the technical picture.

        Args:
            indicators: Result of analyze_technical
            score: Technical score
            current_price: Latest price

        Returns:
            Explanation text
        """
        parts = []
        rsi = indicators.rsi

        if rsi > config.RSI_OVERBOUGHT:
            parts.append(f"RSI at {rsi:.1f} indicates overbought conditions, suggesting potential pullback.")
        elif rsi < config.RSI_OVERSOLD:
            parts.append(f"RSI at {rsi:.1f} shows oversold levels, indicating potential bounce opportunity.")
        elif config.RSI_HEALTHY_LOW <= rsi <= config.RSI_HEALTHY_HIGH:
            parts.append(f"RSI at {rsi:.1f} reflects healthy bullish momentum without extreme readings.")
        else:
            parts.append(f"RSI at {rsi:.1f} is in neutral territory.")

        if indicators.macd.histogram > 0:
            parts.append("MACD histogram is positive, confirming upward price momentum.")
        else:
            parts.append("MACD histogram is negative, indicating downward pressure.")

        levels = indicators.support_resistance
        if levels is not None and current_price and current_price > 0:
            broke_resistance = self._broke_resistance(levels, current_price)
            broke_support = self._broke_support(levels, current_price)
            nearest_support = next(
                (s for s in levels.support
                 if abs(current_price - s) / current_price < config.NEAR_LEVEL_PERCENT),
                None
            )
            nearest_resistance = next(
                (r for r in levels.resistance
                 if abs(current_price - r) / current_price < config.NEAR_LEVEL_PERCENT),
                None
            )

            if broke_resistance is not None:
                parts.append(
                    f"Price recently broke above resistance at {broke_resistance:.2f}, "
                    "signaling a bullish breakout opportunity."
                )
            elif broke_support is not None:
                parts.append(
                    f"Price fell below support at {broke_support:.2f}, "
                    "indicating potential continued weakness."
                )
            elif nearest_support is not None:
                parts.append(
                    f"Price is near strong support at {nearest_support:.2f}, "
                    "offering a potential entry point with limited downside."
                )
            elif nearest_resistance is not None:
                parts.append(
                    f"Price is approaching resistance at {nearest_resistance:.2f}, "
                    "which could cap upside in the near term."
                )

        if score >= 60:
            outlook = "bullish"
        elif score <= 40:
            outlook = "bearish"
        else:
            outlook = "neutral"
        parts.append(
            f"Overall trend is {indicators.trend.value}, supporting a {outlook} technical outlook."
        )

        return " ".join(parts)
