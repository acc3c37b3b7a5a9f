"""
Technical indicators for market analysis.

Each indicator reduces an ordered list of closing prices to the latest value
and falls back to a neutral default when there is not enough history.
"""

import numpy as np
from typing import Sequence

import config
from analysis.models import MACDResult


class Indicators:
    """Technical indicator calculations."""

    @staticmethod
    def rsi(prices: Sequence[float], period: int = None) -> float:
        """
        Calculate Relative Strength Index with Wilder's smoothing.

        Args:
            prices: Closing prices, oldest first
            period: RSI period (default from config)

        Returns:
            RSI value in [0, 100]; 50 when history is too short or flat
        """
        if period is None:
            period = config.RSI_PERIOD
        if period < 1 or len(prices) < period + 1:
            return 50.0

        deltas = np.diff(np.asarray(prices, dtype=float))
        gains = np.where(deltas > 0, deltas, 0.0)
        losses = np.where(deltas < 0, -deltas, 0.0)

        avg_gain = float(gains[:period].sum()) / period
        avg_loss = float(losses[:period].sum()) / period

        for gain, loss in zip(gains[period:], losses[period:]):
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period

        if avg_loss == 0:
            # No losses at all: maximal strength, unless nothing moved either
            return 50.0 if avg_gain == 0 else 100.0

        rs = avg_gain / avg_loss
        return float(100 - (100 / (1 + rs)))

    @staticmethod
    def ema(prices: Sequence[float], period: int) -> float:
        """
        Calculate the latest Exponential Moving Average.

        Seeded with the simple mean of the first `period` prices.

        Args:
            prices: Closing prices, oldest first
            period: EMA period

        Returns:
            Latest EMA value (last price if fewer than `period` prices)
        """
        if len(prices) == 0:
            return 0.0
        if len(prices) < period:
            return float(prices[-1])

        multiplier = 2 / (period + 1)
        ema = float(np.mean(prices[:period]))

        for price in prices[period:]:
            ema = (price - ema) * multiplier + ema

        return float(ema)

    @staticmethod
    def macd(prices: Sequence[float]) -> MACDResult:
        """
        Calculate MACD (Moving Average Convergence Divergence).

        The signal line is approximated as a fixed ratio of the MACD line
        rather than an EMA of it.

        Args:
            prices: Closing prices, oldest first

        Returns:
            MACDResult (all zeros with fewer than MACD_SLOW prices)
        """
        if len(prices) < config.MACD_SLOW:
            return MACDResult()

        ema_fast = Indicators.ema(prices, config.MACD_FAST)
        ema_slow = Indicators.ema(prices, config.MACD_SLOW)

        macd_line = ema_fast - ema_slow
        signal_line = macd_line * config.MACD_SIGNAL_RATIO
        histogram = macd_line - signal_line

        return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)

    @staticmethod
    def momentum(prices: Sequence[float], period: int = None) -> float:
        """
        Calculate momentum as percent rate of change.

        Args:
            prices: Closing prices, oldest first
            period: Lookback in points (default from config)

        Returns:
            Percent change from prices[-period] to the last price
        """
        if period is None:
            period = config.MOMENTUM_PERIOD
        if period < 1 or len(prices) < period:
            return 0.0

        current = prices[-1]
        past = prices[-period]
        if past == 0:
            return 0.0

        return float((current - past) / past * 100)
