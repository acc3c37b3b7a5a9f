"""
Alpaca market data client for stock price history.
"""

import pandas as pd
from datetime import datetime, timedelta
from alpaca.data.historical import StockHistoricalDataClient
from alpaca.data.requests import StockBarsRequest
from alpaca.data.timeframe import TimeFrame, TimeFrameUnit

import config
from utils.logger import get_logger

logger = get_logger(__name__)


class AlpacaClient:
    """Client for reading stock bars from the Alpaca data API."""

    def __init__(self):
        """Initialize Alpaca data client with API credentials."""
        self.data_client = StockHistoricalDataClient(
            api_key=config.ALPACA_API_KEY,
            secret_key=config.ALPACA_SECRET_KEY
        )
        logger.info("Alpaca data client initialized")

    def get_historical_bars(
        self,
        symbol: str,
        timeframe: str = "1d",
        days: int = None
    ) -> pd.DataFrame:
        """
        Get historical OHLCV data for a symbol.

        Args:
            symbol: Stock symbol
            timeframe: Candle timeframe (1m, 5m, 15m, 1h, 1d)
            days: Number of calendar days of history

        Returns:
            DataFrame with OHLCV data
        """
        days = days or config.HISTORY_DAYS
        tf_map = {
            "1m": TimeFrame(1, TimeFrameUnit.Minute),
            "5m": TimeFrame(5, TimeFrameUnit.Minute),
            "15m": TimeFrame(15, TimeFrameUnit.Minute),
            "1h": TimeFrame(1, TimeFrameUnit.Hour),
            "1d": TimeFrame(1, TimeFrameUnit.Day),
        }

        tf = tf_map.get(timeframe, TimeFrame(1, TimeFrameUnit.Day))
        end = datetime.now()
        start = end - timedelta(days=days)

        request = StockBarsRequest(
            symbol_or_symbols=symbol,
            timeframe=tf,
            start=start,
            end=end
        )

        try:
            bars = self.data_client.get_stock_bars(request)
        except Exception as e:
            raise ValueError(f"Failed to fetch bars for {symbol}: {e}") from e

        df = bars.df
        if df.empty:
            return pd.DataFrame(columns=["open", "high", "low", "close", "volume"])

        if isinstance(df.index, pd.MultiIndex):
            df = df.xs(symbol, level="symbol")

        df = df[["open", "high", "low", "close", "volume"]].copy()
        df.index = pd.to_datetime(df.index, utc=True)
        df.index.name = "timestamp"

        logger.debug("Fetched %d bars for %s", len(df), symbol)
        return df

    def get_latest_price(self, symbol: str) -> float:
        """Get the latest price for a symbol."""
        bars = self.get_historical_bars(symbol, "1m", days=1)
        if bars.empty:
            raise ValueError(f"No price data for {symbol}")
        return float(bars["close"].iloc[-1])
