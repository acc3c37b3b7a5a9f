"""
Yahoo Finance chart API client for daily stock prices.
"""

import pandas as pd
import requests
from typing import Any, Dict

import config
from utils.logger import get_logger

logger = get_logger(__name__)


class YahooClient:
    """Client for the public Yahoo Finance v8 chart endpoint."""

    def __init__(self, session: requests.Session = None, timeout: float = None):
        """
        Initialize Yahoo client.

        Args:
            session: Optional requests session (a new one is created if None)
            timeout: Request timeout in seconds (default from config)
        """
        if session is None:
            session = requests.Session()
            # Yahoo rejects the default python-requests agent
            session.headers["User-Agent"] = config.YAHOO_USER_AGENT
        self.session = session
        self.timeout = timeout or config.REQUEST_TIMEOUT

    def _get_chart(self, symbol: str, range_: str, interval: str) -> Dict[str, Any]:
        url = config.YAHOO_CHART_URL.format(symbol=symbol.upper())
        try:
            response = self.session.get(
                url,
                params={"range": range_, "interval": interval},
                timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ValueError(f"Failed to fetch chart for {symbol}: {e}") from e

        chart = payload.get("chart") or {}
        if chart.get("error"):
            raise ValueError(f"Yahoo error for {symbol}: {chart['error']}")

        results = chart.get("result") or []
        if not results:
            raise ValueError(f"No chart data for {symbol}")
        return results[0]

    def get_historical_bars(
        self,
        symbol: str,
        range_: str = None,
        interval: str = None
    ) -> pd.DataFrame:
        """
        Get historical OHLCV data for a symbol.

        Args:
            symbol: Stock symbol
            range_: Yahoo range string (1mo, 3mo, 6mo, 1y, ...)
            interval: Candle interval (1d, 1wk, ...)

        Returns:
            DataFrame with OHLCV columns indexed by UTC timestamp
        """
        range_ = range_ or config.HISTORY_RANGE
        interval = interval or config.HISTORY_INTERVAL

        result = self._get_chart(symbol, range_, interval)
        timestamps = result.get("timestamp") or []
        quotes = (result.get("indicators", {}).get("quote") or [{}])[0]

        columns = {}
        for col in ["open", "high", "low", "close", "volume"]:
            values = quotes.get(col)
            if values is not None and len(values) == len(timestamps):
                columns[col] = values

        if not timestamps or "close" not in columns:
            return pd.DataFrame(columns=["open", "high", "low", "close", "volume"])

        df = pd.DataFrame(columns, index=pd.to_datetime(timestamps, unit="s", utc=True))
        df.index.name = "timestamp"
        df = df.apply(pd.to_numeric, errors="coerce")

        # Yahoo pads halted or in-progress sessions with nulls
        df = df[df["close"].notna() & (df["close"] > 0)]

        logger.debug("Fetched %d bars for %s", len(df), symbol)
        return df

    def get_latest_price(self, symbol: str) -> float:
        """Get the latest regular market price for a symbol."""
        result = self._get_chart(symbol, "1d", "1d")
        price = (result.get("meta") or {}).get("regularMarketPrice")
        if price is None:
            raise ValueError(f"No price data for {symbol}")
        return float(price)
