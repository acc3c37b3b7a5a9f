"""
Market data access for price history.
"""

import pandas as pd
from typing import Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

import config
from analysis.models import PricePoint
from data.yahoo_client import YahooClient
from utils.logger import get_logger

logger = get_logger(__name__)


def frame_to_price_points(data: pd.DataFrame) -> List[PricePoint]:
    """
    Convert an OHLCV DataFrame into price points.

    Args:
        data: DataFrame with a 'close' column and a datetime index

    Returns:
        Price points ordered oldest first, skipping missing or non-positive closes
    """
    if data.empty:
        return []

    df = data.sort_index()
    index = pd.to_datetime(df.index, utc=True)
    points = []

    for ts, close in zip(index, df["close"]):
        if pd.isna(close) or close <= 0:
            continue
        points.append(PricePoint.from_timestamp(ts.value // 1_000_000, close))

    return points


class MarketData:
    """Fetches price history from the configured data source."""

    def __init__(
        self,
        yahoo_client: Optional[YahooClient] = None,
        alpaca_client=None,
        source: str = None
    ):
        """
        Initialize market data access.

        Args:
            yahoo_client: Yahoo client instance (created if None)
            alpaca_client: Alpaca client instance, required for source 'alpaca'
            source: 'yahoo' or 'alpaca' (default from config)
        """
        self.source = (source or config.PRICE_SOURCE).lower()
        self.yahoo = yahoo_client or YahooClient()
        self.alpaca = alpaca_client

        if self.source == "alpaca" and self.alpaca is None:
            logger.warning("Alpaca source selected without a client, using Yahoo")
            self.source = "yahoo"

    def get_price_history(self, symbol: str) -> pd.DataFrame:
        """
        Get daily price history for a symbol.

        Args:
            symbol: Stock symbol

        Returns:
            DataFrame with OHLCV data
        """
        if self.source == "alpaca":
            return self.alpaca.get_historical_bars(symbol, config.HISTORY_INTERVAL)
        return self.yahoo.get_historical_bars(symbol)

    def get_price_points(self, symbol: str) -> List[PricePoint]:
        """Get daily price history as price points."""
        points = frame_to_price_points(self.get_price_history(symbol))
        if not points:
            raise ValueError(f"No price history for {symbol}")
        return points

    def get_latest_price(self, symbol: str) -> float:
        """Get latest price for a symbol."""
        if self.source == "alpaca":
            return self.alpaca.get_latest_price(symbol)
        return self.yahoo.get_latest_price(symbol)

    def fetch_many(
        self,
        symbols: List[str],
        max_workers: int = 5
    ) -> Dict[str, List[PricePoint]]:
        """
        Fetch price points for several symbols concurrently.

        Args:
            symbols: Stock symbols
            max_workers: Thread pool size

        Returns:
            Dictionary of symbol -> price points for symbols that succeeded
        """
        results = {}

        def fetch(symbol: str) -> Optional[List[PricePoint]]:
            try:
                return self.get_price_points(symbol)
            except Exception as e:
                logger.error("Error fetching %s: %s", symbol, e)
                return None

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(fetch, s): s for s in symbols}
            for future in as_completed(futures):
                points = future.result()
                if points:
                    results[futures[future]] = points

        logger.info("Fetched price history for %d of %d symbols", len(results), len(symbols))
        return results
