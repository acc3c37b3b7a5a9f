"""Price history retrieval and caching modules."""

from .yahoo_client import YahooClient
from .market_data import MarketData, frame_to_price_points
from .cache import PriceCache, MemoryCache, JsonFileCache

__all__ = [
    "YahooClient", "MarketData", "frame_to_price_points",
    "PriceCache", "MemoryCache", "JsonFileCache",
]
