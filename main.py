#!/usr/bin/env python3
"""
Technical Insights

Command-line entry point. Fetches daily price history, runs the technical
analysis engine and prints BUY / HOLD / SELL recommendations.
"""

import json
import sys
from typing import List, Optional

import config
from analysis.signal_generator import SignalGenerator
from data.cache import JsonFileCache, MemoryCache
from data.market_data import MarketData
from utils.logger import setup_logger, get_logger, InsightLogger

logger = get_logger(__name__)


def build_market_data() -> MarketData:
    """Create market data access for the configured source."""
    alpaca = None
    if config.PRICE_SOURCE == "alpaca" and config.ALPACA_API_KEY:
        try:
            from data.alpaca_client import AlpacaClient
            alpaca = AlpacaClient()
        except Exception as e:
            logger.warning("Failed to initialize Alpaca: %s", e)
    return MarketData(alpaca_client=alpaca)


def run(
    symbols: List[str],
    as_json: bool = False,
    use_cache: bool = True,
    cache_file: Optional[str] = None
) -> int:
    """
    Generate and print insights for symbols.

    Returns:
        Process exit code
    """
    cache = JsonFileCache(cache_file) if use_cache else MemoryCache()
    generator = SignalGenerator(market_data=build_market_data(), cache=cache)
    insight_logger = InsightLogger()

    insights = generator.scan_for_signals(symbols)
    if not insights:
        logger.error("No insights generated for %s", ", ".join(symbols))
        return 1

    for insight in insights:
        insight_logger.log_insight(
            symbol=insight.symbol,
            recommendation=insight.recommendation.value,
            price=insight.price,
            score=insight.score,
            confidence=insight.indicators.confidence,
            trend=insight.indicators.trend.value
        )

    if as_json:
        print(json.dumps([i.to_dict() for i in insights], indent=2))
    else:
        for insight in insights:
            print(generator.get_signal_summary(insight))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Technical analysis recommendations for stocks"
    )
    parser.add_argument(
        "symbols",
        nargs="*",
        help="Stock symbols to analyze"
    )
    parser.add_argument(
        "--watchlist",
        action="store_true",
        help="Analyze the configured watchlist"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print insights as JSON"
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the price history cache file"
    )
    parser.add_argument(
        "--cache-file",
        default=None,
        help="Price history cache file (default from config)"
    )

    args = parser.parse_args(argv)

    symbols = [s.upper() for s in args.symbols]
    if args.watchlist:
        symbols.extend(s for s in config.STOCK_WATCHLIST if s not in symbols)
    if not symbols:
        parser.error("provide at least one symbol or --watchlist")

    # Keep stdout clean for JSON output
    setup_logger(console=not args.json)
    return run(
        symbols,
        as_json=args.json,
        use_cache=not args.no_cache,
        cache_file=args.cache_file
    )


if __name__ == "__main__":
    sys.exit(main())
