"""
Configuration settings for the Technical Insights engine.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Price Data Source
PRICE_SOURCE = os.getenv("PRICE_SOURCE", "yahoo").lower()  # 'yahoo' or 'alpaca'
HISTORY_RANGE = os.getenv("HISTORY_RANGE", "3mo")  # ~63 daily candles
HISTORY_INTERVAL = "1d"
HISTORY_DAYS = 100  # Calendar days requested from Alpaca
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# Yahoo Finance Configuration
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
YAHOO_USER_AGENT = os.getenv("YAHOO_USER_AGENT", "Mozilla/5.0 (technical-insights)")

# Alpaca Configuration
ALPACA_API_KEY = os.getenv("ALPACA_API_KEY", "")
ALPACA_SECRET_KEY = os.getenv("ALPACA_SECRET_KEY", "")

# Cache Settings
CACHE_TTL_MINUTES = int(os.getenv("CACHE_TTL_MINUTES", "15"))
CACHE_FILE = os.getenv("CACHE_FILE", "data/price-cache.json")

# Technical Indicator Settings
RSI_PERIOD = 14
RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70
RSI_HEALTHY_LOW = 50
RSI_HEALTHY_HIGH = 60
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL_RATIO = 0.9  # Signal line approximated as a fixed share of MACD
MOMENTUM_PERIOD = 10
MOMENTUM_STRONG = 5.0  # Percent

# Trend Classification
TREND_RSI_BULLISH = 60
TREND_RSI_BEARISH = 40

# Support / Resistance Settings
PIVOT_LOOKBACK = 20
EXTREMA_WINDOW = 5
CLUSTER_TOLERANCE = 0.02  # Levels within 2% merge into one
MAX_LEVELS = 3
NEAR_LEVEL_PERCENT = 0.03  # Price within 3% of a level
BREAKOUT_PERCENT = 0.05  # Price just past a level by less than 5%

# Confidence Settings
CONFIDENCE_BASE = 50
CONFIDENCE_MIN = 30
CONFIDENCE_MAX = 95
CONFIDENCE_ALIGNMENT_BONUS = 25
# (minimum data points, bonus) checked in order
CONFIDENCE_DATA_BONUS = [(90, 25), (60, 20), (30, 15), (0, 5)]

# Recommendation Thresholds
BUY_SCORE_THRESHOLD = 65
SELL_SCORE_THRESHOLD = 44

# Watchlist
STOCK_WATCHLIST = [
    # Mega Cap Tech
    "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "META", "TSLA", "AVGO", "ORCL",
    # Semiconductors
    "AMD", "INTC", "QCOM", "MU", "AMAT",
    # Financials
    "JPM", "BAC", "GS", "V", "MA",
    # Healthcare
    "UNH", "JNJ", "LLY", "ABBV",
    # Consumer
    "WMT", "COST", "HD", "MCD", "NKE",
    # Energy
    "XOM", "CVX",
]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")
