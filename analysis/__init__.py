"""Technical analysis modules."""

from .models import PricePoint, MACDResult, SupportResistance, TechnicalIndicators, Trend
from .indicators import Indicators
from .support_resistance import SupportResistanceCalculator
from .technical_analysis import TechnicalAnalyzer

__all__ = [
    "PricePoint", "MACDResult", "SupportResistance", "TechnicalIndicators", "Trend",
    "Indicators", "SupportResistanceCalculator", "TechnicalAnalyzer",
]
