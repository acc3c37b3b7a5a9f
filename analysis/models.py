"""
Value types shared by the technical analysis modules.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class Trend(Enum):
    """Trend classification."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class PricePoint:
    """A single closing price."""
    date: date
    price: float
    timestamp: int  # epoch milliseconds

    @classmethod
    def from_timestamp(cls, timestamp_ms: int, price: float) -> "PricePoint":
        """Build a point from an epoch-ms timestamp, deriving the UTC date."""
        day = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).date()
        return cls(date=day, price=float(price), timestamp=int(timestamp_ms))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "price": self.price,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricePoint":
        return cls(
            date=date.fromisoformat(data["date"]),
            price=float(data["price"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram."""
    macd: float = 0.0
    signal: float = 0.0
    histogram: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"macd": self.macd, "signal": self.signal, "histogram": self.histogram}


@dataclass(frozen=True)
class PivotLevels:
    """Classic pivot point with its derived levels."""
    pivot: float
    support: List[float] = field(default_factory=list)
    resistance: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class SupportResistance:
    """Support levels (descending) and resistance levels (ascending)."""
    support: List[float] = field(default_factory=list)
    resistance: List[float] = field(default_factory=list)
    pivot_point: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "support": list(self.support),
            "resistance": list(self.resistance),
            "pivot_point": self.pivot_point,
        }


@dataclass(frozen=True)
class TechnicalIndicators:
    """Result of a full technical analysis pass."""
    rsi: float
    macd: MACDResult
    momentum: float
    trend: Trend
    confidence: float
    support_resistance: Optional[SupportResistance] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rsi": self.rsi,
            "macd": self.macd.to_dict(),
            "momentum": self.momentum,
            "trend": self.trend.value,
            "confidence": self.confidence,
            "support_resistance": (
                self.support_resistance.to_dict() if self.support_resistance else None
            ),
        }
