"""
Support and resistance level detection.

Combines classic pivot points over the recent window with clustered local
extrema over the whole history.
"""

from typing import Dict, List, Sequence

import config
from analysis.models import PivotLevels, PricePoint, SupportResistance


class SupportResistanceCalculator:
    """Calculate support and resistance levels from a price series."""

    @staticmethod
    def pivot_points(
        series: Sequence[PricePoint],
        lookback: int = None
    ) -> PivotLevels:
        """
        Calculate classic pivot point levels.

        Args:
            series: Price points, oldest first
            lookback: Number of recent points to use (default from config)

        Returns:
            PivotLevels with the strictly positive S1/S2 and R1/R2 levels
        """
        if lookback is None:
            lookback = config.PIVOT_LOOKBACK
        if lookback < 1 or len(series) < 1:
            return PivotLevels(pivot=0.0)

        recent = [p.price for p in series[-lookback:]]
        high = max(recent)
        low = min(recent)
        close = recent[-1]

        pivot = (high + low + close) / 3

        support1 = (2 * pivot) - high
        support2 = pivot - (high - low)

        resistance1 = (2 * pivot) - low
        resistance2 = pivot + (high - low)

        return PivotLevels(
            pivot=pivot,
            support=[s for s in (support1, support2) if s > 0],
            resistance=[r for r in (resistance1, resistance2) if r > 0],
        )

    @staticmethod
    def cluster_levels(
        levels: Sequence[float],
        tolerance: float = None
    ) -> List[float]:
        """
        Merge nearby price levels.

        Levels are sorted ascending and consecutive values within `tolerance`
        (relative to the lower value) are averaged into one level.

        Args:
            levels: Candidate price levels
            tolerance: Relative distance below which levels merge

        Returns:
            Clustered levels, ascending
        """
        tolerance = tolerance if tolerance is not None else config.CLUSTER_TOLERANCE
        if len(levels) == 0:
            return []

        ordered = sorted(levels)
        clustered = []
        cluster = [ordered[0]]

        for previous, current in zip(ordered, ordered[1:]):
            if previous == 0:
                same = current == 0
            else:
                same = abs(current - previous) / previous < tolerance

            if same:
                cluster.append(current)
            else:
                clustered.append(sum(cluster) / len(cluster))
                cluster = [current]

        clustered.append(sum(cluster) / len(cluster))
        return clustered

    @staticmethod
    def local_extremes(
        series: Sequence[PricePoint],
        window: int = None
    ) -> Dict[str, List[float]]:
        """
        Find local minima (support) and maxima (resistance).

        A point is an extremum when it equals the min or max of the
        `2 * window + 1` points centred on it. Equal prices all qualify.

        Args:
            series: Price points, oldest first
            window: Neighbours required on each side (default from config)

        Returns:
            Dictionary with 'support' and 'resistance' cluster lists
        """
        if window is None:
            window = config.EXTREMA_WINDOW
        if window < 0 or len(series) < window * 2:
            return {"support": [], "resistance": []}

        prices = [p.price for p in series]
        support = []
        resistance = []

        for i in range(window, len(prices) - window):
            neighbourhood = prices[i - window:i + window + 1]
            current = prices[i]

            if current == min(neighbourhood):
                support.append(current)
            if current == max(neighbourhood):
                resistance.append(current)

        keep = config.MAX_LEVELS
        return {
            "support": SupportResistanceCalculator.cluster_levels(support)[-keep:],
            "resistance": SupportResistanceCalculator.cluster_levels(resistance)[-keep:],
        }

    @staticmethod
    def calculate(series: Sequence[PricePoint]) -> SupportResistance:
        """
        Calculate combined support and resistance levels.

        Args:
            series: Price points, oldest first

        Returns:
            SupportResistance with at most MAX_LEVELS levels per side
        """
        pivot_levels = SupportResistanceCalculator.pivot_points(series)
        extremes = SupportResistanceCalculator.local_extremes(series)

        all_support = set(pivot_levels.support) | set(extremes["support"])
        all_resistance = set(pivot_levels.resistance) | set(extremes["resistance"])

        keep = config.MAX_LEVELS
        return SupportResistance(
            support=sorted(all_support, reverse=True)[:keep],
            resistance=sorted(all_resistance)[:keep],
            pivot_point=pivot_levels.pivot,
        )
