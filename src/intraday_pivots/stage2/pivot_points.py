"""Fibonacci pivot points.

Classical floor pivot with support/resistance spaced by Fibonacci ratios of
the day's range:

    pivot = (high + low + close) / 3
    R1/S1 = pivot +/- 0.382 * range
    R2/S2 = pivot +/- 0.618 * range
    R3/S3 = pivot +/- 1.000 * range

This module is pure and side-effect free; rounding is left to the writer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


FIB_RATIOS = (0.382, 0.618, 1.0)

PIVOT_COLUMNS = ["pivot", "r1", "r2", "r3", "s1", "s2", "s3"]


@dataclass(frozen=True)
class PivotPoints:
    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def calculate_pivot_points(high: float, low: float, close: float) -> PivotPoints:
    """Compute Fibonacci pivot points from a day's high, low and close.

    Args:
        high: Day high
        low: Day low
        close: Day close

    Returns:
        PivotPoints with the pivot and three resistance/support levels
    """
    pivot = (high + low + close) / 3
    day_range = high - low
    r_near, r_mid, r_far = FIB_RATIOS

    return PivotPoints(
        pivot=pivot,
        r1=pivot + r_near * day_range,
        r2=pivot + r_mid * day_range,
        r3=pivot + r_far * day_range,
        s1=pivot - r_near * day_range,
        s2=pivot - r_mid * day_range,
        s3=pivot - r_far * day_range,
    )
