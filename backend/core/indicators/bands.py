"""Declarative threshold tables.

A table is an ordered list of bands, highest lower bound first. Lookup
scans the bands in order and returns the first one whose bound is
satisfied, so the last band (lower bound -inf) catches everything else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.errors import InputFault
from core.models.indicator import ColorClass, IndicatorResult

NEG_INF = float("-inf")


@dataclass(frozen=True)
class Band:
    """One band of a threshold table.

    Attributes:
        lower: Lower bound of the band.
        inclusive: True if a value equal to `lower` belongs to this band.
        score: Normalized score (1-9).
        label: Human-readable band label.
        color: Display colour class.
    """

    lower: float
    inclusive: bool
    score: int
    label: str
    color: ColorClass

    def contains(self, value: float) -> bool:
        if self.inclusive:
            return value >= self.lower
        return value > self.lower


class ThresholdTable:
    """Ordered, non-overlapping partition of the real line into bands."""

    def __init__(self, name: str, bands: list[Band]):
        if not bands:
            raise ValueError(f"Threshold table '{name}' has no bands")
        if bands[-1].lower != NEG_INF:
            raise ValueError(f"Threshold table '{name}' must end with an open band")
        for upper, lower in zip(bands, bands[1:]):
            if lower.lower > upper.lower:
                raise ValueError(
                    f"Threshold table '{name}' bands are not in descending order"
                )
        for band in bands:
            if not 1 <= band.score <= 9:
                raise ValueError(
                    f"Threshold table '{name}' score {band.score} out of range"
                )

        self.name = name
        self.bands = tuple(bands)

    def lookup(self, value: float) -> Band:
        """Find the band a value falls into."""
        if not math.isfinite(value):
            raise InputFault(self.name, f"non-finite value {value!r}")

        for band in self.bands:
            if band.contains(value):
                return band
        # Unreachable: the last band is open-ended
        return self.bands[-1]

    def classify(self, value: float, derived: bool = False) -> IndicatorResult:
        """Classify a value into an IndicatorResult.

        Args:
            value: Metric value to classify.
            derived: Attach the value as ``derived_value`` on the result.
        """
        band = self.lookup(value)
        return IndicatorResult(
            score=band.score,
            label=band.label,
            color=band.color,
            derived_value=value if derived else None,
        )

    def __repr__(self) -> str:
        return f"ThresholdTable({self.name!r}, {len(self.bands)} bands)"
