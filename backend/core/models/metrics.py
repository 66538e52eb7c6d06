"""Metric readings consumed by an evaluation cycle."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from numbers import Real
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from core.errors import InputFault

# Field order is the order readings are reported in snapshots and errors
METRIC_FIELDS: tuple[str, ...] = (
    "sentiment",
    "current_price",
    "peak_price",
    "money_supply_growth",
    "dollar_index_trend",
    "etf_flow_score",
    "stablecoin_ratio",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Metric(BaseModel):
    """A single named numeric reading."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(allow_inf_nan=False)
    captured_at: datetime = Field(default_factory=_utcnow)
    is_estimate: bool = False
    source: str | None = None

    def as_estimate(self, source: str | None = None) -> "Metric":
        """Copy of this reading flagged as an estimate (fallback/last-known)."""
        return self.model_copy(
            update={"is_estimate": True, "source": source or self.source}
        )


class MetricSet(BaseModel):
    """Complete set of readings needed to score one cycle."""

    model_config = ConfigDict(frozen=True)

    sentiment: Metric
    current_price: Metric
    peak_price: Metric
    money_supply_growth: Metric
    dollar_index_trend: Metric
    etf_flow_score: Metric  # -5 (massive outflows) .. +5 (massive inflows)
    stablecoin_ratio: Metric

    @property
    def estimated_fields(self) -> list[str]:
        """Names of readings that came from a fallback or manual estimate."""
        return [name for name in METRIC_FIELDS if getattr(self, name).is_estimate]

    def values(self) -> dict[str, float]:
        """Plain name -> value mapping."""
        return {name: getattr(self, name).value for name in METRIC_FIELDS}


def _coerce_reading(name: str, reading) -> Metric:
    if reading is None:
        raise InputFault(name, "missing reading")

    if isinstance(reading, Metric):
        return reading

    # bool is a Real subclass but never a valid reading
    if isinstance(reading, bool) or not isinstance(reading, Real):
        raise InputFault(name, f"non-numeric reading {reading!r}")

    value = float(reading)
    if not math.isfinite(value):
        raise InputFault(name, f"non-finite reading {value!r}")
    return Metric(value=value)


def build_metric_set(readings: Mapping[str, Metric | float | None]) -> MetricSet:
    """Validate raw readings and assemble a MetricSet.

    Accepts either Metric instances or bare numbers for each field.

    Raises:
        InputFault: naming the first missing, non-numeric or non-finite field,
            or a non-positive peak price.
    """
    metrics = {
        name: _coerce_reading(name, readings.get(name)) for name in METRIC_FIELDS
    }

    if metrics["peak_price"].value <= 0:
        raise InputFault("peak_price", "peak price must be positive")

    return MetricSet(**metrics)
