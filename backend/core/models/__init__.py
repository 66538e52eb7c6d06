"""Data models."""

from core.models.config import DAY_MS, EngineConfig
from core.models.cycle import CycleResult
from core.models.history import DailySnapshot, HistoryEntry, HistoryStats
from core.models.indicator import ColorClass, IndicatorResult
from core.models.metrics import METRIC_FIELDS, Metric, MetricSet, build_metric_set
from core.models.score import CompositeScore, Synthesis
from core.models.signal import (
    KIND_COLORS,
    NOTIFIABLE_STRENGTHS,
    NamedSignal,
    NotificationRecord,
    PrimarySignal,
    SignalKind,
    StrategySignal,
    Strength,
)

__all__ = [
    "DAY_MS",
    "EngineConfig",
    "CycleResult",
    "DailySnapshot",
    "HistoryEntry",
    "HistoryStats",
    "ColorClass",
    "IndicatorResult",
    "METRIC_FIELDS",
    "Metric",
    "MetricSet",
    "build_metric_set",
    "CompositeScore",
    "Synthesis",
    "KIND_COLORS",
    "NOTIFIABLE_STRENGTHS",
    "NamedSignal",
    "NotificationRecord",
    "PrimarySignal",
    "SignalKind",
    "StrategySignal",
    "Strength",
]
