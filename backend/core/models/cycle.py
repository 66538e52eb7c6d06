"""Result of one evaluation cycle."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from core.models.indicator import IndicatorResult
from core.models.score import CompositeScore, Synthesis
from core.models.signal import NamedSignal, PrimarySignal


class CycleResult(BaseModel):
    """Everything the notification gate, history and presentation need."""

    model_config = ConfigDict(frozen=True)

    trading: CompositeScore
    macro: CompositeScore
    synthesis: Synthesis
    indicators: dict[str, IndicatorResult]
    signals: list[NamedSignal]
    primary: PrimarySignal
    estimated_fields: list[str] = []
    btc_price: float
    evaluated_at: datetime
