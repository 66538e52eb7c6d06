"""History log and daily snapshot models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from core.models.score import ScoreValue
from core.models.signal import SignalKind, StrategySignal, Strength


class HistoryEntry(BaseModel):
    """A notified signal, as recorded in the history log."""

    model_config = ConfigDict(frozen=True)

    timestamp: int  # Epoch milliseconds
    date: str  # ISO-8601 UTC
    kind: SignalKind
    strength: Strength
    action: str
    reason: str
    precision: str | None = None
    entry_level: str | None = None
    details: str | None = None
    btc_price: float

    @classmethod
    def from_signal(
        cls, signal: StrategySignal, btc_price: float, timestamp: int
    ) -> "HistoryEntry":
        """Copy the signal fields into a new entry stamped at `timestamp`."""
        moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        return cls(
            timestamp=timestamp,
            date=moment.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            kind=signal.kind,
            strength=signal.strength,
            action=signal.action,
            reason=signal.reason,
            precision=signal.precision,
            entry_level=signal.entry_level,
            details=signal.details,
            btc_price=btc_price,
        )


class DailySnapshot(BaseModel):
    """Metrics and composite values behind one day's evaluation."""

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    price: float
    sentiment: float
    money_supply_growth: float
    dollar_index_trend: float
    stablecoin_ratio: float
    etf_flow_score: float
    trading_score: ScoreValue
    macro_score: ScoreValue
    timestamp: int  # Epoch milliseconds of the write


class HistoryStats(BaseModel):
    """Aggregate counts over a history window."""

    total: int = 0
    by_kind: dict[str, int] = Field(default_factory=dict)
    by_strength: dict[str, int] = Field(default_factory=dict)
    average_precision: int = 0
