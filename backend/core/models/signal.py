"""Strategy signal models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from core.models.indicator import ColorClass


class SignalKind(str, Enum):
    """Recommended action emitted by a strategy."""

    BUY = "BUY"
    SELL = "SELL"
    ACCUMULATE = "ACCUMULATE"
    REDUCE = "REDUCE"
    HOLD = "HOLD"
    DCA_INCREASE = "DCA_INCREASE"
    DCA_NORMAL = "DCA_NORMAL"
    DCA_REDUCE = "DCA_REDUCE"


class Strength(str, Enum):
    """Signal strength, totally ordered by rank."""

    VERY_STRONG = "VERY_STRONG"
    STRONG = "STRONG"
    MEDIUM = "MEDIUM"
    NEUTRAL = "NEUTRAL"

    @property
    def rank(self) -> int:
        """Ordering rank: VERY_STRONG=4 ... NEUTRAL=1."""
        return _STRENGTH_RANK[self]


_STRENGTH_RANK: dict[Strength, int] = {
    Strength.VERY_STRONG: 4,
    Strength.STRONG: 3,
    Strength.MEDIUM: 2,
    Strength.NEUTRAL: 1,
}

# Strengths that are worth an external notification
NOTIFIABLE_STRENGTHS: frozenset[Strength] = frozenset(
    {Strength.VERY_STRONG, Strength.STRONG}
)

KIND_COLORS: dict[SignalKind, ColorClass] = {
    SignalKind.BUY: ColorClass.GREEN,
    SignalKind.SELL: ColorClass.RED,
    SignalKind.ACCUMULATE: ColorClass.BLUE,
    SignalKind.REDUCE: ColorClass.ORANGE,
    SignalKind.HOLD: ColorClass.GRAY,
    SignalKind.DCA_INCREASE: ColorClass.GREEN,
    SignalKind.DCA_NORMAL: ColorClass.GRAY,
    SignalKind.DCA_REDUCE: ColorClass.YELLOW,
}


class StrategySignal(BaseModel):
    """Output of a single applicable strategy rule."""

    model_config = ConfigDict(frozen=True)

    kind: SignalKind
    strength: Strength
    action: str
    reason: str
    entry_level: str | None = None
    precision: str | None = None  # Static historical precision label, e.g. "73%"
    details: str | None = None
    timeframe: str | None = None


class NamedSignal(BaseModel):
    """A strategy signal tagged with the strategy that produced it."""

    model_config = ConfigDict(frozen=True)

    name: str  # Registry key of the strategy
    title: str
    signal: StrategySignal


class PrimarySignal(StrategySignal):
    """The single recommended action of a cycle."""

    active_strategies: int = 0
    color: ColorClass = ColorClass.GRAY
    strategy: str | None = None  # None for the neutral default

    @property
    def is_notifiable(self) -> bool:
        return self.strength in NOTIFIABLE_STRENGTHS


class NotificationRecord(BaseModel):
    """The last signal that was actually notified."""

    model_config = ConfigDict(frozen=True)

    signal: StrategySignal
    sent_at: int  # Epoch milliseconds
