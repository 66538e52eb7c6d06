"""Strategy protocol defining the interface all strategy rules implement.

This module provides:
- StrategyContext: the read-only inputs a rule may inspect
- Strategy: Runtime-checkable Protocol that rules must satisfy
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

from core.models.signal import StrategySignal


# ---------------------------------------------------------------------------
# StrategyContext: inputs shared by all rules for one cycle
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StrategyContext:
    """Raw and derived metrics visible to strategy rules.

    Attributes:
        sentiment: Sentiment index value (0-100).
        peak_distance: Percentage distance below the price peak.
        money_supply_growth: Year-over-year money supply growth, percent.
        trading_score: Trading composite value.
        macro_score: Macro composite value.
    """

    sentiment: float
    peak_distance: float
    money_supply_growth: float
    trading_score: Decimal
    macro_score: Decimal

    @property
    def combined_score(self) -> Decimal:
        """Plain average of the two composites."""
        return (self.trading_score + self.macro_score) / 2


# ---------------------------------------------------------------------------
# Strategy Protocol
# ---------------------------------------------------------------------------
@runtime_checkable
class Strategy(Protocol):
    """Protocol that all strategy rules must implement.

    Rules are pure: they hold no mutable state and the same context
    always yields the same result, so they can run in any order.
    """

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'sentiment_extremes')."""
        ...

    @property
    def title(self) -> str:
        """Human-readable strategy title."""
        ...

    @property
    def precision(self) -> str:
        """Static historical precision label (e.g., '73%')."""
        ...

    def evaluate(self, ctx: StrategyContext) -> StrategySignal | None:
        """Evaluate the rule.

        Returns:
            A StrategySignal, or None when the rule does not apply now.
        """
        ...
