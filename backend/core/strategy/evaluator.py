"""Run every strategy rule against one context."""

from __future__ import annotations

import logging
from typing import Iterable

from core.models.signal import NamedSignal
from core.strategy.protocol import Strategy, StrategyContext
from core.strategy.registry import get_strategy
from core.strategy.rules import (
    MONEY_SUPPLY_LEAD,
    PEAK_SENTIMENT_COMBO,
    SCORE_CONFLUENCE,
    SENTIMENT_EXTREMES,
    SMART_DCA,
)

logger = logging.getLogger(__name__)

# Evaluation order doubles as the aggregator's tie-break order
STRATEGY_ORDER: tuple[str, ...] = (
    SENTIMENT_EXTREMES,
    PEAK_SENTIMENT_COMBO,
    MONEY_SUPPLY_LEAD,
    SCORE_CONFLUENCE,
    SMART_DCA,
)


def default_strategies() -> list[Strategy]:
    """The built-in rules in evaluation order."""
    return [get_strategy(name) for name in STRATEGY_ORDER]


def evaluate_strategies(
    ctx: StrategyContext,
    strategies: Iterable[Strategy] | None = None,
) -> list[NamedSignal]:
    """Evaluate rules and keep the applicable ones, preserving rule order."""
    if strategies is None:
        strategies = default_strategies()

    applicable: list[NamedSignal] = []
    for strategy in strategies:
        signal = strategy.evaluate(ctx)
        if signal is None:
            continue
        applicable.append(
            NamedSignal(name=strategy.name, title=strategy.title, signal=signal)
        )
        logger.debug(
            "Strategy %s -> %s/%s",
            strategy.name, signal.kind.value, signal.strength.value,
        )
    return applicable
