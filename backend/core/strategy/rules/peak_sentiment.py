"""Distance from peak combined with sentiment.

Historical precision ~78% (Q3-Q4 2024).
"""

from __future__ import annotations

from core.models.signal import SignalKind, StrategySignal, Strength
from core.strategy.protocol import StrategyContext
from core.strategy.registry import register_strategy

PEAK_SENTIMENT_COMBO = "peak_sentiment_combo"


@register_strategy(PEAK_SENTIMENT_COMBO)
class PeakSentimentComboStrategy:
    """Double confirmation from price location and crowd mood.

    - Far below the peak (> 20%) while fearful (< 30) -> BUY, very strong
    - Near the peak (< 5%) while greedy (> 70) -> SELL, strong
    """

    @property
    def name(self) -> str:
        return PEAK_SENTIMENT_COMBO

    @property
    def title(self) -> str:
        return "Peak Distance + Sentiment"

    @property
    def precision(self) -> str:
        return "78%"

    def evaluate(self, ctx: StrategyContext) -> StrategySignal | None:
        if ctx.peak_distance > 20 and ctx.sentiment < 30:
            return StrategySignal(
                kind=SignalKind.BUY,
                strength=Strength.VERY_STRONG,
                action="Acheter 40-50% de votre allocation",
                reason="Double confirmation: ATH distant + Peur",
                entry_level="Zone d'accumulation idéale",
                precision=self.precision,
            )
        if ctx.peak_distance < 5 and ctx.sentiment > 70:
            return StrategySignal(
                kind=SignalKind.SELL,
                strength=Strength.STRONG,
                action="Sécuriser 60-80% des gains",
                reason="Double alerte: Proche ATH + Cupidité",
                entry_level="Zone de prise de profit",
                precision=self.precision,
            )
        return None
