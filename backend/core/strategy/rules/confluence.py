"""Trading/Macro score confluence.

Historical precision ~76% (combined scores).
"""

from __future__ import annotations

from core.models.signal import SignalKind, StrategySignal, Strength
from core.strategy.protocol import StrategyContext
from core.strategy.registry import register_strategy

SCORE_CONFLUENCE = "score_confluence"


@register_strategy(SCORE_CONFLUENCE)
class ScoreConfluenceStrategy:
    """Compare both composites; conditions are checked in order, first match wins.

    1. trading >= 7 and macro >= 7 -> BUY, very strong
    2. trading < 4 and macro < 5 -> SELL, strong
    3. |trading - macro| > 3 -> HOLD, neutral (divergent horizons)
    """

    @property
    def name(self) -> str:
        return SCORE_CONFLUENCE

    @property
    def title(self) -> str:
        return "Score Confluence"

    @property
    def precision(self) -> str:
        return "76%"

    def evaluate(self, ctx: StrategyContext) -> StrategySignal | None:
        trading, macro = ctx.trading_score, ctx.macro_score
        scores = f"Trading {trading}/10, Macro {macro}/10"

        if trading >= 7 and macro >= 7:
            return StrategySignal(
                kind=SignalKind.BUY,
                strength=Strength.VERY_STRONG,
                action="Acheter 50-60% de votre allocation",
                reason="Double confirmation Trading + Macro",
                entry_level="Configuration optimale",
                precision=self.precision,
                details=f"Scores: {scores}",
            )
        if trading < 4 and macro < 5:
            return StrategySignal(
                kind=SignalKind.SELL,
                strength=Strength.STRONG,
                action="Réduire exposition de 40-60%",
                reason="Double alerte négative",
                entry_level="Sortie recommandée",
                precision=self.precision,
                details=f"Scores: {scores}",
            )
        if abs(trading - macro) > 3:
            return StrategySignal(
                kind=SignalKind.HOLD,
                strength=Strength.NEUTRAL,
                action="Conserver positions actuelles",
                reason="Signaux divergents - Attendre confirmation",
                entry_level="Observation",
                precision=self.precision,
                details=f"Scores divergents: {scores}",
            )
        return None
