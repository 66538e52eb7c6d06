"""Smart dollar-cost-averaging cadence.

Historical precision ~70% (2023-2025). Unlike the other rules this one
always applies: its bands cover every combined score.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from core.models.signal import SignalKind, StrategySignal, Strength
from core.strategy.protocol import StrategyContext
from core.strategy.registry import register_strategy

SMART_DCA = "smart_dca"


@register_strategy(SMART_DCA)
class SmartDcaStrategy:
    """Scale the recurring purchase amount with the combined score."""

    @property
    def name(self) -> str:
        return SMART_DCA

    @property
    def title(self) -> str:
        return "Smart DCA"

    @property
    def precision(self) -> str:
        return "70%"

    def evaluate(self, ctx: StrategyContext) -> StrategySignal:
        combined = ctx.combined_score
        details = (
            f"Score global: "
            f"{combined.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}/10"
        )

        if combined > 7:
            return StrategySignal(
                kind=SignalKind.DCA_INCREASE,
                strength=Strength.MEDIUM,
                action="Augmenter DCA de 50-100%",
                reason="Conditions favorables - DCA renforcé",
                entry_level="Achats réguliers augmentés",
                precision=self.precision,
                details=details,
            )
        if combined >= 5:
            return StrategySignal(
                kind=SignalKind.DCA_NORMAL,
                strength=Strength.NEUTRAL,
                action="Maintenir DCA actuel",
                reason="Conditions neutres - DCA standard",
                entry_level="Achats réguliers normaux",
                precision=self.precision,
                details=details,
            )
        return StrategySignal(
            kind=SignalKind.DCA_REDUCE,
            strength=Strength.MEDIUM,
            action="Réduire DCA de 30-50%",
            reason="Conditions défavorables - DCA réduit",
            entry_level="Achats réguliers diminués",
            precision=self.precision,
            details=details,
        )
