"""Money supply as a leading indicator (impact lag 70-107 days).

Historical precision 81% (2023-2025, medium term).
"""

from __future__ import annotations

from core.models.signal import SignalKind, StrategySignal, Strength
from core.strategy.protocol import StrategyContext
from core.strategy.registry import register_strategy

MONEY_SUPPLY_LEAD = "money_supply_lead"


@register_strategy(MONEY_SUPPLY_LEAD)
class MoneySupplyLeadStrategy:
    """ACCUMULATE on strong expansion (> 6%), REDUCE when stagnant (< 1%)."""

    EXPANSION_ABOVE = 6
    STAGNATION_BELOW = 1

    @property
    def name(self) -> str:
        return MONEY_SUPPLY_LEAD

    @property
    def title(self) -> str:
        return "Money Supply Lead"

    @property
    def precision(self) -> str:
        return "81%"

    def evaluate(self, ctx: StrategyContext) -> StrategySignal | None:
        growth = ctx.money_supply_growth
        if growth > self.EXPANSION_ABOVE:
            return StrategySignal(
                kind=SignalKind.ACCUMULATE,
                strength=Strength.MEDIUM,
                action="Accumulation progressive sur 1-3 mois",
                reason="M2 en forte expansion (impact dans 70-107j)",
                entry_level="DCA renforcé",
                precision=self.precision,
                timeframe="Moyen terme (1-3 mois)",
            )
        if growth < self.STAGNATION_BELOW:
            return StrategySignal(
                kind=SignalKind.REDUCE,
                strength=Strength.MEDIUM,
                action="Réduire exposition de 30-40%",
                reason="M2 stagnant - Risque baisse moyen terme",
                entry_level="Sortie progressive",
                precision=self.precision,
                timeframe="Moyen terme",
            )
        return None
