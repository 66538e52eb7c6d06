"""Composite Trading (short-term) and Macro (medium-term) scores.

Each composite is a fixed-weight linear combination of indicator scores,
rounded half-up to one decimal and mapped to a narrative band. The two
band tables are kept separate: probability ranges and action text are
calibrated per horizon.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from core.errors import ConfigFault
from core.models.indicator import ColorClass
from core.models.score import CompositeScore

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")

# Trading: sentiment 30%, peak distance 20%, dollar index 25%, ETF flows 25%
TRADING_WEIGHTS: dict[str, Decimal] = {
    "sentiment": Decimal("0.30"),
    "peak_distance": Decimal("0.20"),
    "dollar_index_trend": Decimal("0.25"),
    "etf_flow_score": Decimal("0.25"),
}

# Macro: money supply 40%, stablecoin ratio 35%, dollar index 25%
MACRO_WEIGHTS: dict[str, Decimal] = {
    "money_supply_growth": Decimal("0.40"),
    "stablecoin_ratio": Decimal("0.35"),
    "dollar_index_trend": Decimal("0.25"),
}


@dataclass(frozen=True)
class ScoreBand:
    """Narrative band for a composite value >= `floor`."""

    floor: Decimal
    label: str
    action: str
    probability: str
    color: ColorClass


TRADING_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(
        Decimal("7.5"), "ACHAT FORT",
        "Zone d'achat idéale - Configuration très favorable",
        "75-80%", ColorClass.GREEN,
    ),
    ScoreBand(
        Decimal("6.0"), "Achat",
        "Configuration favorable - Entrée progressive recommandée",
        "60-70%", ColorClass.GREEN,
    ),
    ScoreBand(
        Decimal("5.0"), "Neutre-Bullish",
        "Attendre confirmation - Signal mixte",
        "50-55%", ColorClass.YELLOW,
    ),
    ScoreBand(
        Decimal("4.0"), "Neutre",
        "Pas de signal clair - Rester en observation",
        "45-50%", ColorClass.GRAY,
    ),
)
TRADING_FLOOR_BAND = ScoreBand(
    Decimal("-Infinity"), "Prudence",
    "Risque de correction - Éviter nouvelles entrées",
    "< 40%", ColorClass.RED,
)

MACRO_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(
        Decimal("7.5"), "EXPANSION FORTE",
        "Accumulation agressive - Conditions macro optimales",
        "78-83%", ColorClass.GREEN,
    ),
    ScoreBand(
        Decimal("6.0"), "Expansion modérée",
        "Accumulation progressive - Fondamentaux favorables",
        "65-75%", ColorClass.GREEN,
    ),
    ScoreBand(
        Decimal("5.0"), "Expansion faible",
        "Prudence - Fondamentaux macro mixtes",
        "50-60%", ColorClass.YELLOW,
    ),
    ScoreBand(
        Decimal("4.0"), "Stagnation",
        "Pas de catalyseur macro - Attendre amélioration",
        "40-50%", ColorClass.GRAY,
    ),
)
MACRO_FLOOR_BAND = ScoreBand(
    Decimal("-Infinity"), "Contraction",
    "Environnement défavorable - Réduire exposition",
    "< 35%", ColorClass.RED,
)


def check_weight_tables() -> None:
    """Verify every weight table sums to exactly 1.

    Raises:
        ConfigFault: If a table is inconsistent.
    """
    for name, weights in (("trading", TRADING_WEIGHTS), ("macro", MACRO_WEIGHTS)):
        total = sum(weights.values(), Decimal("0"))
        if total != Decimal("1"):
            raise ConfigFault(f"{name} weights sum to {total}, expected 1")
        logger.debug("Weight table %s OK (%d inputs)", name, len(weights))


def weighted_sum(weights: dict[str, Decimal], scores: dict[str, int]) -> Decimal:
    """Weighted sum of scores rounded half-up to one decimal.

    Raises:
        KeyError: If a weighted input has no score.
    """
    total = sum(
        (weight * Decimal(scores[name]) for name, weight in weights.items()),
        Decimal("0"),
    )
    return total.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def _band_for(value: Decimal, bands: tuple[ScoreBand, ...], floor: ScoreBand) -> ScoreBand:
    for band in bands:
        if value >= band.floor:
            return band
    return floor


def _to_composite(value: Decimal, band: ScoreBand) -> CompositeScore:
    return CompositeScore(
        value=value,
        label=band.label,
        action=band.action,
        probability=band.probability,
        color=band.color,
    )


def trading_score(
    sentiment: int,
    peak_distance: int,
    dollar_index_trend: int,
    etf_flow_score: int,
) -> CompositeScore:
    """Short-term composite from four indicator scores."""
    value = weighted_sum(
        TRADING_WEIGHTS,
        {
            "sentiment": sentiment,
            "peak_distance": peak_distance,
            "dollar_index_trend": dollar_index_trend,
            "etf_flow_score": etf_flow_score,
        },
    )
    return _to_composite(value, _band_for(value, TRADING_BANDS, TRADING_FLOOR_BAND))


def macro_score(
    money_supply_growth: int,
    stablecoin_ratio: int,
    dollar_index_trend: int,
) -> CompositeScore:
    """Medium-term composite from three indicator scores."""
    value = weighted_sum(
        MACRO_WEIGHTS,
        {
            "money_supply_growth": money_supply_growth,
            "stablecoin_ratio": stablecoin_ratio,
            "dollar_index_trend": dollar_index_trend,
        },
    )
    return _to_composite(value, _band_for(value, MACRO_BANDS, MACRO_FLOOR_BAND))
