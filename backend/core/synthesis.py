"""Global synthesis of the Trading and Macro composites."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from core.models.indicator import ColorClass
from core.models.score import CompositeScore, Synthesis

# Macro is weighted higher: it drives position sizing, trading drives timing
TRADING_PROBABILITY_WEIGHT = Decimal("0.4")
MACRO_PROBABILITY_WEIGHT = Decimal("0.6")

_RISK_BANDS: tuple[tuple[Decimal, str, ColorClass], ...] = (
    (Decimal("7"), "Favorable - Configuration optimale court & moyen terme", ColorClass.GREEN),
    (Decimal("5.5"), "Modéré - Opportunités sélectives", ColorClass.YELLOW),
    (Decimal("4"), "Mitigé - Prudence recommandée", ColorClass.ORANGE),
)
_RISK_FLOOR = ("Défavorable - Conditions difficiles", ColorClass.RED)

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def first_number(probability: str) -> Decimal:
    """Lower bound of a probability range string.

    "75-80%" -> 75, "< 40%" -> 40.

    Raises:
        ValueError: If the string contains no number.
    """
    match = _NUMBER_RE.search(probability)
    if match is None:
        raise ValueError(f"No number in probability range {probability!r}")
    return Decimal(match.group())


def synthesize(trading: CompositeScore, macro: CompositeScore) -> Synthesis:
    """Blend both composites into a risk profile and a probability estimate."""
    average = (trading.value + macro.value) / 2

    label, color = _RISK_FLOOR
    for floor, band_label, band_color in _RISK_BANDS:
        if average >= floor:
            label, color = band_label, band_color
            break

    probability = (
        first_number(trading.probability) * TRADING_PROBABILITY_WEIGHT
        + first_number(macro.probability) * MACRO_PROBABILITY_WEIGHT
    )

    return Synthesis(
        risk_label=label,
        color=color,
        average_score=average,
        probability=int(probability.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
    )
