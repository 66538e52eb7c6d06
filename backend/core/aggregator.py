"""Select the primary signal among the applicable strategy signals."""

from __future__ import annotations

from typing import Sequence

from core.models.indicator import ColorClass
from core.models.signal import (
    KIND_COLORS,
    NamedSignal,
    PrimarySignal,
    SignalKind,
    Strength,
)

NEUTRAL_PRIMARY = PrimarySignal(
    kind=SignalKind.HOLD,
    strength=Strength.NEUTRAL,
    action="Aucun signal fort - Conserver positions",
    reason="Conditions de marché neutres",
    color=ColorClass.GRAY,
    active_strategies=0,
)


def rank_signals(signals: Sequence[NamedSignal]) -> list[NamedSignal]:
    """Order signals strongest first.

    ``sorted`` is stable, so equal strengths keep the rule order.
    """
    return sorted(signals, key=lambda s: s.signal.strength.rank, reverse=True)


def aggregate(signals: Sequence[NamedSignal]) -> PrimarySignal:
    """Pick the strongest applicable signal as the primary signal.

    Returns the neutral HOLD default when nothing applies.
    """
    if not signals:
        return NEUTRAL_PRIMARY

    top = rank_signals(signals)[0]
    return PrimarySignal(
        **top.signal.model_dump(),
        active_strategies=len(signals),
        color=KIND_COLORS.get(top.signal.kind, ColorClass.GRAY),
        strategy=top.name,
    )
