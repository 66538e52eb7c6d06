"""Composite score and synthesis models."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

from core.models.indicator import ColorClass

# Decimal arithmetic in Python, plain numbers on the wire
ScoreValue = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class CompositeScore(BaseModel):
    """Weighted composite of indicator scores mapped to a narrative band."""

    model_config = ConfigDict(frozen=True)

    value: ScoreValue  # Rounded to one decimal place
    label: str
    action: str
    probability: str  # e.g. "75-80%" or "< 40%"
    color: ColorClass


class Synthesis(BaseModel):
    """Overall risk profile blended from the Trading and Macro composites."""

    model_config = ConfigDict(frozen=True)

    risk_label: str
    color: ColorClass
    average_score: ScoreValue
    probability: int  # Percent
