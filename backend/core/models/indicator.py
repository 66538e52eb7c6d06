"""Indicator classification results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ColorClass(str, Enum):
    """Display colour class attached to results."""

    GREEN = "green"
    YELLOW = "yellow"
    GRAY = "gray"
    ORANGE = "orange"
    RED = "red"
    BLUE = "blue"  # Only used for ACCUMULATE primary signals


class IndicatorResult(BaseModel):
    """Normalized reading of one indicator."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=1, le=9)
    label: str
    color: ColorClass
    derived_value: float | None = None  # e.g. computed distance from peak
