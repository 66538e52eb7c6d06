"""Indicator classifiers (pure threshold lookups, no I/O)."""

from core.indicators.bands import Band, ThresholdTable
from core.indicators.classifiers import (
    ALL_TABLES,
    DOLLAR_INDEX_TABLE,
    ETF_FLOW_TABLE,
    MONEY_SUPPLY_TABLE,
    PEAK_DISTANCE_TABLE,
    SENTIMENT_TABLE,
    STABLECOIN_RATIO_TABLE,
    classify_dollar_index,
    classify_etf_flow,
    classify_money_supply,
    classify_peak_distance,
    classify_sentiment,
    classify_stablecoin_ratio,
    peak_distance,
)

__all__ = [
    "Band",
    "ThresholdTable",
    "ALL_TABLES",
    "DOLLAR_INDEX_TABLE",
    "ETF_FLOW_TABLE",
    "MONEY_SUPPLY_TABLE",
    "PEAK_DISTANCE_TABLE",
    "SENTIMENT_TABLE",
    "STABLECOIN_RATIO_TABLE",
    "classify_dollar_index",
    "classify_etf_flow",
    "classify_money_supply",
    "classify_peak_distance",
    "classify_sentiment",
    "classify_stablecoin_ratio",
    "peak_distance",
]
