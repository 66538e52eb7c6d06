"""The six indicator classifiers.

Cut points are calibrated against 2023-2025 data and must be kept exactly;
moving a single boundary shifts the downstream composite labels.
"""

from __future__ import annotations

from core.errors import InputFault
from core.indicators.bands import NEG_INF, Band, ThresholdTable
from core.models.indicator import ColorClass, IndicatorResult

G = ColorClass.GREEN
Y = ColorClass.YELLOW
N = ColorClass.GRAY
O = ColorClass.ORANGE
R = ColorClass.RED


# Fear & Greed style sentiment index, 0 (extreme fear) .. 100 (extreme greed)
SENTIMENT_TABLE = ThresholdTable(
    "sentiment",
    [
        Band(80, True, 1, "VENTE/PRUDENCE (Cupidité)", R),
        Band(70, True, 2, "Surévalué", O),
        Band(55, True, 4, "Prudence", Y),
        Band(45, True, 5, "Neutre", N),
        Band(30, True, 6, "Légèrement bullish", Y),
        Band(20, True, 7, "Achat (Peur)", G),
        Band(NEG_INF, True, 9, "ACHAT FORT (Peur extrême)", G),
    ],
)

# Percentage distance below the all-time-high peak (negative = new high)
PEAK_DISTANCE_TABLE = ThresholdTable(
    "peak_distance",
    [
        Band(30, False, 8, "Zone accumulation forte", G),
        Band(20, True, 7, "Zone accumulation", G),
        Band(10, True, 5, "Modérément sous-évalué", Y),
        Band(0, True, 4, "Proche ATH", N),
        Band(NEG_INF, True, 2, "Nouveau ATH - Prudence", R),
    ],
)

# Year-over-year money supply (M2) growth, percent
MONEY_SUPPLY_TABLE = ThresholdTable(
    "money_supply_growth",
    [
        Band(8, False, 9, "Expansion forte", G),
        Band(5, True, 7, "Expansion modérée", G),
        Band(3, True, 5, "Expansion faible", Y),
        Band(0, True, 3, "Croissance minimale", O),
        Band(NEG_INF, True, 1, "Contraction", R),
    ],
)

# Dollar index 6-month change, percent (a weak dollar is bullish)
DOLLAR_INDEX_TABLE = ThresholdTable(
    "dollar_index_trend",
    [
        Band(5, False, 1, "Dollar fort (bearish BTC)", R),
        Band(2, False, 3, "Dollar en hausse", O),
        Band(-1, True, 5, "Dollar stable", N),
        Band(-4, True, 6, "Dollar légèrement faible", Y),
        Band(-8, True, 7, "Dollar en baisse", G),
        Band(NEG_INF, True, 9, "Dollar faible (très bullish BTC)", G),
    ],
)

# Weekly ETF flow score, -5 (massive outflows) .. +5 (massive inflows)
ETF_FLOW_TABLE = ThresholdTable(
    "etf_flow_score",
    [
        Band(5, False, 9, "Entrées massives", G),
        Band(2, True, 7, "Entrées positives", G),
        Band(-1, True, 5, "Flux neutres", N),
        Band(-5, True, 3, "Sorties modérées", O),
        Band(NEG_INF, True, 2, "Sorties importantes", R),
    ],
)

# Stablecoin supply ratio, percent of BTC market cap
STABLECOIN_RATIO_TABLE = ThresholdTable(
    "stablecoin_ratio",
    [
        Band(25, True, 3, "Faible liquidité", O),
        Band(20, True, 5, "Liquidité modérée", Y),
        Band(15, True, 7, "Forte liquidité stablecoin", G),
        Band(NEG_INF, True, 9, "SIGNAL BOTTOM historique", G),
    ],
)


def peak_distance(current_price: float, peak_price: float) -> float:
    """Percentage distance of the current price below the peak."""
    if peak_price <= 0:
        raise InputFault("peak_price", "peak price must be positive")
    return (peak_price - current_price) / peak_price * 100


def classify_sentiment(value: float) -> IndicatorResult:
    return SENTIMENT_TABLE.classify(value)


def classify_peak_distance(current_price: float, peak_price: float) -> IndicatorResult:
    """Classify distance from peak; the distance is kept as derived_value."""
    return PEAK_DISTANCE_TABLE.classify(
        peak_distance(current_price, peak_price), derived=True
    )


def classify_money_supply(growth: float) -> IndicatorResult:
    return MONEY_SUPPLY_TABLE.classify(growth)


def classify_dollar_index(trend: float) -> IndicatorResult:
    return DOLLAR_INDEX_TABLE.classify(trend)


def classify_etf_flow(flow_score: float) -> IndicatorResult:
    return ETF_FLOW_TABLE.classify(flow_score)


def classify_stablecoin_ratio(ratio: float) -> IndicatorResult:
    return STABLECOIN_RATIO_TABLE.classify(ratio)


ALL_TABLES: tuple[ThresholdTable, ...] = (
    SENTIMENT_TABLE,
    PEAK_DISTANCE_TABLE,
    MONEY_SUPPLY_TABLE,
    DOLLAR_INDEX_TABLE,
    ETF_FLOW_TABLE,
    STABLECOIN_RATIO_TABLE,
)
