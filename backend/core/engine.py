"""One full evaluation pass: metrics -> indicators -> scores -> signals.

Pure and synchronous. The classifiers and rules are independent of each
other, so their evaluation order has no observable effect.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from core.aggregator import aggregate
from core.indicators import (
    classify_dollar_index,
    classify_etf_flow,
    classify_money_supply,
    classify_peak_distance,
    classify_sentiment,
    classify_stablecoin_ratio,
)
from core.models.cycle import CycleResult
from core.models.history import DailySnapshot
from core.models.indicator import IndicatorResult
from core.models.metrics import MetricSet
from core.scoring import macro_score, trading_score
from core.strategy import Strategy, StrategyContext, evaluate_strategies
from core.synthesis import synthesize

logger = logging.getLogger(__name__)


def classify_all(metrics: MetricSet) -> dict[str, IndicatorResult]:
    """Run the six indicator classifiers."""
    return {
        "sentiment": classify_sentiment(metrics.sentiment.value),
        "peak_distance": classify_peak_distance(
            metrics.current_price.value, metrics.peak_price.value
        ),
        "money_supply_growth": classify_money_supply(metrics.money_supply_growth.value),
        "dollar_index_trend": classify_dollar_index(metrics.dollar_index_trend.value),
        "etf_flow_score": classify_etf_flow(metrics.etf_flow_score.value),
        "stablecoin_ratio": classify_stablecoin_ratio(metrics.stablecoin_ratio.value),
    }


def evaluate_cycle(
    metrics: MetricSet,
    now: datetime | None = None,
    strategies: list[Strategy] | None = None,
) -> CycleResult:
    """Turn a complete metric set into scores, signals and a primary action."""
    indicators = classify_all(metrics)

    trading = trading_score(
        sentiment=indicators["sentiment"].score,
        peak_distance=indicators["peak_distance"].score,
        dollar_index_trend=indicators["dollar_index_trend"].score,
        etf_flow_score=indicators["etf_flow_score"].score,
    )
    # The dollar index feeds both horizons with the same classification
    macro = macro_score(
        money_supply_growth=indicators["money_supply_growth"].score,
        stablecoin_ratio=indicators["stablecoin_ratio"].score,
        dollar_index_trend=indicators["dollar_index_trend"].score,
    )

    ctx = StrategyContext(
        sentiment=metrics.sentiment.value,
        peak_distance=indicators["peak_distance"].derived_value,
        money_supply_growth=metrics.money_supply_growth.value,
        trading_score=trading.value,
        macro_score=macro.value,
    )
    signals = evaluate_strategies(ctx, strategies)
    primary = aggregate(signals)

    result = CycleResult(
        trading=trading,
        macro=macro,
        synthesis=synthesize(trading, macro),
        indicators=indicators,
        signals=signals,
        primary=primary,
        estimated_fields=metrics.estimated_fields,
        btc_price=metrics.current_price.value,
        evaluated_at=now or datetime.now(timezone.utc),
    )
    logger.debug(
        "Cycle evaluated: trading=%s macro=%s primary=%s/%s (%d active)",
        trading.value, macro.value, primary.kind.value, primary.strength.value,
        primary.active_strategies,
    )
    return result


def build_snapshot(metrics: MetricSet, result: CycleResult, timestamp: int) -> DailySnapshot:
    """Day-keyed audit record of the inputs and composites of a cycle."""
    day = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).date().isoformat()
    return DailySnapshot(
        date=day,
        price=metrics.current_price.value,
        sentiment=metrics.sentiment.value,
        money_supply_growth=metrics.money_supply_growth.value,
        dollar_index_trend=metrics.dollar_index_trend.value,
        stablecoin_ratio=metrics.stablecoin_ratio.value,
        etf_flow_score=metrics.etf_flow_score.value,
        trading_score=result.trading.value,
        macro_score=result.macro.value,
        timestamp=timestamp,
    )
