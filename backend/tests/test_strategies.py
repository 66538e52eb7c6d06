"""Tests for the strategy registry, the five rules and their evaluation."""

from decimal import Decimal

import pytest

from core.models import SignalKind, Strength
from core.strategy import (
    STRATEGY_ORDER,
    Strategy,
    StrategyContext,
    default_strategies,
    evaluate_strategies,
    get_strategy,
    register_strategy,
)
from core.strategy.rules import (
    MONEY_SUPPLY_LEAD,
    PEAK_SENTIMENT_COMBO,
    SCORE_CONFLUENCE,
    SENTIMENT_EXTREMES,
    SMART_DCA,
    SentimentExtremesStrategy,
)


def make_ctx(
    sentiment=50.0,
    peak_distance=10.0,
    money_supply_growth=3.0,
    trading="5.0",
    macro="5.0",
) -> StrategyContext:
    return StrategyContext(
        sentiment=sentiment,
        peak_distance=peak_distance,
        money_supply_growth=money_supply_growth,
        trading_score=Decimal(trading),
        macro_score=Decimal(macro),
    )


class TestRegistry:
    def test_builtin_rules_registered(self):
        assert all(get_strategy(name).name == name for name in STRATEGY_ORDER)

    def test_lookup_by_name(self):
        rule = get_strategy(SENTIMENT_EXTREMES)
        assert isinstance(rule, SentimentExtremesStrategy)
        assert isinstance(rule, Strategy)
        # Rules are stateless, one shared instance
        assert get_strategy(SENTIMENT_EXTREMES) is rule

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Unknown strategy"):
            get_strategy("no_such_rule")

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            register_strategy(SMART_DCA)(type("Duplicate", (), {}))

    def test_non_strategy_rejected(self):
        with pytest.raises(TypeError, match="Strategy protocol"):
            register_strategy("not_a_rule")(type("NotARule", (), {}))

    def test_mismatched_name_rejected(self):
        with pytest.raises(ValueError, match="registered as"):
            register_strategy("other_name")(SentimentExtremesStrategy)

    def test_default_strategies_follow_order(self):
        assert [s.name for s in default_strategies()] == list(STRATEGY_ORDER)

    @pytest.mark.parametrize(
        "name, precision",
        [
            (SENTIMENT_EXTREMES, "73%"),
            (PEAK_SENTIMENT_COMBO, "78%"),
            (MONEY_SUPPLY_LEAD, "81%"),
            (SCORE_CONFLUENCE, "76%"),
            (SMART_DCA, "70%"),
        ],
    )
    def test_precision_labels(self, name, precision):
        assert get_strategy(name).precision == precision


class TestSentimentExtremes:
    rule = get_strategy(SENTIMENT_EXTREMES)

    def test_extreme_fear_buys(self):
        signal = self.rule.evaluate(make_ctx(sentiment=24))
        assert signal.kind == SignalKind.BUY
        assert signal.strength == Strength.STRONG
        assert signal.precision == "73%"

    def test_extreme_greed_sells(self):
        signal = self.rule.evaluate(make_ctx(sentiment=76))
        assert signal.kind == SignalKind.SELL
        assert signal.strength == Strength.STRONG

    @pytest.mark.parametrize("sentiment", [25, 50, 75])
    def test_thresholds_are_strict(self, sentiment):
        assert self.rule.evaluate(make_ctx(sentiment=sentiment)) is None


class TestPeakSentimentCombo:
    rule = get_strategy(PEAK_SENTIMENT_COMBO)

    def test_far_from_peak_and_fearful(self):
        signal = self.rule.evaluate(make_ctx(sentiment=29, peak_distance=21))
        assert signal.kind == SignalKind.BUY
        assert signal.strength == Strength.VERY_STRONG

    def test_near_peak_and_greedy(self):
        signal = self.rule.evaluate(make_ctx(sentiment=71, peak_distance=4))
        assert signal.kind == SignalKind.SELL
        assert signal.strength == Strength.STRONG

    @pytest.mark.parametrize(
        "sentiment, distance",
        [(29, 20), (30, 25), (71, 5), (70, 2), (50, 10)],
    )
    def test_needs_both_conditions(self, sentiment, distance):
        assert self.rule.evaluate(make_ctx(sentiment=sentiment, peak_distance=distance)) is None


class TestMoneySupplyLead:
    rule = get_strategy(MONEY_SUPPLY_LEAD)

    def test_strong_expansion_accumulates(self):
        signal = self.rule.evaluate(make_ctx(money_supply_growth=6.1))
        assert signal.kind == SignalKind.ACCUMULATE
        assert signal.strength == Strength.MEDIUM
        assert signal.timeframe == "Moyen terme (1-3 mois)"

    def test_stagnation_reduces(self):
        signal = self.rule.evaluate(make_ctx(money_supply_growth=0.5))
        assert signal.kind == SignalKind.REDUCE
        assert signal.strength == Strength.MEDIUM

    @pytest.mark.parametrize("growth", [1, 3.9, 6])
    def test_middle_range_is_silent(self, growth):
        assert self.rule.evaluate(make_ctx(money_supply_growth=growth)) is None


class TestScoreConfluence:
    rule = get_strategy(SCORE_CONFLUENCE)

    def test_double_confirmation(self):
        signal = self.rule.evaluate(make_ctx(trading="7.0", macro="7.2"))
        assert signal.kind == SignalKind.BUY
        assert signal.strength == Strength.VERY_STRONG
        assert signal.details == "Scores: Trading 7.0/10, Macro 7.2/10"

    def test_double_alert(self):
        signal = self.rule.evaluate(make_ctx(trading="3.9", macro="4.9"))
        assert signal.kind == SignalKind.SELL
        assert signal.strength == Strength.STRONG

    def test_divergence(self):
        signal = self.rule.evaluate(make_ctx(trading="8.0", macro="4.5"))
        assert signal.kind == SignalKind.HOLD
        assert signal.strength == Strength.NEUTRAL
        assert signal.details == "Scores divergents: Trading 8.0/10, Macro 4.5/10"

    def test_double_alert_wins_over_divergence(self):
        # |1.0 - 4.5| > 3 as well, but the alert is checked first
        signal = self.rule.evaluate(make_ctx(trading="1.0", macro="4.5"))
        assert signal.kind == SignalKind.SELL

    def test_aligned_middle_scores_are_silent(self):
        assert self.rule.evaluate(make_ctx(trading="6.0", macro="6.5")) is None
        assert self.rule.evaluate(make_ctx(trading="7.0", macro="4.0")) is None


class TestSmartDca:
    rule = get_strategy(SMART_DCA)

    def test_increase_above_seven(self):
        signal = self.rule.evaluate(make_ctx(trading="7.1", macro="7.0"))
        assert signal.kind == SignalKind.DCA_INCREASE
        assert signal.strength == Strength.MEDIUM
        assert signal.details == "Score global: 7.1/10"

    def test_exactly_seven_is_normal(self):
        signal = self.rule.evaluate(make_ctx(trading="7.0", macro="7.0"))
        assert signal.kind == SignalKind.DCA_NORMAL
        assert signal.strength == Strength.NEUTRAL

    def test_five_is_normal(self):
        assert self.rule.evaluate(make_ctx(trading="5.0", macro="5.0")).kind == SignalKind.DCA_NORMAL

    def test_reduce_below_five(self):
        signal = self.rule.evaluate(make_ctx(trading="4.8", macro="5.0"))
        assert signal.kind == SignalKind.DCA_REDUCE
        assert signal.strength == Strength.MEDIUM
        assert signal.details == "Score global: 4.9/10"

    def test_always_applies(self):
        for trading in ("0.0", "3.3", "5.5", "9.9"):
            assert self.rule.evaluate(make_ctx(trading=trading, macro=trading)) is not None


class TestEvaluateStrategies:
    def test_applicable_signals_in_rule_order(self):
        ctx = make_ctx(
            sentiment=22, peak_distance=25, money_supply_growth=3,
            trading="7.5", macro="7.2",
        )
        signals = evaluate_strategies(ctx)
        assert [s.name for s in signals] == [
            SENTIMENT_EXTREMES,
            PEAK_SENTIMENT_COMBO,
            SCORE_CONFLUENCE,
            SMART_DCA,
        ]
        assert signals[1].title == "Peak Distance + Sentiment"

    def test_quiet_market_only_dca(self):
        signals = evaluate_strategies(make_ctx())
        assert [s.name for s in signals] == [SMART_DCA]
        assert signals[0].signal.kind == SignalKind.DCA_NORMAL

    def test_custom_rule_list(self):
        signals = evaluate_strategies(
            make_ctx(sentiment=10),
            strategies=[get_strategy(SENTIMENT_EXTREMES)],
        )
        assert len(signals) == 1
        assert signals[0].signal.kind == SignalKind.BUY
