"""Tests for the composite scorers and the global synthesis."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from core import scoring
from core.errors import ConfigFault
from core.models import ColorClass, CompositeScore
from core.scoring import check_weight_tables, macro_score, trading_score
from core.synthesis import first_number, synthesize


def composite(value: str, probability: str) -> CompositeScore:
    return CompositeScore(
        value=Decimal(value),
        label="x",
        action="x",
        probability=probability,
        color=ColorClass.GRAY,
    )


class TestWeightTables:
    def test_weights_sum_to_one(self):
        check_weight_tables()

    def test_inconsistent_weights_raise(self):
        broken = dict(scoring.TRADING_WEIGHTS, sentiment=Decimal("0.35"))
        with patch.object(scoring, "TRADING_WEIGHTS", broken):
            with pytest.raises(ConfigFault, match="trading"):
                check_weight_tables()


class TestTradingScore:
    def test_strong_buy(self):
        score = trading_score(sentiment=9, peak_distance=8, dollar_index_trend=7, etf_flow_score=7)
        assert score.value == Decimal("7.8")
        assert score.label == "ACHAT FORT"
        assert score.probability == "75-80%"
        assert score.color == ColorClass.GREEN

    def test_buy(self):
        score = trading_score(9, 8, 5, 7)
        assert score.value == Decimal("7.3")
        assert score.label == "Achat"
        assert score.probability == "60-70%"

    def test_band_floors_are_inclusive(self):
        assert trading_score(9, 9, 6, 6).value == Decimal("7.5")
        assert trading_score(9, 9, 6, 6).label == "ACHAT FORT"
        assert trading_score(4, 4, 4, 4).label == "Neutre"
        assert trading_score(5, 5, 5, 5).label == "Neutre-Bullish"

    def test_half_up_rounding(self):
        # 1.2 + 0.8 + 1.0 + 0.75 = 3.75
        score = trading_score(4, 4, 4, 3)
        assert score.value == Decimal("3.8")
        assert score.label == "Prudence"

    def test_floor_band(self):
        score = trading_score(1, 2, 1, 2)
        assert score.value == Decimal("1.5")
        assert score.label == "Prudence"
        assert score.probability == "< 40%"
        assert score.color == ColorClass.RED


class TestMacroScore:
    def test_half_up_rounding(self):
        # 2.8 + 2.45 + 1.5 = 6.75
        score = macro_score(money_supply_growth=7, stablecoin_ratio=7, dollar_index_trend=6)
        assert score.value == Decimal("6.8")
        assert score.label == "Expansion modérée"
        assert score.probability == "65-75%"

    def test_strong_expansion(self):
        score = macro_score(9, 9, 9)
        assert score.value == Decimal("9.0")
        assert score.label == "EXPANSION FORTE"

    def test_contraction(self):
        score = macro_score(1, 3, 1)
        assert score.value == Decimal("1.7")
        assert score.label == "Contraction"
        assert score.probability == "< 35%"


class TestFirstNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("75-80%", Decimal("75")),
            ("< 40%", Decimal("40")),
            ("< 35%", Decimal("35")),
            ("12.5%", Decimal("12.5")),
        ],
    )
    def test_lower_bound(self, text, expected):
        assert first_number(text) == expected

    def test_no_number(self):
        with pytest.raises(ValueError):
            first_number("n/a")


class TestSynthesis:
    def test_favorable(self):
        result = synthesize(composite("7.8", "75-80%"), composite("6.8", "65-75%"))
        assert result.average_score == Decimal("7.3")
        assert result.color == ColorClass.GREEN
        assert result.risk_label.startswith("Favorable")
        # 0.4 * 75 + 0.6 * 65
        assert result.probability == 69

    def test_band_edges(self):
        assert synthesize(composite("7", "x 1"), composite("7", "x 1")).color == ColorClass.GREEN
        assert synthesize(composite("5.5", "1"), composite("5.5", "1")).color == ColorClass.YELLOW
        assert synthesize(composite("4", "1"), composite("4", "1")).color == ColorClass.ORANGE
        assert synthesize(composite("3.9", "1"), composite("4", "1")).color == ColorClass.RED

    def test_open_ended_ranges_use_their_bound(self):
        result = synthesize(composite("1.5", "< 40%"), composite("1.7", "< 35%"))
        assert result.risk_label.startswith("Défavorable")
        # 0.4 * 40 + 0.6 * 35
        assert result.probability == 37

    def test_probability_rounds_half_up(self):
        # 0.4 * 40 + 0.6 * 78 = 62.8
        result = synthesize(composite("3", "< 40%"), composite("8", "78-83%"))
        assert result.probability == 63
