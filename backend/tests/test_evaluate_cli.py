"""Tests for the one-shot evaluation script."""

import importlib.util
from pathlib import Path

import orjson
import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "evaluate.py"


@pytest.fixture(scope="module")
def cli():
    loader_spec = importlib.util.spec_from_file_location("evaluate_cli", SCRIPT)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


FULL_ARGS = [
    "--sentiment", "22",
    "--price", "75000",
    "--peak", "100000",
    "--money-supply", "6.5",
    "--dollar-trend", "-5",
    "--etf-flow", "3",
    "--stablecoin-ratio", "14",
]


class TestEvaluateCli:
    def test_json_output(self, cli, capsys):
        assert cli.run(FULL_ARGS) == 0
        data = orjson.loads(capsys.readouterr().out)
        assert data["primary"]["kind"] == "BUY"
        assert data["primary"]["strength"] == "VERY_STRONG"
        assert data["estimated_fields"] == []
        assert data["trading"]["value"] == 7.0
        assert isinstance(data["macro"]["value"], float)

    def test_summary_output(self, cli, capsys):
        assert cli.run(FULL_ARGS + ["--summary"]) == 0
        out = capsys.readouterr().out
        assert "Primary signal:   BUY / VERY_STRONG" in out

    def test_fallbacks_fill_missing_metrics(self, cli, capsys, tmp_path):
        args = ["--price", "90000", "--peak", "100000", "--config", str(tmp_path / "none.yaml")]
        assert cli.run(args) == 0
        data = orjson.loads(capsys.readouterr().out)
        assert set(data["estimated_fields"]) == {
            "sentiment",
            "money_supply_growth",
            "dollar_index_trend",
            "etf_flow_score",
            "stablecoin_ratio",
        }

    def test_strict_rejects_missing(self, cli, capsys):
        assert cli.run(["--price", "90000", "--peak", "100000", "--strict"]) == 2
        assert "Invalid input: sentiment" in capsys.readouterr().err

    def test_missing_price_without_fallback(self, cli, capsys, tmp_path):
        assert cli.run(["--peak", "100000", "--config", str(tmp_path / "none.yaml")]) == 2
        assert "current_price" in capsys.readouterr().err

    def test_dollar_trend_help(self, cli):
        help_text = " ".join(cli.build_parser().format_help().split())
        assert "Dollar index trend, % over 6 months" in help_text
