#!/usr/bin/env python3
"""
One-shot signal evaluation from the command line.

Scores a metric set given as arguments and prints the cycle result as
JSON. Nothing is persisted and no notification is sent.

Usage:
    python scripts/evaluate.py --price 95000 --peak 109000 --sentiment 22
    python scripts/evaluate.py --price 95000 --peak 109000 --strict ...
    python scripts/evaluate.py ... --summary
"""

import argparse
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import orjson

from app.metrics_config import load_metrics_config
from core.engine import evaluate_cycle
from core.errors import ConfigFault, InputFault
from core.models import CycleResult, Metric, build_metric_set

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# argparse dest -> metric name
ARGUMENTS = {
    "sentiment": ("sentiment", "Fear & greed index, 0-100"),
    "price": ("current_price", "Current BTC price"),
    "peak": ("peak_price", "All-time-high BTC price"),
    "money_supply": ("money_supply_growth", "Global money supply growth, %% YoY"),
    "dollar_trend": ("dollar_index_trend", "Dollar index trend, %% over 6 months"),
    "etf_flow": ("etf_flow_score", "ETF flow score, -5 (outflows) .. +5 (inflows)"),
    "stablecoin_ratio": ("stablecoin_ratio", "Stablecoin ratio, %%"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate BTC signals for one metric set")
    for dest, (_, help_text) in ARGUMENTS.items():
        parser.add_argument(f"--{dest.replace('_', '-')}", dest=dest, type=float, help=help_text)
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject missing metrics instead of using the configured fallbacks",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to metrics.yaml (fallback values)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a short text summary instead of JSON",
    )
    return parser


def collect_readings(args: argparse.Namespace) -> dict[str, Metric | float | None]:
    """Arguments given on the command line, plus fallbacks unless --strict."""
    fallbacks = {} if args.strict else load_metrics_config(args.config).fallbacks

    readings: dict[str, Metric | float | None] = {}
    for dest, (name, _) in ARGUMENTS.items():
        value = getattr(args, dest)
        if value is not None:
            readings[name] = value
        elif name in fallbacks:
            readings[name] = Metric(value=fallbacks[name], is_estimate=True, source="fallback")
        else:
            readings[name] = None
    return readings


def format_summary(result: CycleResult) -> str:
    primary = result.primary
    lines = [
        "=" * 60,
        f"Trading score:    {result.trading.value}/10  {result.trading.label} "
        f"({result.trading.action}, {result.trading.probability})",
        f"Macro score:      {result.macro.value}/10  {result.macro.label} "
        f"({result.macro.action}, {result.macro.probability})",
        f"Synthesis:        {result.synthesis.risk_label} "
        f"({result.synthesis.probability}%)",
        "-" * 60,
        f"Primary signal:   {primary.kind.value} / {primary.strength.value}",
        f"Action:           {primary.action}",
        f"Reason:           {primary.reason}",
        f"Active rules:     {primary.active_strategies}",
    ]
    if result.estimated_fields:
        lines.append(f"Estimated:        {', '.join(result.estimated_fields)}")
    lines.append("=" * 60)
    return "\n".join(lines)


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        readings = collect_readings(args)
        result = evaluate_cycle(build_metric_set(readings))
    except InputFault as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2
    except ConfigFault as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 3

    if args.summary:
        print(format_summary(result))
    else:
        print(orjson.dumps(result.model_dump(mode="json"), option=orjson.OPT_INDENT_2).decode())
    return 0


if __name__ == "__main__":
    sys.exit(run())
