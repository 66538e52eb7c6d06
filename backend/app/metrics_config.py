"""Metric source configuration loaded from metrics.yaml.

Supports:
- Per-metric generic HTTP JSON sources (url + dotted path to the value)
- Manual fallback values for metrics that are entered by hand or whose
  source is down (dollar index trend, stablecoin ratio, ETF flows, ...)
- Backward compatible: no YAML file = manual fallbacks only
"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from core.errors import ConfigFault
from core.models.metrics import METRIC_FIELDS

logger = logging.getLogger(__name__)

# Last manually-entered estimates. Price and peak have no sensible constant.
DEFAULT_FALLBACKS: dict[str, float] = {
    "sentiment": 50,
    "money_supply_growth": 3.9,
    "dollar_index_trend": -2.1,
    "stablecoin_ratio": 18.2,
    "etf_flow_score": 3,
}

# Which refresh cadence applies to each metric
PRICE_METRICS = ("current_price", "peak_price")
SENTIMENT_METRICS = ("sentiment",)


class SourceEntry(BaseModel):
    """A generic HTTP JSON source for one metric."""

    url: str
    path: str  # Dotted path into the JSON body, e.g. "data.0.value"
    scale: float = 1.0
    refresh_seconds: float | None = None  # None = metric's default cadence
    api_key_env: str = ""
    api_key_param: str = "api_key"

    @property
    def api_key(self) -> str:
        if not self.api_key_env:
            return ""
        return os.environ.get(self.api_key_env, "")

    def query_params(self) -> dict[str, str]:
        key = self.api_key
        return {self.api_key_param: key} if key else {}


class MetricsConfig(BaseModel):
    """Top-level metrics.yaml configuration."""

    sources: dict[str, SourceEntry] = {}
    fallbacks: dict[str, float] = dict(DEFAULT_FALLBACKS)

    @field_validator("fallbacks", mode="before")
    @classmethod
    def _merge_defaults(cls, value):
        # Partial overrides keep the remaining default estimates
        return {**DEFAULT_FALLBACKS, **(value or {})}

    @model_validator(mode="after")
    def _validate(self):
        unknown = (set(self.sources) | set(self.fallbacks)) - set(METRIC_FIELDS)
        if unknown:
            raise ValueError(
                f"unknown metric names {sorted(unknown)}, expected any of {METRIC_FIELDS}"
            )
        return self

    def fallback_for(self, name: str) -> float | None:
        return self.fallbacks.get(name)

    def refresh_seconds_for(
        self,
        name: str,
        price_seconds: float,
        sentiment_seconds: float,
        slow_seconds: float,
    ) -> float:
        """Refresh cadence of a metric (source override, else by metric family)."""
        entry = self.sources.get(name)
        if entry is not None and entry.refresh_seconds is not None:
            return entry.refresh_seconds
        if name in PRICE_METRICS:
            return price_seconds
        if name in SENTIMENT_METRICS:
            return sentiment_seconds
        return slow_seconds


_DEFAULT_PATH = Path(__file__).parent.parent / "metrics.yaml"


def load_metrics_config(path: Path | None = None) -> MetricsConfig:
    """Load metrics config from YAML file.

    Falls back to defaults (manual fallbacks, no sources) if the file
    doesn't exist.

    Raises:
        ConfigFault: If the file is not a valid configuration.
    """
    config_path = path or _DEFAULT_PATH

    # Load .env into os.environ so SourceEntry.api_key can read it
    env_path = config_path.parent / ".env"
    load_dotenv(env_path, override=False)

    if not config_path.exists():
        logger.info(
            "No metrics config found at %s, using manual fallbacks only",
            config_path,
        )
        return MetricsConfig()

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        config = MetricsConfig(**raw)
    except (yaml.YAMLError, TypeError, ValidationError) as e:
        raise ConfigFault(f"Invalid metrics config {config_path}: {e}") from e

    logger.info(
        "Loaded metrics config: %d sources (%s), %d fallbacks",
        len(config.sources),
        ", ".join(sorted(config.sources)) or "none",
        len(config.fallbacks),
    )
    return config
