"""Tests for metrics_config.py and settings."""

import textwrap

import pytest

from app.config import Settings
from app.metrics_config import (
    DEFAULT_FALLBACKS,
    MetricsConfig,
    SourceEntry,
    load_metrics_config,
)
from core.errors import ConfigFault


# ── MetricsConfig model tests ─────────────────────────────────────────────


class TestMetricsConfig:
    def test_defaults_are_manual_only(self):
        config = MetricsConfig()
        assert config.sources == {}
        assert config.fallbacks == DEFAULT_FALLBACKS

    def test_partial_fallbacks_keep_defaults(self):
        config = MetricsConfig(fallbacks={"stablecoin_ratio": 21.5})
        assert config.fallback_for("stablecoin_ratio") == 21.5
        assert config.fallback_for("dollar_index_trend") == -2.1

    def test_price_has_no_fallback(self):
        assert MetricsConfig().fallback_for("current_price") is None

    def test_unknown_metric_rejected(self):
        with pytest.raises(ValueError, match="unknown metric"):
            MetricsConfig(fallbacks={"gold_price": 2000})

    def test_refresh_cadence_by_family(self):
        config = MetricsConfig()
        assert config.refresh_seconds_for("current_price", 60, 3600, 86400) == 60
        assert config.refresh_seconds_for("sentiment", 60, 3600, 86400) == 3600
        assert config.refresh_seconds_for("money_supply_growth", 60, 3600, 86400) == 86400

    def test_refresh_override(self):
        config = MetricsConfig(
            sources={"peak_price": SourceEntry(url="http://x", path="ath", refresh_seconds=600)}
        )
        assert config.refresh_seconds_for("peak_price", 60, 3600, 86400) == 600


class TestSourceEntry:
    def test_no_api_key(self):
        entry = SourceEntry(url="http://x", path="value")
        assert entry.api_key == ""
        assert entry.query_params() == {}

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "secret123")
        entry = SourceEntry(url="http://x", path="value", api_key_env="MY_KEY", api_key_param="key")
        assert entry.api_key == "secret123"
        assert entry.query_params() == {"key": "secret123"}


# ── load_metrics_config tests ─────────────────────────────────────────────


class TestLoadMetricsConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_metrics_config(tmp_path / "nonexistent.yaml")
        assert config.sources == {}
        assert config.fallbacks == DEFAULT_FALLBACKS

    def test_load_sources(self, tmp_path):
        yaml_path = tmp_path / "metrics.yaml"
        yaml_path.write_text(textwrap.dedent("""\
            sources:
              sentiment:
                url: https://example.com/fng
                path: data.0.value
              current_price:
                url: https://example.com/price
                path: bitcoin.usd
                scale: 1.0
            fallbacks:
              etf_flow_score: -1
        """))

        config = load_metrics_config(yaml_path)
        assert set(config.sources) == {"sentiment", "current_price"}
        assert config.sources["sentiment"].path == "data.0.value"
        assert config.fallback_for("etf_flow_score") == -1
        assert config.fallback_for("sentiment") == 50

    def test_empty_file(self, tmp_path):
        yaml_path = tmp_path / "metrics.yaml"
        yaml_path.write_text("")
        assert load_metrics_config(yaml_path).fallbacks == DEFAULT_FALLBACKS

    def test_invalid_file_is_config_fault(self, tmp_path):
        yaml_path = tmp_path / "metrics.yaml"
        yaml_path.write_text("fallbacks:\n  bogus_metric: 1\n")
        with pytest.raises(ConfigFault):
            load_metrics_config(yaml_path)

    def test_malformed_yaml_is_config_fault(self, tmp_path):
        yaml_path = tmp_path / "metrics.yaml"
        yaml_path.write_text("fallbacks: [unclosed\n  sentiment: {\n")
        with pytest.raises(ConfigFault, match="Invalid metrics config"):
            load_metrics_config(yaml_path)

    def test_source_missing_path_is_config_fault(self, tmp_path):
        yaml_path = tmp_path / "metrics.yaml"
        yaml_path.write_text("sources:\n  sentiment:\n    url: https://example.com\n")
        with pytest.raises(ConfigFault):
            load_metrics_config(yaml_path)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NOTIFY_WEBHOOK_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.notify_webhook_url == ""
        assert settings.history_retention_days == 90
        assert settings.price_refresh_seconds == 60

    def test_engine_config(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_COOLDOWN_HOURS", "2")
        monkeypatch.setenv("HISTORY_RETENTION_DAYS", "30")
        config = Settings(_env_file=None).engine_config()
        assert config.cooldown_ms == 2 * 60 * 60 * 1000
        assert config.history_retention_days == 30
