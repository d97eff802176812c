"""Tests for configuration loading and validation."""

import pytest

from cryptomon.config.defaults import get_default_config
from cryptomon.config.loader import ConfigLoader
from cryptomon.config.validation import ConfigValidator
from cryptomon.errors import ConfigurationError


class TestDefaults:
    """Test default values."""

    def test_signal_defaults(self):
        signals = get_default_config().signals
        assert signals.min_history_points == 30
        assert (signals.sma_short_period, signals.sma_long_period) == (7, 25)
        assert (signals.macd_fast_period, signals.macd_slow_period, signals.macd_signal_period) == (12, 26, 9)
        assert signals.vote_margin == 2

    def test_retry_defaults(self):
        market = get_default_config().market_data
        assert market.max_attempts == 3
        assert market.retry_base_delay_seconds == 1.5

    def test_defaults_are_valid(self):
        loader = ConfigLoader.create()
        merged = loader._dataclass_to_dict(get_default_config())
        assert ConfigValidator.validate_config(merged) == []


class TestConfigLoader:
    """Test 3-tier configuration merge."""

    def test_no_settings_file(self, tmp_path):
        loader = ConfigLoader.create(tmp_path)
        assert loader.build_config() == get_default_config()

    def test_settings_file_override(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "signals:\n  vote_margin: 3\nmarket_data:\n  history_source: market_chart\n"
        )
        config = ConfigLoader.create(tmp_path).build_config()

        assert config.signals.vote_margin == 3
        assert config.signals.rsi_period == 14
        assert config.market_data.history_source == "market_chart"

    def test_explicit_overrides_win(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("cache:\n  token_holdings_ttl_seconds: 30\n")
        config = ConfigLoader.create(tmp_path).build_config(
            {"cache": {"token_holdings_ttl_seconds": 90}}
        )
        assert config.cache.token_holdings_ttl_seconds == 90

    def test_rpc_urls_merge(self, tmp_path):
        config = ConfigLoader.create(tmp_path).build_config(
            {"endpoints": {"rpc_urls": {"base": "https://base.example.com"}}}
        )
        assert config.endpoints.rpc_urls["base"] == "https://base.example.com"
        assert config.endpoints.rpc_urls["ethereum"] == "https://cloudflare-eth.com"

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("signals: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).build_config()

    def test_non_mapping_settings(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).build_config()

    def test_empty_settings_file(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("")
        assert ConfigLoader.create(tmp_path).build_config() == get_default_config()

    def test_validation_errors_collected(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(tmp_path).build_config({
                "signals": {"sma_short_period": 30},
                "market_data": {"history_source": "ticks"},
            })
        errors = exc_info.value.errors
        assert any(e.startswith("sma_short_period") for e in errors)
        assert any(e.startswith("history_source") for e in errors)

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).build_config({"http": {"proxy": "socks5://x"}})


class TestConfigValidator:
    """Test individual validation rules."""

    def test_rsi_bounds(self):
        errors = ConfigValidator.validate_signal_params({"rsi_oversold": 80, "rsi_overbought": 70})
        assert [e.field for e in errors] == ["rsi_oversold"]

    def test_rsi_out_of_range(self):
        errors = ConfigValidator.validate_signal_params({"rsi_overbought": 120})
        assert errors[0].field == "rsi_overbought"

    def test_positive_periods(self):
        errors = ConfigValidator.validate_signal_params({"rsi_period": 0, "vote_margin": True})
        assert {e.field for e in errors} == {"rsi_period", "vote_margin"}

    def test_window_must_fit_history(self):
        errors = ConfigValidator.validate_signal_params(
            {"min_history_points": 20, "sma_long_period": 25, "bollinger_period": 20}
        )
        assert [e.field for e in errors] == ["sma_long_period"]

    def test_retry_params(self):
        errors = ConfigValidator.validate_market_data_params(
            {"max_attempts": 0, "retry_base_delay_seconds": -1}
        )
        assert {e.field for e in errors} == {"max_attempts", "retry_base_delay_seconds"}

    def test_cache_ttls(self):
        errors = ConfigValidator.validate_cache_params({"contract_catalog_ttl_seconds": 0})
        assert errors[0].field == "contract_catalog_ttl_seconds"

    def test_endpoint_urls(self):
        errors = ConfigValidator.validate_endpoint_params({
            "market_data_url": "ftp://example.com",
            "rpc_urls": {"base": "not a url", "ethereum": "https://eth.example.com"},
        })
        assert {e.field for e in errors} == {"market_data_url", "rpc_urls.base"}
