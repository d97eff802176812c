"""Tests for error classification."""

from cryptomon.errors import (
    ConfigurationError,
    DataQualityError,
    GracefulDegradationError,
    InsufficientDataError,
    MalformedResponseError,
    MarketDataError,
    RateLimitedError,
    RecoverableError,
    SystemFailureError,
    TransientNetworkError,
    UnrecoverableError,
)


class TestRecoveryCategories:
    """Test how errors map onto pipeline reactions."""

    def test_rate_limited_is_recoverable(self):
        error = RateLimitedError("429", retry_count=2, max_retries=2)
        assert isinstance(error, RecoverableError)
        assert error.recoverable is True
        assert error.status_code == 429
        assert error.retry_count == 2

    def test_market_data_error_fails_cycle(self):
        error = MarketDataError("HTTP 500", status_code=500, market_ids=["bitcoin"])
        assert isinstance(error, SystemFailureError)
        assert isinstance(error, UnrecoverableError)
        assert error.recoverable is False
        assert error.market_ids == ["bitcoin"]

    def test_transient_network_error_degrades(self):
        error = TransientNetworkError("timeout", source="explorer", status_code=504)
        assert isinstance(error, GracefulDegradationError)
        assert error.allows_degradation is True
        assert error.fallback_strategy == "unknown"
        assert error.degraded_functionality == "explorer"

    def test_malformed_response_is_both_data_quality_and_degradable(self):
        error = MalformedResponseError("bad shape", source="rpc", expected_format="hex")
        assert isinstance(error, DataQualityError)
        assert isinstance(error, GracefulDegradationError)
        assert error.source == "rpc"
        assert error.expected_format == "hex"
        assert str(error) == "bad shape"

    def test_insufficient_data(self):
        error = InsufficientDataError("need more", required_count=15, available_count=3)
        assert error.required_count == 15
        assert error.available_count == 3
        assert error.context == {}

    def test_configuration_error(self):
        error = ConfigurationError("invalid", path="config/settings.yaml", errors=["a", "b"])
        assert error.path == "config/settings.yaml"
        assert error.errors == ["a", "b"]
        assert isinstance(error, SystemFailureError)
