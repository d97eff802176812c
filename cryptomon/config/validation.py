"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

HISTORY_SOURCES = {"sparkline", "market_chart"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_signal_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal engine parameters."""
        errors = []

        for name in (
            "min_history_points",
            "sma_short_period",
            "sma_long_period",
            "rsi_period",
            "macd_fast_period",
            "macd_slow_period",
            "macd_signal_period",
            "bollinger_period",
            "roc_period",
            "vote_margin",
        ):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        short = params.get("sma_short_period")
        long = params.get("sma_long_period")
        if _is_positive_int(short) and _is_positive_int(long) and short >= long:
            errors.append(ValidationError(
                field="sma_short_period",
                message="Must be smaller than sma_long_period",
                value=short
            ))

        oversold = params.get("rsi_oversold")
        overbought = params.get("rsi_overbought")
        for name, value in (("rsi_oversold", oversold), ("rsi_overbought", overbought)):
            if value is not None and (not isinstance(value, (int, float)) or not 0 <= value <= 100):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a number between 0 and 100",
                    value=value
                ))
        if (isinstance(oversold, (int, float)) and isinstance(overbought, (int, float))
                and oversold >= overbought):
            errors.append(ValidationError(
                field="rsi_oversold",
                message="Must be below rsi_overbought",
                value=oversold
            ))

        for name in ("bollinger_stddev_mult", "roc_threshold_pct"):
            if name in params and not _is_positive_number(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive number",
                    value=params[name]
                ))

        # Every indicator window must fit inside the minimum history
        min_points = params.get("min_history_points")
        if _is_positive_int(min_points):
            for name in ("sma_long_period", "bollinger_period"):
                value = params.get(name)
                if _is_positive_int(value) and value > min_points:
                    errors.append(ValidationError(
                        field=name,
                        message="Must not exceed min_history_points",
                        value=value
                    ))
            for name in ("rsi_period", "roc_period"):
                value = params.get(name)
                if _is_positive_int(value) and value >= min_points:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be below min_history_points",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_market_data_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market data retry parameters."""
        errors = []

        if "max_attempts" in params and not _is_positive_int(params["max_attempts"]):
            errors.append(ValidationError(
                field="max_attempts",
                message="Must be a positive integer",
                value=params["max_attempts"]
            ))

        if "retry_base_delay_seconds" in params:
            value = params["retry_base_delay_seconds"]
            if not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="retry_base_delay_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "history_days" in params and not _is_positive_int(params["history_days"]):
            errors.append(ValidationError(
                field="history_days",
                message="Must be a positive integer",
                value=params["history_days"]
            ))

        if "history_source" in params and params["history_source"] not in HISTORY_SOURCES:
            errors.append(ValidationError(
                field="history_source",
                message=f"Must be one of {sorted(HISTORY_SOURCES)}",
                value=params["history_source"]
            ))

        return errors

    @staticmethod
    def validate_cache_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate cache TTLs."""
        errors = []

        for name in ("token_holdings_ttl_seconds", "contract_catalog_ttl_seconds"):
            if name in params and not _is_positive_number(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive number of seconds",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_endpoint_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate upstream URLs."""
        errors = []

        urls = {
            name: params[name]
            for name in ("market_data_url", "explorer_url", "token_holdings_url")
            if name in params
        }
        for chain, url in (params.get("rpc_urls") or {}).items():
            urls[f"rpc_urls.{chain}"] = url

        for name, url in urls.items():
            parsed = urlparse(url) if isinstance(url, str) else None
            if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field=name,
                    message="Must be an absolute http(s) URL",
                    value=url
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "signals" in config:
            errors.extend(ConfigValidator.validate_signal_params(config["signals"]))

        if "market_data" in config:
            errors.extend(ConfigValidator.validate_market_data_params(config["market_data"]))

        if "cache" in config:
            errors.extend(ConfigValidator.validate_cache_params(config["cache"]))

        if "endpoints" in config:
            errors.extend(ConfigValidator.validate_endpoint_params(config["endpoints"]))

        return errors
