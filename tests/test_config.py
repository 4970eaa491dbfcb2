"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from concierge.config import AppConfig, ModelConfig, RoutingConfig, _safe_float, _safe_int, _validate_config


def _with_model(**changes) -> AppConfig:
    config = AppConfig()
    return replace(config, model=replace(config.model, **changes))


def _with_routing(**changes) -> AppConfig:
    config = AppConfig()
    return replace(config, routing=replace(config.routing, **changes))


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_invalid_temperature_too_high(self):
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(_with_model(llm_temperature=3.0))

    def test_invalid_temperature_negative(self):
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(_with_model(llm_temperature=-0.5))

    def test_zero_timeout(self):
        with pytest.raises(ValueError, match="LLM_TIMEOUT_SECONDS"):
            _validate_config(_with_model(timeout_seconds=0))

    def test_price_band_must_be_fraction(self):
        with pytest.raises(ValueError, match="PRICE_BAND"):
            _validate_config(_with_routing(price_band=1.5))

    def test_zero_match_limit(self):
        with pytest.raises(ValueError, match="MATCH_LIMIT"):
            _validate_config(_with_routing(match_limit=0))

    def test_history_must_hold_recent_turns(self):
        with pytest.raises(ValueError, match="MAX_HISTORY_MESSAGES"):
            _validate_config(_with_routing(history_turns=6, max_history_messages=10))


class TestDefaults:
    def test_routing_defaults(self):
        routing = RoutingConfig()
        assert routing.complex_query_length == 50
        assert routing.history_turns == 6
        assert routing.max_history_messages == 20

    def test_model_config_is_frozen(self):
        with pytest.raises(AttributeError):
            ModelConfig().llm_model = "other"  # type: ignore[misc]


class TestEnvParsing:
    def test_safe_int_reads_env(self, monkeypatch):
        monkeypatch.setenv("MATCH_LIMIT", "7")
        assert _safe_int("MATCH_LIMIT", "5") == 7

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("MATCH_LIMIT", "seven")
        with pytest.raises(ValueError, match="MATCH_LIMIT"):
            _safe_int("MATCH_LIMIT", "5")

    def test_safe_float_default(self, monkeypatch):
        monkeypatch.delenv("PRICE_BAND", raising=False)
        assert _safe_float("PRICE_BAND", "0.2") == 0.2
