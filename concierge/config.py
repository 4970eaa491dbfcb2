"""
Centralized configuration with environment variable overrides.

Company details, language-model settings, and routing thresholds are all
configurable here. Nothing in the orchestrator or its handlers hardcodes
them.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from concierge.logging_context import configure_logging

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class CompanyConfig:
    """Company identity and contact details used in prompts and fallbacks."""

    name: str = os.getenv("COMPANY_NAME", "Musili Homes")
    description: str = os.getenv(
        "COMPANY_DESCRIPTION", "Kenya's premier luxury real estate company"
    )
    phone: str = os.getenv("COMPANY_PHONE", "+254 700 123 456")
    email: str = os.getenv("COMPANY_EMAIL", "info@musilihomes.co.ke")
    address: str = os.getenv(
        "COMPANY_ADDRESS", "Musili Homes Tower, Westlands, Nairobi, Kenya"
    )
    currency: str = os.getenv("CURRENCY", "KES")


@dataclass(frozen=True)
class ModelConfig:
    """Remote text-completion service settings."""

    api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    base_url: str = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    llm_model: str = os.getenv("LLM_MODEL", "google/gemini-2.5-flash-lite")
    llm_temperature: float = _safe_float("LLM_TEMPERATURE", "0.7")
    max_tokens: int = _safe_int("LLM_MAX_TOKENS", "1200")
    timeout_seconds: float = _safe_float("LLM_TIMEOUT_SECONDS", "30.0")
    app_title: str = os.getenv("LLM_APP_TITLE", "Musili Homes AI Assistant")
    referer: str = os.getenv("LLM_REFERER", "https://musilihomes.co.ke")


@dataclass(frozen=True)
class RoutingConfig:
    """Thresholds and limits for routing, matching, and prompt size."""

    complex_query_length: int = _safe_int("COMPLEX_QUERY_LENGTH", "50")
    history_turns: int = _safe_int("HISTORY_TURNS", "6")
    max_history_messages: int = _safe_int("MAX_HISTORY_MESSAGES", "20")
    match_limit: int = _safe_int("MATCH_LIMIT", "5")
    recommendation_limit: int = _safe_int("RECOMMENDATION_LIMIT", "8")
    context_property_limit: int = _safe_int("CONTEXT_PROPERTY_LIMIT", "10")
    price_band: float = _safe_float("PRICE_BAND", "0.2")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    company: CompanyConfig = field(default_factory=CompanyConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    assistant_name: str = os.getenv("ASSISTANT_NAME", "AI Property Assistant")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 0.0 <= config.model.llm_temperature <= 2.0:
        raise ValueError(
            f"LLM_TEMPERATURE must be between 0.0 and 2.0, got {config.model.llm_temperature}"
        )
    if config.model.max_tokens < 1:
        raise ValueError(f"LLM_MAX_TOKENS must be >= 1, got {config.model.max_tokens}")
    if config.model.timeout_seconds <= 0:
        raise ValueError(
            f"LLM_TIMEOUT_SECONDS must be > 0, got {config.model.timeout_seconds}"
        )
    if not 0.0 < config.routing.price_band < 1.0:
        raise ValueError(
            f"PRICE_BAND must be between 0.0 and 1.0 (exclusive), got {config.routing.price_band}"
        )

    for limit_name, limit_value in [
        ("COMPLEX_QUERY_LENGTH", config.routing.complex_query_length),
        ("HISTORY_TURNS", config.routing.history_turns),
        ("MAX_HISTORY_MESSAGES", config.routing.max_history_messages),
        ("MATCH_LIMIT", config.routing.match_limit),
        ("RECOMMENDATION_LIMIT", config.routing.recommendation_limit),
        ("CONTEXT_PROPERTY_LIMIT", config.routing.context_property_limit),
    ]:
        if limit_value < 1:
            raise ValueError(f"{limit_name} must be >= 1, got {limit_value}")

    if config.routing.max_history_messages < 2 * config.routing.history_turns:
        raise ValueError(
            "MAX_HISTORY_MESSAGES must hold at least HISTORY_TURNS turns, "
            f"got {config.routing.max_history_messages} < {2 * config.routing.history_turns}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    configure_logging(config.log_level)
    logger.info("Configuration loaded for '%s'", config.company.name)
    return config


# Singleton instance
settings = load_config()
