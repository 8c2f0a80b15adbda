"""
Centralized configuration with environment variable overrides.

Upstream credentials, calendar capacity, and aggregation thresholds are
all configurable here. Nothing is hardcoded in the engine or client logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from survey_calendar.logging_context import configure_logging

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
class UpstreamConfig:
    """Connection settings for the upstream survey API."""

    base_url: str = os.getenv("UPSTREAM_BASE", "")
    token: str = os.getenv("UPSTREAM_TOKEN", "")
    timeout_sec: float = _safe_float("UPSTREAM_TIMEOUT", "15.0")
    max_pages: int = _safe_int("UPSTREAM_MAX_PAGES", "1")

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.token)


@dataclass(frozen=True)
class CalendarConfig:
    """Capacity and surveyor roster settings."""

    daily_capacity: int = _safe_int("DAILY_CAPACITY", "3")
    placeholder_surveyors: int = _safe_int("PLACEHOLDER_SURVEYORS", "10")
    surveyor_seed: int = _safe_int("SURVEYOR_SEED", "42")


@dataclass(frozen=True)
class DensityConfig:
    """Month-view density thresholds, as fractions of total capacity."""

    orange_threshold: float = _safe_float("DENSITY_ORANGE_THRESHOLD", "0.33")
    red_threshold: float = _safe_float("DENSITY_RED_THRESHOLD", "0.66")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    density: DensityConfig = field(default_factory=DensityConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.upstream.timeout_sec <= 0:
        raise ValueError(
            f"UPSTREAM_TIMEOUT must be > 0, got {config.upstream.timeout_sec}"
        )
    if config.upstream.max_pages < 1:
        raise ValueError(
            f"UPSTREAM_MAX_PAGES must be >= 1, got {config.upstream.max_pages}"
        )
    if config.calendar.daily_capacity < 1:
        raise ValueError(
            f"DAILY_CAPACITY must be >= 1, got {config.calendar.daily_capacity}"
        )
    if config.calendar.placeholder_surveyors < 0:
        raise ValueError(
            "PLACEHOLDER_SURVEYORS must be >= 0, "
            f"got {config.calendar.placeholder_surveyors}"
        )

    for name, value in [
        ("DENSITY_ORANGE_THRESHOLD", config.density.orange_threshold),
        ("DENSITY_RED_THRESHOLD", config.density.red_threshold),
    ]:
        if not 0.0 < value <= 1.0:
            raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")

    if config.density.orange_threshold >= config.density.red_threshold:
        raise ValueError(
            "DENSITY_ORANGE_THRESHOLD must be below DENSITY_RED_THRESHOLD, "
            f"got {config.density.orange_threshold} >= {config.density.red_threshold}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    configure_logging(config.log_level)
    if not config.upstream.configured:
        logger.warning("Upstream survey API is not configured; remote calls will be refused")
    logger.info("Configuration loaded (daily capacity %d)", config.calendar.daily_capacity)
    return config


# Singleton instance
settings = load_config()
