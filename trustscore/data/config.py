"""
TrustScore Configuration Module
===============================

Centralized configuration management using environment variables.
Supports both .env files and system environment variables.

Environment Variables:
    TRUSTPILOT_API_KEY: Trustpilot API key (required for live lookups)
    TRUSTPILOT_BASE_URL: API root (default: https://api.trustpilot.com/v1)
    TRUSTPILOT_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 30)
    TRUSTPILOT_MAX_RESPONSE_SIZE: Maximum response body in bytes (default: 4000000)

    TRUSTSCORE_REVIEW_CAP: Maximum reviews considered per business unit (default: 300)
    TRUSTSCORE_MAX_REVIEW_AGE: Months until a review stops gaining age bonus (default: 36)

    LOG_LEVEL / LOG_FORMAT / LOG_FILE / LOG_JSON: Logging options
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv


# Load environment variables from .env file if present
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


# Provider page size is fixed by the reviews endpoint contract
REVIEWS_PER_PAGE = 100

# Star ratings on the provider scale
MAX_REVIEW_STARS = 5


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raises ValueError when not set

    Returns:
        Environment variable value or default

    Raises:
        ValueError: If required=True and variable is not set
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be an integer, got: {value}")


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be a float, got: {value}")


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class TrustpilotConfig:
    """Trustpilot API configuration."""

    # Checked lazily by the client so offline commands work without a key
    api_key: Optional[str] = field(default_factory=lambda: get_env("TRUSTPILOT_API_KEY"))

    base_url: str = field(default_factory=lambda: get_env(
        "TRUSTPILOT_BASE_URL", "https://api.trustpilot.com/v1"
    ))

    # Request timeout in seconds
    request_timeout: float = field(default_factory=lambda: get_env_float("TRUSTPILOT_REQUEST_TIMEOUT", 30.0))

    # Bodies above this size are discarded (4 MB)
    max_response_size: int = field(default_factory=lambda: get_env_int("TRUSTPILOT_MAX_RESPONSE_SIZE", 4_000_000))

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.max_response_size <= 0:
            raise ValueError("max_response_size must be positive")
        self.base_url = self.base_url.rstrip("/")


@dataclass
class ScoringConfig:
    """Review retrieval and trust score parameters."""

    # Maximum reviews fetched per business unit
    review_cap: int = field(default_factory=lambda: get_env_int("TRUSTSCORE_REVIEW_CAP", 300))

    # Months until a review no longer gains an age bonus
    max_review_age: int = field(default_factory=lambda: get_env_int("TRUSTSCORE_MAX_REVIEW_AGE", 36))

    max_review_stars: int = MAX_REVIEW_STARS
    page_size: int = REVIEWS_PER_PAGE

    def __post_init__(self):
        """Validate configuration."""
        if self.review_cap <= 0 or self.review_cap % self.page_size:
            raise ValueError(
                f"review_cap must be a positive multiple of {self.page_size}, got: {self.review_cap}"
            )
        if self.max_review_age <= 0:
            raise ValueError("max_review_age must be positive")

    @property
    def max_pages(self) -> int:
        """Number of pages fetched when the cap applies."""
        return self.review_cap // self.page_size


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    format: str = field(default_factory=lambda: get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Main application settings container."""

    trustpilot: TrustpilotConfig = field(default_factory=TrustpilotConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application metadata
    app_name: str = "trustscore"
    app_version: str = "1.0.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in ("production", "prod")


def load_settings() -> Settings:
    """
    Load and validate all application settings.

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the environment is read again."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy class for lazy settings access."""

    def __getattr__(self, name):
        return getattr(get_settings(), name)


settings = _SettingsProxy()
