"""
Configuration dataclasses and loaders for the domain intelligence engine.

This module defines all configuration structures used throughout the system,
including HTTP client defaults, pricing fan-out timeouts, registration lookup
endpoints, retry behaviour, scoring weights and logging, plus loaders for
JSON files and environment variables.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigError


# RDAP bootstrap redirector, used for TLDs without a configured endpoint
RDAP_FALLBACK = "https://rdap.org/domain/"

# Authoritative RDAP endpoints for the most common TLDs
DEFAULT_RDAP_ENDPOINTS: dict[str, str] = {
    "com": "https://rdap.verisign.com/com/v1/domain/",
    "net": "https://rdap.verisign.com/net/v1/domain/",
    "org": "https://rdap.publicinterestregistry.org/rdap/domain/",
    "info": "https://rdap.afilias.net/rdap/info/domain/",
    "io": "https://rdap.nic.io/domain/",
    "app": "https://rdap.nic.google/domain/",
    "dev": "https://rdap.nic.google/domain/",
    "xyz": "https://rdap.nic.xyz/domain/",
    "top": "https://rdap.nic.top/domain/",
    "de": "https://rdap.denic.de/domain/",
    "fr": "https://rdap.nic.fr/domain/",
    "nl": "https://rdap.sidn.nl/domain/",
}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

ENV_PREFIX = "DOMAIN_INTEL_"


@dataclass
class HTTPConfig:
    """Defaults shared by every outbound HTTP request."""

    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    timeout_seconds: float = 8.0


@dataclass
class RetryConfig:
    """Retry behavior configuration."""

    max_retries: int = 1
    base_delay_seconds: float = 0.25
    max_delay_seconds: float = 2.0
    retryable_errors: list[str] = field(
        default_factory=lambda: ["timeout", "server_error", "rate_limited"]
    )


@dataclass
class RegistrationConfig:
    """RDAP/WHOIS lookup configuration feeding the age and registrar signals."""

    rdap_endpoints: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_RDAP_ENDPOINTS)
    )
    rdap_fallback: str = RDAP_FALLBACK
    whois_enabled: bool = True
    timeout_seconds: float = 10.0
    retry: RetryConfig = field(default_factory=RetryConfig)


@dataclass
class PricingConfig:
    """Registrar storefront fan-out configuration."""

    provider_timeout_seconds: float = 8.0
    overall_timeout_seconds: Optional[float] = None
    cache_max_age_seconds: int = 300


@dataclass
class ScoringWeights:
    """
    Tunable coefficients of the trust score.

    The directions of each adjustment are fixed; the magnitudes are policy.
    """

    government_score: int = 100
    edu_base: int = 85
    edu_min: int = 75
    edu_max: int = 95
    edu_https_bonus: float = 10.0
    edu_keyword_penalty: float = 2.0
    regular_base: int = 35
    https_bonus: float = 15.0
    trusted_tld_bonus: float = 15.0
    suspicious_tld_penalty: float = 25.0
    trusted_registrar_bonus: float = 10.0
    age_max_bonus: float = 25.0
    age_saturation_years: float = 10.0
    edu_age_max_bonus: float = 5.0
    keyword_first_penalty: float = 12.0
    keyword_decay: float = 0.5


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'
    retained_entries: int = 1000  # in-memory entries kept; 0 keeps none


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    http: HTTPConfig = field(default_factory=HTTPConfig)
    registration: RegistrationConfig = field(default_factory=RegistrationConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    offline: bool = False  # skip RDAP/WHOIS lookups entirely


def create_default_config(offline: bool = False) -> SystemConfig:
    """Create a default system configuration."""
    return SystemConfig(offline=offline)


def validate_config(config: SystemConfig) -> None:
    """
    Check a configuration for values the engine cannot work with.

    Raises:
        ConfigError: On the first invalid value found
    """
    if config.http.timeout_seconds <= 0:
        raise ConfigError(
            code="invalid_timeout",
            message="HTTP timeout must be positive",
            details={"timeout_seconds": config.http.timeout_seconds},
        )
    if config.pricing.provider_timeout_seconds <= 0:
        raise ConfigError(
            code="invalid_timeout",
            message="Provider timeout must be positive",
            details={"provider_timeout_seconds": config.pricing.provider_timeout_seconds},
        )
    overall = config.pricing.overall_timeout_seconds
    if overall is not None and overall <= 0:
        raise ConfigError(
            code="invalid_timeout",
            message="Overall pricing timeout must be positive when set",
            details={"overall_timeout_seconds": overall},
        )
    if config.registration.timeout_seconds <= 0:
        raise ConfigError(
            code="invalid_timeout",
            message="Registration lookup timeout must be positive",
            details={"timeout_seconds": config.registration.timeout_seconds},
        )
    if config.registration.retry.max_retries < 0:
        raise ConfigError(
            code="invalid_retry",
            message="max_retries cannot be negative",
            details={"max_retries": config.registration.retry.max_retries},
        )
    for tld, endpoint in config.registration.rdap_endpoints.items():
        if not endpoint.lower().startswith("https://"):
            raise ConfigError(
                code="insecure_endpoint",
                message=f"RDAP endpoint for '{tld}' must use HTTPS",
                details={"tld": tld, "endpoint": endpoint},
            )
    if config.logging.output_format not in ("json", "text", "both"):
        raise ConfigError(
            code="invalid_log_format",
            message=f"Invalid log output format: {config.logging.output_format}",
            details={"output_format": config.logging.output_format},
        )
    if config.logging.retained_entries < 0:
        raise ConfigError(
            code="invalid_log_retention",
            message="retained_entries cannot be negative",
            details={"retained_entries": config.logging.retained_entries},
        )
    weights = config.weights
    if not (0 <= weights.edu_min <= weights.edu_base <= weights.edu_max <= 100):
        raise ConfigError(
            code="invalid_weights",
            message="Expected 0 <= edu_min <= edu_base <= edu_max <= 100",
            details=asdict(weights),
        )
    if not 0 <= weights.keyword_decay < 1:
        raise ConfigError(
            code="invalid_weights",
            message="keyword_decay must be in [0, 1)",
            details={"keyword_decay": weights.keyword_decay},
        )


def config_from_dict(data: dict) -> SystemConfig:
    """
    Build a SystemConfig from a plain dictionary (e.g. parsed JSON).

    Unknown keys are ignored; missing keys take their defaults.

    Raises:
        ConfigError: If a section has the wrong shape or an invalid value
    """
    try:
        http_data = data.get("http", {})
        registration_data = dict(data.get("registration", {}))
        retry_data = registration_data.pop("retry", {})
        pricing_data = data.get("pricing", {})
        weights_data = data.get("weights", {})
        logging_data = data.get("logging", {})

        config = SystemConfig(
            http=HTTPConfig(**_known_fields(HTTPConfig, http_data)),
            registration=RegistrationConfig(
                retry=RetryConfig(**_known_fields(RetryConfig, retry_data)),
                **_known_fields(RegistrationConfig, registration_data, exclude={"retry"}),
            ),
            pricing=PricingConfig(**_known_fields(PricingConfig, pricing_data)),
            weights=ScoringWeights(**_known_fields(ScoringWeights, weights_data)),
            logging=LoggingConfig(**_known_fields(LoggingConfig, logging_data)),
            offline=bool(data.get("offline", False)),
        )
    except (AttributeError, TypeError) as e:
        raise ConfigError(
            code="invalid_config",
            message=f"Malformed configuration: {e}",
        ) from e

    validate_config(config)
    return config


def _known_fields(cls, data: dict, exclude: Optional[set] = None) -> dict:
    """Keep only the keys that are fields of the given dataclass."""
    names = set(cls.__dataclass_fields__) - (exclude or set())
    return {k: v for k, v in data.items() if k in names}


def load_config_from_file(config_path: Path) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(
            code="config_unreadable",
            message=f"Could not read config file: {e}",
            details={"path": str(config_path)},
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigError(
            code="config_invalid_json",
            message=f"Config file is not valid JSON: {e}",
            details={"path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            code="invalid_config",
            message="Config file must contain a JSON object",
            details={"path": str(config_path)},
        )
    return config_from_dict(data)


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """Write a configuration as pretty-printed JSON."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2, ensure_ascii=False)


def load_config_from_env(
    env_file: Optional[Path] = None,
    base: Optional[SystemConfig] = None,
) -> SystemConfig:
    """
    Overlay DOMAIN_INTEL_* environment variables onto a configuration.

    A .env file is read first (without overriding variables already set).

    Recognised variables:
        DOMAIN_INTEL_USER_AGENT, DOMAIN_INTEL_HTTP_TIMEOUT,
        DOMAIN_INTEL_PROVIDER_TIMEOUT, DOMAIN_INTEL_PRICING_TIMEOUT,
        DOMAIN_INTEL_RDAP_TIMEOUT, DOMAIN_INTEL_RDAP_FALLBACK,
        DOMAIN_INTEL_WHOIS_ENABLED, DOMAIN_INTEL_OFFLINE,
        DOMAIN_INTEL_LOG_LEVEL, DOMAIN_INTEL_LOG_FORMAT
    """
    load_dotenv(env_file, override=False)
    config = base or create_default_config()

    user_agent = _env("USER_AGENT")
    if user_agent:
        config.http.user_agent = user_agent

    config.http.timeout_seconds = _float_env("HTTP_TIMEOUT", config.http.timeout_seconds)
    config.pricing.provider_timeout_seconds = _float_env(
        "PROVIDER_TIMEOUT", config.pricing.provider_timeout_seconds
    )
    if _env("PRICING_TIMEOUT"):
        config.pricing.overall_timeout_seconds = _float_env("PRICING_TIMEOUT", 0.0)
    config.registration.timeout_seconds = _float_env(
        "RDAP_TIMEOUT", config.registration.timeout_seconds
    )

    fallback = _env("RDAP_FALLBACK")
    if fallback:
        config.registration.rdap_fallback = fallback

    config.registration.whois_enabled = _bool_env(
        "WHOIS_ENABLED", config.registration.whois_enabled
    )
    config.offline = _bool_env("OFFLINE", config.offline)
    config.logging.level = (_env("LOG_LEVEL") or config.logging.level).lower()
    config.logging.output_format = (_env("LOG_FORMAT") or config.logging.output_format).lower()

    validate_config(config)
    return config


def _env(name: str) -> str:
    return os.getenv(ENV_PREFIX + name, "").strip()


def _float_env(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(
            code="invalid_env",
            message=f"{ENV_PREFIX}{name} must be a number, got {raw!r}",
        ) from e


def _bool_env(name: str, default: bool) -> bool:
    raw = _env(name).lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")
