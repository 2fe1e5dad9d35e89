"""
Property-based tests for configuration loading and validation.
"""

import json
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_intel.config import (
    ENV_PREFIX,
    LoggingConfig,
    PricingConfig,
    RegistrationConfig,
    RetryConfig,
    ScoringWeights,
    SystemConfig,
    config_from_dict,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
    validate_config,
)
from domain_intel.exceptions import ConfigError


@st.composite
def system_config_strategy(draw) -> SystemConfig:
    """Generate valid SystemConfig objects."""
    config = create_default_config(offline=draw(st.booleans()))
    config.http.timeout_seconds = draw(st.floats(min_value=0.1, max_value=60))
    config.pricing = PricingConfig(
        provider_timeout_seconds=draw(st.floats(min_value=0.1, max_value=30)),
        overall_timeout_seconds=draw(st.one_of(st.none(), st.floats(min_value=0.1, max_value=60))),
        cache_max_age_seconds=draw(st.integers(min_value=0, max_value=86400)),
    )
    config.registration = RegistrationConfig(
        whois_enabled=draw(st.booleans()),
        timeout_seconds=draw(st.floats(min_value=0.1, max_value=30)),
        retry=RetryConfig(max_retries=draw(st.integers(min_value=0, max_value=5))),
    )
    config.weights = ScoringWeights(
        regular_base=draw(st.integers(min_value=0, max_value=60)),
        keyword_decay=draw(st.floats(min_value=0, max_value=0.9)),
    )
    config.logging = LoggingConfig(
        level=draw(st.sampled_from(["debug", "info", "warn", "error"])),
        output_format=draw(st.sampled_from(["json", "text", "both"])),
        retained_entries=draw(st.integers(min_value=0, max_value=5000)),
    )
    return config


class TestConfigRoundTrip:
    """Saving and loading a configuration preserves it."""

    @given(config=system_config_strategy())
    @settings(max_examples=50)
    def test_round_trip(self, tmp_path_factory, config: SystemConfig) -> None:
        path = tmp_path_factory.mktemp("cfg") / "config.json"
        save_config_to_file(config, path)
        assert load_config_from_file(path) == config

    def test_saved_file_is_json(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.json"
        save_config_to_file(create_default_config(), path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["pricing"]["cache_max_age_seconds"] == 300
        assert data["registration"]["retry"]["max_retries"] == 1


class TestConfigValidation:
    """Invalid values raise ConfigError."""

    def test_defaults_are_valid(self) -> None:
        validate_config(create_default_config())

    def test_non_positive_timeout(self) -> None:
        config = create_default_config()
        config.pricing.provider_timeout_seconds = 0
        with pytest.raises(ConfigError) as exc:
            validate_config(config)
        assert exc.value.code == "invalid_timeout"

    def test_insecure_rdap_endpoint(self) -> None:
        config = create_default_config()
        config.registration.rdap_endpoints["com"] = "http://rdap.example/"
        with pytest.raises(ConfigError) as exc:
            validate_config(config)
        assert exc.value.details["tld"] == "com"

    def test_negative_log_retention(self) -> None:
        with pytest.raises(ConfigError) as exc:
            config_from_dict({"logging": {"retained_entries": -1}})
        assert exc.value.code == "invalid_log_retention"

    def test_edu_band_must_be_ordered(self) -> None:
        with pytest.raises(ConfigError):
            config_from_dict({"weights": {"edu_min": 90, "edu_max": 80}})

    def test_unknown_keys_ignored(self) -> None:
        config = config_from_dict({"http": {"timeout_seconds": 3, "bogus": 1}, "extra": True})
        assert config.http.timeout_seconds == 3

    def test_malformed_section(self) -> None:
        with pytest.raises(ConfigError):
            config_from_dict({"http": ["not", "a", "dict"]})

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc:
            load_config_from_file(tmp_path / "missing.json")
        assert exc.value.code == "config_unreadable"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc:
            load_config_from_file(path)
        assert exc.value.code == "config_invalid_json"


class TestEnvironmentOverlay:
    """DOMAIN_INTEL_* variables override defaults."""

    def test_env_values_applied(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv(ENV_PREFIX + "PROVIDER_TIMEOUT", "2.5")
        monkeypatch.setenv(ENV_PREFIX + "PRICING_TIMEOUT", "6")
        monkeypatch.setenv(ENV_PREFIX + "OFFLINE", "true")
        monkeypatch.setenv(ENV_PREFIX + "WHOIS_ENABLED", "0")
        monkeypatch.setenv(ENV_PREFIX + "LOG_LEVEL", "DEBUG")

        config = load_config_from_env(env_file=tmp_path / "absent.env")
        assert config.pricing.provider_timeout_seconds == 2.5
        assert config.pricing.overall_timeout_seconds == 6.0
        assert config.offline is True
        assert config.registration.whois_enabled is False
        assert config.logging.level == "debug"

    def test_dotenv_file_is_read(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.delenv(ENV_PREFIX + "USER_AGENT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text(f"{ENV_PREFIX}USER_AGENT=test-agent/1.0\n", encoding="utf-8")

        config = load_config_from_env(env_file=env_file)
        assert config.http.user_agent == "test-agent/1.0"
        monkeypatch.delenv(ENV_PREFIX + "USER_AGENT", raising=False)

    def test_bad_number(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv(ENV_PREFIX + "HTTP_TIMEOUT", "fast")
        with pytest.raises(ConfigError):
            load_config_from_env(env_file=tmp_path / "absent.env")
