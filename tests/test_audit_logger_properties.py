"""
Property-based tests for the Audit Logger.

Uses Hypothesis to check output formats, level filtering, masking of
sensitive values and error context capture.
"""

import json
from io import StringIO

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_intel.audit_logger import AuditLogger
from domain_intel.config import LoggingConfig
from domain_intel.enums import LogLevel


SENSITIVE_FRAGMENTS = list(AuditLogger.SENSITIVE_KEYS)

component_strategy = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_",
    min_size=1,
    max_size=30,
)

message_strategy = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "Zs"),
        blacklist_characters="\x00\n\r",
    ),
    min_size=1,
    max_size=120,
)

# Keys that cannot contain any sensitive fragment
plain_key_strategy = st.sampled_from(["domain", "provider", "duration_ms", "status", "score"])


class TestOutputFormats:
    """Each entry is written once per configured format."""

    @given(
        level=st.sampled_from(list(LogLevel)),
        component=component_strategy,
        message=message_strategy,
    )
    @settings(max_examples=100)
    def test_both_formats(self, level: LogLevel, component: str, message: str) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="both", output_stream=stream)
        logger.log(level, component, message, {"domain": "example.com"})

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        parsed = json.loads(lines[0])
        assert parsed["level"] == level.value
        assert parsed["component"] == component
        assert parsed["message"] == message
        assert parsed["data"] == {"domain": "example.com"}
        assert lines[1].split(" ", 1)[1].startswith(level.value.upper())
        assert f"[{component}]" in lines[1]

    def test_json_only(self) -> None:
        stream = StringIO()
        AuditLogger(output_format="json", output_stream=stream).info("API", "hello")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "hello"

    def test_text_only(self) -> None:
        stream = StringIO()
        AuditLogger(output_format="text", output_stream=stream).warn("API", "careful")
        line = stream.getvalue().strip()
        assert " WARN [API] careful" in line

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")


class TestLevelFiltering:
    """Entries below the minimum level are dropped."""

    def test_debug_dropped_at_info(self) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream, min_level=LogLevel.INFO)
        assert logger.debug("X", "noise") is None
        assert logger.info("X", "kept") is not None
        assert len(logger.entries) == 1
        assert len(stream.getvalue().splitlines()) == 1

    def test_from_config(self) -> None:
        logger = AuditLogger.from_config(
            LoggingConfig(level="warn", output_format="json"), output_stream=StringIO()
        )
        assert logger.output_format == "json"
        assert not logger.is_enabled_for(LogLevel.INFO)
        assert logger.is_enabled_for(LogLevel.ERROR)

    def test_unknown_level_falls_back_to_info(self) -> None:
        logger = AuditLogger.from_config(
            LoggingConfig(level="verbose", output_format="text"), output_stream=StringIO()
        )
        assert logger.is_enabled_for(LogLevel.INFO)
        assert not logger.is_enabled_for(LogLevel.DEBUG)


class TestRetention:
    """The in-memory buffer keeps only the newest entries; the stream gets all."""

    @given(limit=st.integers(min_value=1, max_value=20), extra=st.integers(min_value=1, max_value=50))
    @settings(max_examples=30)
    def test_buffer_is_bounded(self, limit: int, extra: int) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream, max_entries=limit)
        for i in range(limit + extra):
            logger.info("X", f"entry {i}")
        assert len(logger.entries) == limit
        assert logger.entries[0].message == f"entry {extra}"
        assert logger.entries[-1].message == f"entry {limit + extra - 1}"
        assert len(stream.getvalue().splitlines()) == limit + extra

    def test_zero_retention_still_writes(self) -> None:
        stream = StringIO()
        logger = AuditLogger.from_config(
            LoggingConfig(output_format="text", retained_entries=0), output_stream=stream
        )
        assert logger.warn("X", "written") is not None
        assert logger.entries == []
        assert "written" in stream.getvalue()

    def test_from_config_applies_limit(self) -> None:
        logger = AuditLogger.from_config(
            LoggingConfig(output_format="json", retained_entries=3), output_stream=StringIO()
        )
        for i in range(10):
            logger.info("X", str(i))
        assert [e.message for e in logger.entries] == ["7", "8", "9"]

    def test_clear_entries(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        logger.info("X", "one")
        logger.clear_entries()
        assert logger.entries == []
        logger.info("X", "two")
        assert [e.message for e in logger.entries] == ["two"]


class TestSensitiveDataMasking:
    """Values under sensitive keys never reach the output."""

    @given(
        fragment=st.sampled_from(SENSITIVE_FRAGMENTS),
        prefix=st.sampled_from(["", "x_", "User-"]),
        secret=st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=12, max_size=40),
    )
    @settings(max_examples=100)
    def test_sensitive_values_masked(self, fragment: str, prefix: str, secret: str) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="both", output_stream=stream)
        secret = "SECRET" + secret
        entry = logger.info("X", "msg", {prefix + fragment: secret})

        assert entry.data[prefix + fragment] == AuditLogger.MASK_VALUE
        assert secret not in stream.getvalue()

    @given(key=plain_key_strategy, value=st.text(max_size=40))
    @settings(max_examples=100)
    def test_plain_values_untouched(self, key: str, value: str) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        entry = logger.info("X", "msg", {key: value})
        assert entry.data[key] == value

    def test_nested_and_list_values_masked(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        entry = logger.info("X", "msg", {
            "request": {"headers": {"Cookie": "abc", "Accept": "text/html"}},
            "attempts": [{"token": "t1"}, {"status": "ok"}],
        })
        assert entry.data["request"]["headers"]["Cookie"] == AuditLogger.MASK_VALUE
        assert entry.data["request"]["headers"]["Accept"] == "text/html"
        assert entry.data["attempts"][0]["token"] == AuditLogger.MASK_VALUE
        assert entry.data["attempts"][1] == {"status": "ok"}


class TestErrorContext:
    """log_error records exception, URL and HTTP status."""

    def test_full_context(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        entry = logger.log_error(
            "PricingCollector",
            "Provider fetch failed",
            error=ConnectionError("refused"),
            request_url="https://www.namecheap.com/",
            response_status_code=503,
            additional_data={"provider": "Namecheap"},
        )
        assert entry.level == LogLevel.ERROR
        assert entry.data["error_type"] == "ConnectionError"
        assert entry.data["error_message"] == "refused"
        assert entry.data["request_url"] == "https://www.namecheap.com/"
        assert entry.data["response_status_code"] == 503
        assert entry.data["provider"] == "Namecheap"

    def test_minimal_context_with_level(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        entry = logger.log_error("RDAP", "failed", level=LogLevel.WARN)
        assert entry.level == LogLevel.WARN
        assert entry.data == {}

    def test_additional_data_is_not_mutated(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        extra = {"provider": "GoDaddy"}
        logger.log_error("X", "failed", error=ValueError("bad"), additional_data=extra)
        assert extra == {"provider": "GoDaddy"}
