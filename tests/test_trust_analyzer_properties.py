"""
Tests for the end-to-end trust analyzer.

Offline configurations score local signals only; a stub lookup stands in
for RDAP/WHOIS where registration data matters.
"""

import asyncio
import io
import json
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_intel.audit_logger import AuditLogger
from domain_intel.config import create_default_config
from domain_intel.enums import TrustBand
from domain_intel.exceptions import ValidationError
from domain_intel.models import RegistrationInfo
from domain_intel.trust_analyzer import TrustAnalyzer


class StubLookup:
    """Returns a fixed RegistrationInfo and records queried hostnames."""

    def __init__(self, info: RegistrationInfo) -> None:
        self._info = info
        self.hostnames: list[str] = []
        self.closed = False

    async def lookup(self, hostname: str) -> RegistrationInfo:
        self.hostnames.append(hostname)
        return self._info

    async def close(self) -> None:
        self.closed = True


def years_ago(years: float) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=365.25 * years)).isoformat()


def analyze(raw: str, lookup=None, logger=None):
    config = create_default_config(offline=lookup is None)
    analyzer = TrustAnalyzer(config, logger=logger, lookup=lookup)
    return asyncio.run(analyzer.analyze(raw))


class TestOfflineAnalysis:
    """Local signals alone determine the score."""

    def test_https_commercial_domain(self) -> None:
        report = analyze("https://example.com/path?q=1")
        assert report.domain == "example.com"
        assert report.score.value == 50
        assert report.score.band == TrustBand.MEDIUM
        assert report.registration.source == "none"

    def test_plain_http_suspicious_tld(self) -> None:
        report = analyze("http://winner-lottery.xyz")
        assert report.signals.scam_keywords == ("winner", "lottery")
        assert report.score.value == 0
        assert report.score.band == TrustBand.VERY_LOW

    @pytest.mark.parametrize("raw", ["canada.ca", "https://www.GC.ca", "https://usa.gov/benefits"])
    def test_government_sites_score_maximum(self, raw: str) -> None:
        report = analyze(raw)
        assert report.score.value == 100
        assert report.signals.government_country is not None
        assert report.highlights.positive[0].startswith("This is the official government website")

    def test_edu_domain_in_band(self) -> None:
        report = analyze("https://mit.edu")
        assert 75 <= report.score.value <= 95

    @given(host=st.from_regex(r"[a-z][a-z0-9-]{0,20}\.(com|org|net|xyz|edu|io)", fullmatch=True))
    @settings(max_examples=100, deadline=None)
    def test_score_bounded_and_report_serializable(self, host: str) -> None:
        report = analyze(f"https://{host}")
        assert 0 <= report.score.value <= 100
        payload = json.loads(json.dumps(report.to_dict()))
        assert set(payload) == {
            "domain", "trustScore", "ssl", "signals", "registration",
            "breakdown", "highlights", "checkedAt",
        }
        assert payload["trustScore"]["value"] == report.score.value


class TestRegistrationSignals:
    """Registration data from the lookup feeds age and registrar signals."""

    def test_old_domain_with_trusted_registrar(self) -> None:
        lookup = StubLookup(RegistrationInfo(
            registration_date=years_ago(12), registrar="GoDaddy", source="rdap",
        ))
        report = analyze("https://www.example.com", lookup=lookup)
        assert lookup.hostnames == ["example.com"]
        assert report.signals.trusted_registrar
        assert report.signals.domain_age_years >= 10
        assert report.score.value == 85
        assert report.score.band == TrustBand.VERY_HIGH

    def test_registrar_match_is_case_sensitive(self) -> None:
        lookup = StubLookup(RegistrationInfo(registrar="godaddy", source="whois"))
        report = analyze("https://example.com", lookup=lookup)
        assert not report.signals.trusted_registrar

    def test_government_lookup_still_runs(self) -> None:
        lookup = StubLookup(RegistrationInfo())
        report = analyze("canada.ca", lookup=lookup)
        assert report.score.value == 100
        assert lookup.hostnames == ["canada.ca"]

    def test_close_releases_lookup(self) -> None:
        lookup = StubLookup(RegistrationInfo())

        async def scenario():
            async with TrustAnalyzer(create_default_config(), lookup=lookup) as analyzer:
                await analyzer.analyze("example.com")

        asyncio.run(scenario())
        assert lookup.closed


class TestInputValidation:
    """Invalid input raises ValidationError; nothing else does."""

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty_input(self, raw: str) -> None:
        with pytest.raises(ValidationError) as exc:
            analyze(raw)
        assert exc.value.code == "empty_input"
        assert exc.value.message == "URL is required"

    @pytest.mark.parametrize("raw", ["not a url", "http://", "https://exa mple.com"])
    def test_unparseable_input(self, raw: str) -> None:
        with pytest.raises(ValidationError) as exc:
            analyze(raw)
        assert exc.value.code == "invalid_format"
        assert exc.value.details == {"input": raw}

    def test_analysis_is_logged(self) -> None:
        stream = io.StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream)
        analyze("https://example.com", logger=logger)
        entry = logger.entries[-1]
        assert entry.component == "TrustAnalyzer"
        assert entry.data["score"] == 50
        assert "example.com" in stream.getvalue()
