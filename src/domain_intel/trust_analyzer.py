"""
Trust Analyzer: end-to-end trust assessment for one URL or hostname.

Coordinates the pipeline:
- Input validation and hostname normalization
- Local classifiers (SSL scheme, TLD class, government match, scam keywords)
- Registration lookup (RDAP with retry, WHOIS fallback) for age and registrar
- Trust scoring and highlight generation

Local classifiers never fail; the registration lookup degrades to unknown
values. The only error surfaced to callers is invalid input.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from .audit_logger import AuditLogger
from .classifiers import (
    analyze_ssl,
    classify_tld,
    extract_tld,
    is_trusted_registrar,
    match_government_domain,
    scan_scam_keywords,
)
from .config import SystemConfig
from .domain_age import calculate_domain_age
from .enums import ValidationErrorCode
from .exceptions import ValidationError
from .models import RegistrationInfo, TrustReport, TrustSignalSet
from .registration_lookup import RegistrationLookup
from .trust_engine import TrustEngine, build_highlights
from .url_normalizer import ERROR_URL_REQUIRED, normalize, validate_url


COMPONENT = "TrustAnalyzer"


class TrustAnalyzer:
    """
    Main entry point for trust analysis.

    Holds one RegistrationLookup for its lifetime; use as an async context
    manager (or call close()) to release the underlying HTTP client.
    """

    def __init__(
        self,
        config: SystemConfig,
        logger: Optional[AuditLogger] = None,
        lookup: Optional[RegistrationLookup] = None,
    ) -> None:
        """
        Initialize the trust analyzer.

        Args:
            config: System configuration
            logger: Optional audit logger
            lookup: Optional registration lookup; built from config when
                omitted and the analyzer is not offline
        """
        self._config = config
        self._logger = logger
        self._engine = TrustEngine(config.weights)

        self._lookup = lookup
        if self._lookup is None and not config.offline:
            self._lookup = RegistrationLookup(
                config.registration,
                logger=logger,
                user_agent=config.http.user_agent,
            )

    async def __aenter__(self) -> "TrustAnalyzer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._lookup is not None:
            await self._lookup.close()

    @property
    def engine(self) -> TrustEngine:
        return self._engine

    async def analyze(self, raw: str) -> TrustReport:
        """
        Analyze a URL or bare hostname.

        Args:
            raw: Free-text input as typed by a user

        Returns:
            TrustReport with score, signals, breakdown and highlights

        Raises:
            ValidationError: If the input is empty or not a parseable URL
        """
        start_time = time.perf_counter()

        validation = validate_url(raw)
        normalized = normalize(raw) if validation.is_valid else None
        if normalized is None:
            message = validation.error or "Invalid URL format"
            code = (
                ValidationErrorCode.EMPTY_INPUT
                if message == ERROR_URL_REQUIRED
                else ValidationErrorCode.INVALID_FORMAT
            )
            if self._logger:
                self._logger.info(COMPONENT, f"Rejected input: {message}", {"input": raw})
            raise ValidationError(code=code.value, message=message, details={"input": raw})

        hostname = normalized.hostname
        ssl = analyze_ssl(raw)

        registration = RegistrationInfo()
        if self._lookup is not None and not self._config.offline:
            registration = await self._lookup.lookup(hostname)

        signals = TrustSignalSet(
            hostname=hostname,
            has_ssl=ssl.has_ssl,
            tld=extract_tld(hostname),
            tld_class=classify_tld(hostname),
            scam_keywords=scan_scam_keywords(hostname),
            registrar=registration.registrar,
            trusted_registrar=is_trusted_registrar(registration.registrar),
            government_country=match_government_domain(hostname),
            domain_age_years=calculate_domain_age(registration.registration_date),
        )

        score, breakdown = self._engine.evaluate(signals)
        highlights = build_highlights(signals, score)

        if self._logger:
            self._logger.info(
                COMPONENT,
                f"Analysis completed for {hostname}: {score.value} ({score.band.name})",
                {
                    "domain": hostname,
                    "score": score.value,
                    "band": score.band.name,
                    "registration_source": registration.source,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                },
            )

        return TrustReport(
            domain=hostname,
            score=score,
            signals=signals,
            ssl=ssl,
            registration=registration,
            breakdown=breakdown,
            highlights=highlights,
            checked_at=datetime.now(timezone.utc).isoformat(),
        )
