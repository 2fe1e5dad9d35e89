"""
Data models for the domain intelligence engine.

This module defines the request-scoped value objects produced by the
normalizer, the signal collectors, the trust aggregator and the pricing
collector. None of them are persisted.
"""

from dataclasses import dataclass, field
from typing import Optional

from .enums import Provider, TLDClass, TrustBand


@dataclass(frozen=True)
class NormalizedDomain:
    """Canonical hostname: lowercase, IDNA-encoded, no scheme, no leading 'www.'."""

    hostname: str

    @property
    def tld(self) -> str:
        return self.hostname.rsplit(".", 1)[-1] if "." in self.hostname else ""

    def __str__(self) -> str:
        return self.hostname


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating free-text URL input."""

    is_valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class SSLSignal:
    """Scheme-string SSL heuristic. No TLS handshake is performed."""

    has_ssl: bool
    message: str


@dataclass
class RegistrationInfo:
    """Registration metadata recovered from RDAP or WHOIS."""

    registration_date: Optional[str] = None
    registrar: Optional[str] = None
    nameservers: list[str] = field(default_factory=list)
    source: str = "none"  # 'rdap', 'whois', 'none'

    def to_dict(self) -> dict:
        return {
            "registrationDate": self.registration_date,
            "registrar": self.registrar,
            "nameservers": list(self.nameservers),
            "source": self.source,
        }


@dataclass(frozen=True)
class TrustSignalSet:
    """Raw evidence about one domain, assembled once and never mutated."""

    hostname: str
    has_ssl: bool
    tld: str
    tld_class: TLDClass
    scam_keywords: tuple[str, ...] = ()
    registrar: Optional[str] = None
    trusted_registrar: bool = False
    government_country: Optional[str] = None
    domain_age_years: Optional[float] = None

    @property
    def is_government(self) -> bool:
        return self.government_country is not None

    @property
    def is_edu(self) -> bool:
        return self.tld == "edu"

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "hasSSL": self.has_ssl,
            "tld": self.tld,
            "tldClass": self.tld_class.value,
            "scamKeywords": list(self.scam_keywords),
            "registrar": self.registrar,
            "trustedRegistrar": self.trusted_registrar,
            "governmentCountry": self.government_country,
            "domainAgeYears": self.domain_age_years,
        }


@dataclass(frozen=True)
class TrustScore:
    """Composite trust score with its band."""

    value: int
    band: TrustBand

    def to_dict(self) -> dict:
        return {"value": self.value, "band": self.band.name}


@dataclass(frozen=True)
class ScoreAdjustment:
    """One line of the score breakdown."""

    signal: str
    points: float
    reason: str

    def to_dict(self) -> dict:
        return {"signal": self.signal, "points": self.points, "reason": self.reason}


@dataclass
class TrustHighlights:
    """Human-readable positive and negative findings."""

    positive: list[str] = field(default_factory=list)
    negative: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"positive": list(self.positive), "negative": list(self.negative)}


@dataclass
class TrustReport:
    """Complete result of a trust analysis."""

    domain: str
    score: TrustScore
    signals: TrustSignalSet
    ssl: SSLSignal
    registration: RegistrationInfo
    breakdown: list[ScoreAdjustment]
    highlights: TrustHighlights
    checked_at: str

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "trustScore": self.score.to_dict(),
            "ssl": {"hasSSL": self.ssl.has_ssl, "message": self.ssl.message},
            "signals": self.signals.to_dict(),
            "registration": self.registration.to_dict(),
            "breakdown": [item.to_dict() for item in self.breakdown],
            "highlights": self.highlights.to_dict(),
            "checkedAt": self.checked_at,
        }


@dataclass
class ProviderOffer:
    """Best-guess price and promotion scraped from one provider page."""

    provider: Provider
    url: str
    price: Optional[str] = None
    offer: Optional[str] = None
    freebies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "url": self.url,
            "price": self.price,
            "offer": self.offer,
            "freebies": list(self.freebies),
        }


@dataclass
class PricingReport:
    """All provider offers for one domain, stamped with generation time."""

    domain: str
    updated_at: str
    offers: list[ProviderOffer]

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "updatedAt": self.updated_at,
            "offers": [offer.to_dict() for offer in self.offers],
        }
