"""
Local signal classifiers.

Pure table lookups over a hostname or raw input: SSL scheme presence, TLD
class, government-domain matching, scam keywords and registrar reputation.
None of these perform I/O, so they run inline in the analysis pipeline.
"""

import re
from typing import Optional

from .enums import TLDClass
from .models import SSLSignal
from .taxonomy import (
    GOVERNMENT_DOMAINS,
    GOVERNMENT_PATTERNS,
    GOVERNMENT_SUFFIX_PATTERNS,
    SCAM_KEYWORDS,
    SUSPICIOUS_TLDS,
    TRUSTED_REGISTRARS,
    TRUSTED_TLDS,
)


SSL_PRESENT_MESSAGE = "SSL certificate detected"
SSL_ABSENT_MESSAGE = "No SSL certificate (HTTP only)"

_HTTPS_PATTERN = re.compile(r"^https://", re.IGNORECASE)


def analyze_ssl(raw: str) -> SSLSignal:
    """
    Report whether the raw input used the https scheme.

    This inspects the scheme string only. It does not open a connection or
    verify a certificate.
    """
    has_ssl = isinstance(raw, str) and bool(_HTTPS_PATTERN.match(raw.strip()))
    return SSLSignal(
        has_ssl=has_ssl,
        message=SSL_PRESENT_MESSAGE if has_ssl else SSL_ABSENT_MESSAGE,
    )


def extract_tld(hostname: str) -> str:
    """Return the last label of a hostname, lowercased, without the dot."""
    if not hostname or "." not in hostname:
        return hostname.lower() if hostname else ""
    return hostname.rsplit(".", 1)[-1].lower()


def classify_tld(hostname: str) -> TLDClass:
    """Classify a hostname's TLD as trusted, suspicious or neutral."""
    suffix = "." + extract_tld(hostname)
    if suffix in TRUSTED_TLDS:
        return TLDClass.TRUSTED
    if suffix in SUSPICIOUS_TLDS:
        return TLDClass.SUSPICIOUS
    return TLDClass.NEUTRAL


def match_government_domain(hostname: str) -> Optional[str]:
    """
    Match a hostname against known government domains.

    Checks the literal mapping table first, then the per-country patterns,
    then the reserved government registry suffixes. Matching is
    case-insensitive and ignores a leading 'www.'.

    Returns:
        Country label of the match, or None
    """
    if not hostname:
        return None
    host = hostname.strip().lower().rstrip(".")

    country = GOVERNMENT_DOMAINS.get(host)
    if country is None and not host.startswith("www."):
        country = GOVERNMENT_DOMAINS.get("www." + host)
    if country is not None:
        return country

    for pattern, label in GOVERNMENT_PATTERNS:
        match = pattern.search(host)
        if match:
            return _format_label(label, match)

    for pattern, label in GOVERNMENT_SUFFIX_PATTERNS:
        match = pattern.search(host)
        if match:
            return _format_label(label, match)

    return None


def _format_label(label: str, match: re.Match) -> str:
    groups = [g for g in match.groups() if g and not g.startswith(("www", "."))]
    code = groups[-1].upper() if groups else ""
    return label.format(code)


def scan_scam_keywords(text: str) -> tuple[str, ...]:
    """
    Find scam keywords contained in a hostname, path or page text.

    Returns:
        Matched keywords in table order; empty when there is no hit
    """
    if not isinstance(text, str) or not text:
        return ()
    lowered = text.lower()
    return tuple(keyword for keyword in SCAM_KEYWORDS if keyword in lowered)


def is_trusted_registrar(registrar: Optional[str]) -> bool:
    """Exact, case-sensitive membership test against the trusted registrar list."""
    if not registrar:
        return False
    return registrar in TRUSTED_REGISTRARS
