"""
Taxonomy tables used by the signal classifiers.

Static lookup data only: TLD classes, government domains, scam keywords and
trusted registrars. Classification logic lives in classifiers.py.
"""

import re


# ============================================================================
# TLD CLASSES
# ============================================================================
TRUSTED_TLDS = frozenset({".gov", ".edu", ".mil", ".org"})

SUSPICIOUS_TLDS = frozenset({
    ".tk", ".ml", ".ga", ".cf", ".gq", ".xyz", ".top", ".click", ".loan", ".review",
})

if TRUSTED_TLDS & SUSPICIOUS_TLDS:
    raise RuntimeError(
        f"TLD appears in both trusted and suspicious sets: {sorted(TRUSTED_TLDS & SUSPICIOUS_TLDS)}"
    )


# ============================================================================
# GOVERNMENT DOMAINS
# ============================================================================
GOVERNMENT_DOMAINS: dict[str, str] = {
    "canada.ca": "Canada",
    "www.canada.ca": "Canada",
    "gc.ca": "Canada (Government of Canada)",
    "www.gc.ca": "Canada (Government of Canada)",
    "australia.gov.au": "Australia",
    "www.australia.gov.au": "Australia",
    "govt.nz": "New Zealand",
    "www.govt.nz": "New Zealand",
    "india.gov.in": "India",
    "www.india.gov.in": "India",
    "usa.gov": "United States",
    "www.usa.gov": "United States",
    "gov.uk": "United Kingdom",
    "www.gov.uk": "United Kingdom",
    "service.gov.uk": "United Kingdom",
    "www.service.gov.uk": "United Kingdom",
}

# (pattern, country label)
GOVERNMENT_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"^(www\.)?canada\.ca$", re.IGNORECASE), "Canada"),
    (re.compile(r"^(www\.)?australia\.gov\.au$", re.IGNORECASE), "Australia"),
    (re.compile(r"^(www\.)?govt\.nz$", re.IGNORECASE), "New Zealand"),
    (re.compile(r"^(www\.)?india\.gov\.in$", re.IGNORECASE), "India"),
    (re.compile(r"^(www\.)?usa\.gov$", re.IGNORECASE), "United States"),
    (re.compile(r"^(www\.)?gov\.uk$", re.IGNORECASE), "United Kingdom"),
    (re.compile(r"^(www\.)?government\.([a-z]{2,3})$", re.IGNORECASE), "Government ({0})"),
    (re.compile(r"^(www\.)?gc\.ca$", re.IGNORECASE), "Canada (Government of Canada)"),
    (re.compile(r"^(www\.)?service\.gov\.uk$", re.IGNORECASE), "United Kingdom"),
)

# Registry suffixes reserved for government entities: .gov, .gov.XX, .gob.XX, .gouv.XX
GOVERNMENT_SUFFIX_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\.gov\.([a-z]{2,3})$", re.IGNORECASE), "Government ({0})"),
    (re.compile(r"\.gob\.([a-z]{2})$", re.IGNORECASE), "Government ({0})"),
    (re.compile(r"\.gouv\.([a-z]{2})$", re.IGNORECASE), "Government ({0})"),
    (re.compile(r"(^|\.)gov$", re.IGNORECASE), "United States"),
)


# ============================================================================
# SCAM KEYWORDS
# ============================================================================
SCAM_KEYWORDS: tuple[str, ...] = (
    "free-money",
    "win-prize",
    "claim-reward",
    "verify-account",
    "urgent-action",
    "limited-time",
    "act-now",
    "congratulations",
    "winner",
    "lottery",
    "inheritance",
    "refund",
)


# ============================================================================
# REGISTRARS
# ============================================================================
# Matched exactly and case-sensitively against the registrar name
TRUSTED_REGISTRARS = frozenset({
    "GoDaddy",
    "Namecheap",
    "Google Domains",
    "Cloudflare",
    "AWS",
    "Amazon",
    "Microsoft",
    "Network Solutions",
})
