"""
URL validation and domain normalization module.

Turns free-text input into a canonical hostname. Every operation here is
pure and never raises on bad input: validation failures are reported as a
ValidationResult and extraction falls back to the raw input.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

import idna

from .enums import ValidationErrorCode
from .models import NormalizedDomain, ValidationResult


ERROR_URL_REQUIRED = "URL is required"
ERROR_INVALID_FORMAT = "Invalid URL format"

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
WWW_PREFIX_PATTERN = re.compile(r"^www\.", re.IGNORECASE)

# DNS limits on the encoded name (RFC 1035)
MAX_HOSTNAME_LENGTH = 253
MAX_LABEL_LENGTH = 63

# Characters a browser URL parser rejects inside a hostname
FORBIDDEN_HOST_CHARS_PATTERN = re.compile(
    r'[\x00-\x20\x7f'           # Control characters and space
    r'!"#$%&\'()*+,/;<=>?@\[\\\]^`{|}~]'
)

# Maps each code to the message surfaced to callers
VALIDATION_MESSAGES = {
    ValidationErrorCode.EMPTY_INPUT: ERROR_URL_REQUIRED,
    ValidationErrorCode.INVALID_FORMAT: ERROR_INVALID_FORMAT,
}


def ensure_scheme(raw: str) -> str:
    """Prepend https:// unless the input already carries an http(s) scheme."""
    candidate = raw.strip()
    if not SCHEME_PATTERN.match(candidate):
        candidate = "https://" + candidate
    return candidate


def parse_hostname(raw: str) -> Optional[str]:
    """
    Parse raw input as a URL and return its canonical hostname.

    The hostname is lowercased and IDNA-encoded. Returns None when the input
    does not parse as a URL or has no usable hostname.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None

    try:
        parts = urlsplit(ensure_scheme(raw))
        # Accessing .port validates it; a malformed port raises ValueError
        parts.port
        hostname = parts.hostname
    except ValueError:
        return None

    if not hostname:
        return None

    hostname = hostname.rstrip(".")
    if not hostname or FORBIDDEN_HOST_CHARS_PATTERN.search(hostname):
        return None
    if any(not label for label in hostname.split(".")):
        return None

    if any(ord(c) > 127 for c in hostname):
        try:
            hostname = idna.encode(hostname, uts46=True).decode("ascii")
        except idna.IDNAError:
            return None

    if len(hostname) > MAX_HOSTNAME_LENGTH:
        return None
    if any(len(label) > MAX_LABEL_LENGTH for label in hostname.split(".")):
        return None

    return hostname.lower()


def validate_url(raw: str) -> ValidationResult:
    """
    Validate free-text URL input.

    Args:
        raw: User input, with or without a scheme

    Returns:
        ValidationResult; error is "URL is required" for blank input and
        "Invalid URL format" when no hostname can be parsed
    """
    if not isinstance(raw, str) or not raw.strip():
        return ValidationResult(
            is_valid=False,
            error=VALIDATION_MESSAGES[ValidationErrorCode.EMPTY_INPUT],
        )

    if parse_hostname(raw) is None:
        return ValidationResult(
            is_valid=False,
            error=VALIDATION_MESSAGES[ValidationErrorCode.INVALID_FORMAT],
        )

    return ValidationResult(is_valid=True)


def extract_domain(raw: str) -> str:
    """
    Extract a clean domain name from a URL.

    Strips scheme, path, port and a leading 'www.'. If the input cannot be
    parsed, it is returned unchanged.
    """
    hostname = parse_hostname(raw)
    if hostname is None:
        return raw
    return WWW_PREFIX_PATTERN.sub("", hostname)


def normalize(raw: str) -> Optional[NormalizedDomain]:
    """Return the NormalizedDomain for valid input, or None."""
    hostname = parse_hostname(raw)
    if hostname is None:
        return None
    stripped = WWW_PREFIX_PATTERN.sub("", hostname)
    if not stripped:
        return None
    return NormalizedDomain(hostname=stripped)
