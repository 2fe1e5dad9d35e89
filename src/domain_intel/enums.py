"""
Enumeration types for the domain intelligence engine.

These enums provide type-safe constants for trust bands, signal classes,
provider names, status codes and error codes throughout the system.
"""

from enum import Enum


class TrustBand(Enum):
    """Qualitative bucket derived from a numeric trust score."""

    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    VERY_LOW = "very_low"


class TLDClass(Enum):
    """Classification of a top-level domain suffix."""

    TRUSTED = "trusted"
    SUSPICIOUS = "suspicious"
    NEUTRAL = "neutral"


class Provider(Enum):
    """Registrar storefronts scraped for indicative pricing."""

    HOSTINGER = "Hostinger"
    NAMECHEAP = "Namecheap"
    GODADDY = "GoDaddy"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class ValidationErrorCode(Enum):
    """Error codes for URL validation failures."""

    EMPTY_INPUT = "empty_input"
    INVALID_FORMAT = "invalid_format"


class RDAPErrorCode(Enum):
    """Error codes for RDAP client operations."""

    NETWORK_ERROR = "network_error"
    TLS_ERROR = "tls_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"


class RDAPStatus(Enum):
    """RDAP query result status."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class WHOISErrorCode(Enum):
    """Error codes for WHOIS client operations."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    NO_SERVER = "no_server"


class WHOISStatus(Enum):
    """WHOIS query result status."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    ERROR = "error"


class FetchStatus(Enum):
    """Outcome of a single provider page fetch."""

    OK = "ok"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
