"""
Domain Intel - domain trust scoring and registrar pricing.

This package scores how trustworthy a domain looks from independent signals
(SSL scheme, TLD class, government match, scam keywords, registration age
and registrar) and collects indicative prices from registrar storefronts.
"""

__version__ = "0.1.0"

from domain_intel.exceptions import (
    DomainIntelError,
    ValidationError,
    NetworkError,
    ConfigError,
)
from domain_intel.enums import (
    TrustBand,
    TLDClass,
    Provider,
    LogLevel,
    ValidationErrorCode,
    RDAPErrorCode,
    RDAPStatus,
    WHOISErrorCode,
    WHOISStatus,
    FetchStatus,
)
from domain_intel.config import (
    HTTPConfig,
    RetryConfig,
    RegistrationConfig,
    PricingConfig,
    ScoringWeights,
    LoggingConfig,
    SystemConfig,
    create_default_config,
    load_config_from_file,
    load_config_from_env,
    save_config_to_file,
)
from domain_intel.models import (
    NormalizedDomain,
    ValidationResult,
    SSLSignal,
    RegistrationInfo,
    TrustSignalSet,
    TrustScore,
    ScoreAdjustment,
    TrustHighlights,
    TrustReport,
    ProviderOffer,
    PricingReport,
)
from domain_intel.url_normalizer import (
    validate_url,
    extract_domain,
    normalize,
)
from domain_intel.domain_age import calculate_domain_age
from domain_intel.classifiers import (
    analyze_ssl,
    classify_tld,
    match_government_domain,
    scan_scam_keywords,
    is_trusted_registrar,
)
from domain_intel.extractors import extract_price, extract_offer
from domain_intel.trust_engine import TrustEngine, build_highlights
from domain_intel.audit_logger import AuditLogger, LogEntry
from domain_intel.rdap_client import RDAPClient, RDAPResponse
from domain_intel.whois_client import WHOISClient, WHOISResponse
from domain_intel.retry_manager import RetryManager
from domain_intel.registration_lookup import RegistrationLookup
from domain_intel.trust_analyzer import TrustAnalyzer
from domain_intel.pricing import PricingCollector, PROVIDERS
from domain_intel.http_settings import HTTPSettings, get_http_settings

__all__ = [
    # Exceptions
    "DomainIntelError",
    "ValidationError",
    "NetworkError",
    "ConfigError",
    # Enums
    "TrustBand",
    "TLDClass",
    "Provider",
    "LogLevel",
    "ValidationErrorCode",
    "RDAPErrorCode",
    "RDAPStatus",
    "WHOISErrorCode",
    "WHOISStatus",
    "FetchStatus",
    # Configuration
    "HTTPConfig",
    "RetryConfig",
    "RegistrationConfig",
    "PricingConfig",
    "ScoringWeights",
    "LoggingConfig",
    "SystemConfig",
    "create_default_config",
    "load_config_from_file",
    "load_config_from_env",
    "save_config_to_file",
    # Models
    "NormalizedDomain",
    "ValidationResult",
    "SSLSignal",
    "RegistrationInfo",
    "TrustSignalSet",
    "TrustScore",
    "ScoreAdjustment",
    "TrustHighlights",
    "TrustReport",
    "ProviderOffer",
    "PricingReport",
    # Normalizer and classifiers
    "validate_url",
    "extract_domain",
    "normalize",
    "calculate_domain_age",
    "analyze_ssl",
    "classify_tld",
    "match_government_domain",
    "scan_scam_keywords",
    "is_trusted_registrar",
    # Extractors
    "extract_price",
    "extract_offer",
    # Scoring
    "TrustEngine",
    "build_highlights",
    # Logging
    "AuditLogger",
    "LogEntry",
    # Registration lookup
    "RDAPClient",
    "RDAPResponse",
    "WHOISClient",
    "WHOISResponse",
    "RetryManager",
    "RegistrationLookup",
    # Pipelines
    "TrustAnalyzer",
    "PricingCollector",
    "PROVIDERS",
    "HTTPSettings",
    "get_http_settings",
]
