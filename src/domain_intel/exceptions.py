"""
Exception classes for the domain intelligence engine.

All exceptions inherit from DomainIntelError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class DomainIntelError(Exception):
    """Base exception for all domain intelligence errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainIntelError):
    """Raised when a URL or domain fails validation."""

    pass


class NetworkError(DomainIntelError):
    """Raised when network operations fail."""

    pass


class ConfigError(DomainIntelError):
    """Raised when configuration values are missing or invalid."""

    pass
