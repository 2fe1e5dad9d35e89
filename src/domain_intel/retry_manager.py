"""
Retry Manager for registration lookups.

Retries transient RDAP failures with exponential backoff. Definitive
answers (the domain object was found, or the registry says it does not
exist) are never retried. Callers bound the whole retry loop with their
own timeout.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable

from .config import RetryConfig
from .enums import RDAPErrorCode, RDAPStatus

if TYPE_CHECKING:
    from .rdap_client import RDAPResponse


class RetryManager:
    """Retry logic with exponential backoff for RDAP queries."""

    # Error codes that indicate transient errors (should retry)
    TRANSIENT_ERROR_CODES = frozenset({
        RDAPErrorCode.TIMEOUT.value,
        RDAPErrorCode.SERVER_ERROR.value,
        RDAPErrorCode.RATE_LIMITED.value,
        RDAPErrorCode.NETWORK_ERROR.value,
    })

    DEFINITIVE_STATUSES = frozenset({RDAPStatus.FOUND, RDAPStatus.NOT_FOUND})

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the retry manager.

        Args:
            config: Retry configuration with max_retries, delays, and retryable errors
            sleep: Awaitable used between attempts (replaceable in tests)
        """
        self._config = config
        self._sleep = sleep

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate wait time with exponential backoff.

        delay(n) = base_delay * 2^n, capped at max_delay.

        Args:
            attempt: The current attempt number (0-indexed)
        """
        delay = self._config.base_delay_seconds * (2 ** attempt)
        return min(delay, self._config.max_delay_seconds)

    def is_retryable_error(self, error_code) -> bool:
        """Check whether an error code (string or enum) is transient."""
        error_code_str = error_code.value if hasattr(error_code, "value") else str(error_code)
        if error_code_str in self._config.retryable_errors:
            return True
        return error_code_str in self.TRANSIENT_ERROR_CODES

    def should_retry(self, response: RDAPResponse) -> bool:
        """Determine if a response warrants another attempt."""
        if response.status in self.DEFINITIVE_STATUSES:
            return False
        if response.error is not None:
            return self.is_retryable_error(response.error.code)
        return False

    async def execute_rdap_with_retry(
        self,
        operation: Callable[[], Awaitable[RDAPResponse]],
    ) -> tuple[RDAPResponse, int]:
        """
        Run an RDAP query, retrying transient errors.

        The operation is expected to report failures in its response rather
        than raise.

        Returns:
            Tuple of (final RDAPResponse, number of attempts)
        """
        max_attempts = self._config.max_retries + 1
        attempts = 0

        while True:
            response = await operation()
            attempts += 1

            if not self.should_retry(response) or attempts >= max_attempts:
                return response, attempts

            await self._sleep(self.calculate_delay(attempts - 1))
