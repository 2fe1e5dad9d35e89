"""
Registration metadata lookup.

Runs the RDAP query (with retry) and the WHOIS query concurrently and
merges what they return into a single RegistrationInfo. RDAP values take
precedence; WHOIS only fills fields RDAP left empty. Each protocol runs
under its own timeout, and any failure degrades to missing fields rather
than an exception.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from .audit_logger import AuditLogger
from .config import RegistrationConfig
from .enums import LogLevel, RDAPStatus, WHOISStatus
from .models import RegistrationInfo
from .rdap_client import RDAPClient, RDAPResponse
from .retry_manager import RetryManager
from .whois_client import WHOISClient, WHOISResponse


COMPONENT = "RegistrationLookup"

T = TypeVar("T")


class RegistrationLookup:
    """Fetch registration date and registrar for a hostname."""

    def __init__(
        self,
        config: RegistrationConfig,
        logger: Optional[AuditLogger] = None,
        rdap_client: Optional[RDAPClient] = None,
        whois_client: Optional[WHOISClient] = None,
        retry_manager: Optional[RetryManager] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Initialize the lookup.

        Args:
            config: Registration configuration (endpoints, timeout, retry)
            logger: Optional audit logger
            rdap_client: Optional pre-built RDAP client (used by tests)
            whois_client: Optional pre-built WHOIS client (used by tests)
            retry_manager: Optional retry manager (used by tests)
            user_agent: User-Agent sent with RDAP requests
        """
        self._config = config
        self._logger = logger
        self._rdap = rdap_client or RDAPClient(
            tld_endpoints=config.rdap_endpoints,
            fallback_endpoint=config.rdap_fallback,
            timeout=config.timeout_seconds,
            user_agent=user_agent,
        )
        self._whois = whois_client
        if self._whois is None and config.whois_enabled:
            self._whois = WHOISClient(timeout=config.timeout_seconds)
        self._retry = retry_manager or RetryManager(config.retry)

    async def __aenter__(self) -> "RegistrationLookup":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._rdap.close()

    async def lookup(self, hostname: str) -> RegistrationInfo:
        """
        Look up registration metadata for a canonical hostname.

        Each protocol runs under its own timeout, so a stalled WHOIS server
        never discards an RDAP answer (and vice versa).

        Returns:
            RegistrationInfo; source is 'none' when neither protocol answered
            within the timeout
        """
        tasks = [self._bounded("RDAP", hostname, self._query_rdap(hostname))]
        if self._whois is not None:
            tasks.append(self._bounded("WHOIS", hostname, self._whois.query(hostname)))

        results = await asyncio.gather(*tasks)
        rdap_response: Optional[RDAPResponse] = results[0]
        whois_response: Optional[WHOISResponse] = results[1] if len(results) > 1 else None

        return self.merge(hostname, rdap_response, whois_response)

    async def _bounded(self, protocol: str, hostname: str, query: Awaitable[T]) -> Optional[T]:
        """Await one protocol query; None when it misses the deadline."""
        timeout = self._config.timeout_seconds
        try:
            return await asyncio.wait_for(query, timeout=timeout)
        except asyncio.TimeoutError:
            self._log(
                LogLevel.WARN,
                f"{protocol} lookup timed out after {timeout}s",
                {"domain": hostname},
            )
            return None

    async def _query_rdap(self, hostname: str) -> RDAPResponse:
        response, attempts = await self._retry.execute_rdap_with_retry(
            lambda: self._rdap.query(hostname)
        )
        if attempts > 1:
            self._log(
                LogLevel.DEBUG,
                f"RDAP answered after {attempts} attempts",
                {"domain": hostname, "status": response.status.value},
            )
        return response

    def merge(
        self,
        hostname: str,
        rdap_response: Optional[RDAPResponse],
        whois_response: Optional[WHOISResponse],
    ) -> RegistrationInfo:
        """Combine both protocol answers, preferring RDAP field by field."""
        info = RegistrationInfo()

        if rdap_response is None:
            pass  # timed out, already logged
        elif rdap_response.status == RDAPStatus.FOUND and rdap_response.parsed_fields:
            fields = rdap_response.parsed_fields
            info.registration_date = fields.registration_date
            info.registrar = fields.registrar
            info.nameservers = list(fields.nameservers)
            info.source = "rdap"
        elif rdap_response.error is not None:
            self._log(
                LogLevel.WARN,
                f"RDAP lookup failed: {rdap_response.error.message}",
                {
                    "domain": hostname,
                    "code": rdap_response.error.code.value,
                    "request_url": rdap_response.url,
                },
            )

        if whois_response is None:
            return info

        if whois_response.status == WHOISStatus.FOUND:
            filled = False
            if info.registration_date is None and whois_response.creation_date:
                info.registration_date = whois_response.creation_date
                filled = True
            if info.registrar is None and whois_response.registrar:
                info.registrar = whois_response.registrar
                filled = True
            if not info.nameservers and whois_response.nameservers:
                info.nameservers = list(whois_response.nameservers)
                filled = True
            if filled and info.source == "none":
                info.source = "whois"
        elif whois_response.error is not None:
            self._log(
                LogLevel.WARN,
                f"WHOIS lookup failed: {whois_response.error.message}",
                {"domain": hostname, "code": whois_response.error.code.value},
            )

        return info

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, COMPONENT, message, data)
