"""
Pricing Collector for registrar storefronts.

Fetches each provider's public search-result page for a domain in parallel
and scrapes a best-guess price and promotion out of the raw HTML. Providers
are fully isolated from each other: a slow, failing or blocked storefront
leaves its own offer empty and never affects the others or the report.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

import httpx

from .audit_logger import AuditLogger
from .config import SystemConfig
from .enums import FetchStatus, LogLevel, Provider, ValidationErrorCode
from .exceptions import ValidationError
from .extractors import Extractor, extract_offer, extract_price
from .http_settings import HTTPSettings, get_http_settings
from .models import PricingReport, ProviderOffer


COMPONENT = "PricingCollector"


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one registrar storefront."""

    provider: Provider
    url_template: str
    freebies: tuple[str, ...]

    def url_for(self, domain: str) -> str:
        return self.url_template.format(domain=quote(domain, safe=""))


# Order here is the order of offers in every report
PROVIDERS: tuple[ProviderSpec, ...] = (
    ProviderSpec(
        provider=Provider.HOSTINGER,
        url_template=(
            "https://www.hostinger.com/domain-name-results"
            "?domain={domain}&from=domain-name-search"
        ),
        freebies=("WHOIS Privacy", "SSL Support", "1-Click DNS"),
    ),
    ProviderSpec(
        provider=Provider.NAMECHEAP,
        url_template="https://www.namecheap.com/domains/registration/results/?domain={domain}",
        freebies=("WHOIS Privacy", "Email Forwarding"),
    ),
    ProviderSpec(
        provider=Provider.GODADDY,
        url_template=(
            "https://www.godaddy.com/domainsearch/find"
            "?checkAvail=1&domainToCheck={domain}"
        ),
        freebies=("Fast DNS", "Support"),
    ),
)


class PricingCollector:
    """
    Concurrent fan-out over the provider table.

    Every fetch runs as its own task under the per-provider timeout; all
    tasks are joined at a single barrier, so total latency is bounded by
    the slowest provider (or the overall timeout) rather than their sum.
    """

    def __init__(
        self,
        config: SystemConfig,
        logger: Optional[AuditLogger] = None,
        settings: Optional[HTTPSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        providers: tuple[ProviderSpec, ...] = PROVIDERS,
        price_extractor: Extractor = extract_price,
        offer_extractor: Extractor = extract_offer,
    ) -> None:
        """
        Initialize the pricing collector.

        Args:
            config: System configuration (pricing timeouts, HTTP defaults)
            logger: Optional audit logger
            settings: HTTP settings; defaults to the shared process settings
            transport: Optional httpx transport (used by tests)
            providers: Provider table to query
            price_extractor: Callable mapping HTML to a price string
            offer_extractor: Callable mapping HTML to an offer string
        """
        self._config = config.pricing
        self._logger = logger
        self._settings = settings or get_http_settings(config)
        self._transport = transport
        self._providers = providers
        self._price_extractor = price_extractor
        self._offer_extractor = offer_extractor

    async def fetch_offers(self, domain: str) -> PricingReport:
        """
        Collect one offer per provider for a domain.

        Args:
            domain: Domain name as given by the caller

        Returns:
            PricingReport with one offer per provider, in table order

        Raises:
            ValidationError: If domain is empty
        """
        if not isinstance(domain, str) or not domain.strip():
            raise ValidationError(
                code=ValidationErrorCode.EMPTY_INPUT.value,
                message="domain required",
            )
        domain = domain.strip()
        start_time = time.perf_counter()

        offers = [
            ProviderOffer(
                provider=entry.provider,
                url=entry.url_for(domain),
                freebies=list(entry.freebies),
            )
            for entry in self._providers
        ]

        async with self._settings.build_client(transport=self._transport) as client:
            barrier = asyncio.gather(
                *(self._fill_offer(client, offer) for offer in offers)
            )
            try:
                statuses = await asyncio.wait_for(
                    barrier, timeout=self._config.overall_timeout_seconds
                )
            except asyncio.TimeoutError:
                # gather cancels the fetches still in flight; their offers stay empty
                statuses = None
                self._log(
                    LogLevel.WARN,
                    f"Pricing fan-out cut off after {self._config.overall_timeout_seconds}s",
                    {"domain": domain},
                )

        report = assemble_report(domain, offers)

        self._log(
            LogLevel.INFO,
            f"Collected offers for {domain}",
            {
                "domain": domain,
                "statuses": [s.value for s in statuses] if statuses else None,
                "priced": sum(1 for offer in offers if offer.price),
                "duration_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return report

    async def _fill_offer(self, client: httpx.AsyncClient, offer: ProviderOffer) -> FetchStatus:
        """Fetch one provider page and fill the offer in place. Never raises."""
        timeout = self._config.provider_timeout_seconds
        try:
            response = await asyncio.wait_for(client.get(offer.url), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            self._log_failure(offer, f"Provider fetch timed out after {timeout}s", e)
            return FetchStatus.TIMEOUT
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._log_failure(offer, f"Provider fetch failed: {e}", e)
            return FetchStatus.NETWORK_ERROR

        if not response.is_success:
            self._log_failure(
                offer,
                f"Provider returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
            return FetchStatus.HTTP_ERROR

        html = response.text
        offer.price = self._price_extractor(html)
        offer.offer = self._offer_extractor(html)
        return FetchStatus.OK

    def _log_failure(
        self,
        offer: ProviderOffer,
        message: str,
        error: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> None:
        if self._logger:
            self._logger.log_error(
                COMPONENT,
                message,
                error=error,
                request_url=offer.url,
                response_status_code=status_code,
                additional_data={"provider": offer.provider.value},
                level=LogLevel.WARN,
            )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, COMPONENT, message, data)


def assemble_report(domain: str, offers: list[ProviderOffer]) -> PricingReport:
    """Stamp collected offers with the current UTC time."""
    return PricingReport(
        domain=domain,
        updated_at=datetime.now(timezone.utc).isoformat(),
        offers=list(offers),
    )
