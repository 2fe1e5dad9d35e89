"""
RDAP Client for domain registration metadata.

This module provides an async RDAP client with TLS enforcement and parsing
of the few fields the trust engine consumes: registration events, the
registrar name and nameservers. Every failure is reported in the response
object; query() never raises.
"""

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from .enums import RDAPErrorCode, RDAPStatus
from .exceptions import NetworkError


# Event actions that carry the registration date, in preference order
REGISTRATION_EVENT_ACTIONS = ("registration", "last update of RDAP database")


@dataclass
class RDAPEvent:
    """A single RDAP event (e.g., registration, expiration)."""

    event_action: str
    event_date: str


@dataclass
class RDAPParsedFields:
    """Parsed RDAP response fields. Undefined fields are ignored."""

    domain_name: str
    status: list[str]
    events: list[RDAPEvent]
    nameservers: list[str]
    registrar: Optional[str] = None

    @property
    def registration_date(self) -> Optional[str]:
        """Date of the preferred registration event, if any."""
        for action in REGISTRATION_EVENT_ACTIONS:
            for event in self.events:
                if event.event_action == action:
                    return event.event_date
        return None


@dataclass
class RDAPError:
    """Error information from an RDAP query."""

    code: RDAPErrorCode
    message: str
    http_status_code: Optional[int] = None


@dataclass
class RDAPResponse:
    """Complete RDAP query response."""

    status: RDAPStatus
    http_status_code: int
    parsed_fields: Optional[RDAPParsedFields]
    error: Optional[RDAPError]
    url: Optional[str] = None


class RDAPClient:
    """
    Async RDAP client with TLS enforcement.

    Looks up the authoritative endpoint for a domain's TLD and falls back to
    the rdap.org redirector for unknown TLDs.
    """

    def __init__(
        self,
        tld_endpoints: dict[str, str],
        fallback_endpoint: Optional[str] = None,
        timeout: float = 10.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the RDAP client.

        Args:
            tld_endpoints: Mapping of TLD to RDAP endpoint URL
            fallback_endpoint: Endpoint used for TLDs not in tld_endpoints
            timeout: Request timeout in seconds
            user_agent: Optional User-Agent header value
            transport: Optional httpx transport (used by tests)
        """
        self._tld_endpoints = {k.lower(): v for k, v in tld_endpoints.items()}
        self._fallback_endpoint = fallback_endpoint
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "RDAPClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,  # TLS certificate verification enforced
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def get_endpoint_for_tld(self, tld: str) -> Optional[str]:
        """
        Get the RDAP endpoint URL for a given TLD.

        Args:
            tld: The top-level domain (e.g., 'com', 'de')

        Returns:
            The configured endpoint, the fallback endpoint, or None
        """
        return self._tld_endpoints.get(tld.lower(), self._fallback_endpoint)

    def _validate_endpoint_url(self, endpoint: str) -> None:
        """
        Validate that the endpoint uses HTTPS (TLS).

        Raises:
            NetworkError: If the endpoint does not use HTTPS
        """
        parsed = urlparse(endpoint)
        if parsed.scheme.lower() != "https":
            raise NetworkError(
                code=RDAPErrorCode.TLS_ERROR.value,
                message=f"RDAP endpoint must use HTTPS: {endpoint}",
                details={"endpoint": endpoint, "scheme": parsed.scheme},
            )

    def _parse_response(self, json_data: Any) -> Optional[RDAPParsedFields]:
        """
        Parse an RDAP domain object, extracting only defined fields.

        Returns:
            Parsed fields or None if the payload is not a domain object
        """
        if not isinstance(json_data, dict):
            return None

        domain_name = json_data.get("ldhName") or json_data.get("unicodeName") or ""
        if not isinstance(domain_name, str):
            domain_name = ""

        status = json_data.get("status", [])
        if not isinstance(status, list):
            status = [status] if status else []
        status = [s for s in status if isinstance(s, str)]

        events = []
        raw_events = json_data.get("events", [])
        if isinstance(raw_events, list):
            for event in raw_events:
                if isinstance(event, dict):
                    event_action = event.get("eventAction", "")
                    event_date = event.get("eventDate", "")
                    if isinstance(event_action, str) and isinstance(event_date, str) \
                            and event_action and event_date:
                        events.append(RDAPEvent(
                            event_action=event_action,
                            event_date=event_date,
                        ))

        nameservers = []
        raw_nameservers = json_data.get("nameservers", [])
        if isinstance(raw_nameservers, list):
            for ns in raw_nameservers:
                if isinstance(ns, dict):
                    ns_name = ns.get("ldhName") or ns.get("unicodeName") or ""
                    if isinstance(ns_name, str) and ns_name:
                        nameservers.append(ns_name.lower())

        registrar = None
        raw_entities = json_data.get("entities", [])
        if isinstance(raw_entities, list):
            for entity in raw_entities:
                if not isinstance(entity, dict):
                    continue
                roles = entity.get("roles") or []
                if not isinstance(roles, list) or "registrar" not in roles:
                    continue
                registrar = self._vcard_full_name(entity.get("vcardArray"))
                if registrar:
                    break

        return RDAPParsedFields(
            domain_name=domain_name,
            status=status,
            events=events,
            nameservers=nameservers,
            registrar=registrar,
        )

    @staticmethod
    def _vcard_full_name(vcard_array: Any) -> Optional[str]:
        """Return the 'fn' property of a jCard array, if present."""
        if not isinstance(vcard_array, list) or len(vcard_array) < 2:
            return None
        properties = vcard_array[1]
        if not isinstance(properties, list):
            return None
        for prop in properties:
            if isinstance(prop, list) and len(prop) >= 4 and prop[0] == "fn":
                value = prop[3]
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return None

    async def query(self, domain: str, endpoint: Optional[str] = None) -> RDAPResponse:
        """
        Query RDAP for domain information.

        Args:
            domain: The domain to query (should be in canonical form)
            endpoint: Optional specific endpoint URL; if not provided,
                     it is looked up based on TLD

        Returns:
            RDAPResponse with query results
        """
        if endpoint is None:
            tld = domain.rsplit(".", 1)[-1].lower() if "." in domain else ""
            endpoint = self.get_endpoint_for_tld(tld)
            if endpoint is None:
                return self._error_response(
                    RDAPErrorCode.NETWORK_ERROR,
                    f"No RDAP endpoint configured for TLD: {tld}",
                )

        try:
            self._validate_endpoint_url(endpoint)
        except NetworkError as e:
            return self._error_response(RDAPErrorCode.TLS_ERROR, e.message)

        client = self._ensure_client()
        rdap_url = f"{endpoint.rstrip('/')}/{domain}"
        headers = {"Accept": "application/rdap+json, application/json"}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent

        try:
            response = await client.get(rdap_url, headers=headers)
        except httpx.TimeoutException:
            return self._error_response(
                RDAPErrorCode.TIMEOUT,
                f"RDAP request timed out after {self._timeout}s",
                url=rdap_url,
            )
        except httpx.ConnectError as e:
            error_msg = str(e)
            if "ssl" in error_msg.lower() or "certificate" in error_msg.lower():
                return self._error_response(
                    RDAPErrorCode.TLS_ERROR,
                    f"TLS connection error: {error_msg}",
                    url=rdap_url,
                )
            return self._error_response(
                RDAPErrorCode.NETWORK_ERROR,
                f"Connection error: {error_msg}",
                url=rdap_url,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._error_response(
                RDAPErrorCode.NETWORK_ERROR,
                f"HTTP error: {e}",
                url=rdap_url,
            )

        if response.status_code == 404:
            return RDAPResponse(
                status=RDAPStatus.NOT_FOUND,
                http_status_code=404,
                parsed_fields=None,
                error=None,
                url=rdap_url,
            )

        if response.status_code == 429:
            return self._error_response(
                RDAPErrorCode.RATE_LIMITED,
                "Rate limited by RDAP server",
                http_status_code=429,
                url=rdap_url,
            )

        if response.status_code != 200:
            prefix = "RDAP server error" if response.status_code >= 500 else "Unexpected HTTP status"
            return self._error_response(
                RDAPErrorCode.SERVER_ERROR,
                f"{prefix}: {response.status_code}",
                http_status_code=response.status_code,
                url=rdap_url,
            )

        try:
            json_data = response.json()
        except ValueError as e:
            return self._error_response(
                RDAPErrorCode.PARSE_ERROR,
                f"Failed to parse RDAP response: {e}",
                http_status_code=200,
                url=rdap_url,
            )

        parsed = self._parse_response(json_data)
        if parsed is None or not parsed.domain_name:
            return self._error_response(
                RDAPErrorCode.PARSE_ERROR,
                "Response does not contain valid domain object",
                http_status_code=200,
                url=rdap_url,
            )

        return RDAPResponse(
            status=RDAPStatus.FOUND,
            http_status_code=200,
            parsed_fields=parsed,
            error=None,
            url=rdap_url,
        )

    @staticmethod
    def _error_response(
        code: RDAPErrorCode,
        message: str,
        http_status_code: int = 0,
        url: Optional[str] = None,
    ) -> RDAPResponse:
        return RDAPResponse(
            status=RDAPStatus.ERROR,
            http_status_code=http_status_code,
            parsed_fields=None,
            error=RDAPError(
                code=code,
                message=message,
                http_status_code=http_status_code or None,
            ),
            url=url,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
