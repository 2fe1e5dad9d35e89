"""
WHOIS Client module, used as the fallback source of registration metadata.

Queries the TLD's WHOIS server over TCP port 43 and pulls the creation date,
registrar and nameservers out of the free-text reply. Every failure is
reported in the response object; query() never raises.
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Optional

from .classifiers import extract_tld
from .enums import WHOISErrorCode, WHOISStatus


@dataclass
class WHOISError:
    """Error information from a WHOIS query."""

    code: WHOISErrorCode
    message: str


@dataclass
class WHOISResponse:
    """Response from a WHOIS query."""

    status: WHOISStatus
    raw_response: Optional[str]
    no_match_signal_detected: bool
    error: Optional[WHOISError]
    creation_date: Optional[str] = None
    registrar: Optional[str] = None
    nameservers: list[str] = field(default_factory=list)


CREATION_DATE_PATTERNS = (
    re.compile(r"Creation Date:\s*([^\r\n<]+)", re.IGNORECASE),
    re.compile(r"Registered On:\s*([^\r\n<]+)", re.IGNORECASE),
    re.compile(r"Registration Time:\s*([^\r\n<]+)", re.IGNORECASE),
    re.compile(r"^\s*Created:\s*([^\r\n<]+)", re.IGNORECASE | re.MULTILINE),
)

REGISTRAR_PATTERNS = (
    re.compile(r"^\s*Registrar:\s*([^\r\n<]+)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"Sponsoring Registrar:\s*([^\r\n<]+)", re.IGNORECASE),
)

NAMESERVER_PATTERN = re.compile(
    r"(?:Name Server|Nameserver|nserver):\s*([^\r\n<\s]+)", re.IGNORECASE
)

REGISTRATION_INDICATORS = (
    "Domain Name:",
    "Registrant:",
    "Creation Date:",
    "Registry Domain ID:",
    "Registrar:",
    "Name Server:",
    "DNSSEC:",
)


class WHOISClient:
    """
    WHOIS client with per-TLD server table and "no match" signals.

    Responses that contain neither a no-match signal nor a registration
    indicator are reported as AMBIGUOUS.
    """

    NO_MATCH_SIGNALS: dict[str, list[str]] = {
        "de": ["Status: free"],
        "com": ["No match for domain"],
        "net": ["No match for domain"],
        "edu": ["NO MATCH"],
        "gov": ["No match for"],
        "org": ["NOT FOUND", "Domain not found"],
        "eu": ["Status: AVAILABLE"],
        "io": ["NOT FOUND", "Domain not found"],
        "co": ["No Data Found"],
        "info": ["NOT FOUND", "Domain not found"],
        "xyz": ["DOMAIN NOT FOUND"],
        "uk": ["No match for"],
        "ca": ["Not found:"],
    }

    WHOIS_SERVERS: dict[str, str] = {
        "de": "whois.denic.de",
        "com": "whois.verisign-grs.com",
        "net": "whois.verisign-grs.com",
        "edu": "whois.educause.edu",
        "gov": "whois.dotgov.gov",
        "org": "whois.pir.org",
        "eu": "whois.eu",
        "io": "whois.nic.io",
        "co": "whois.nic.co",
        "info": "whois.afilias.net",
        "xyz": "whois.nic.xyz",
        "uk": "whois.nic.uk",
        "ca": "whois.cira.ca",
    }

    PORT = 43
    MAX_RESPONSE_BYTES = 256 * 1024

    def __init__(
        self,
        timeout: float = 10.0,
        custom_servers: Optional[dict[str, str]] = None,
        custom_signals: Optional[dict[str, list[str]]] = None,
    ) -> None:
        """
        Initialize the WHOIS client.

        Args:
            timeout: Overall query timeout in seconds
            custom_servers: Optional custom WHOIS servers per TLD
            custom_signals: Optional custom no-match signals per TLD
        """
        self._timeout = timeout

        self._servers = dict(self.WHOIS_SERVERS)
        if custom_servers:
            self._servers.update(custom_servers)

        self._signals = dict(self.NO_MATCH_SIGNALS)
        if custom_signals:
            self._signals.update(custom_signals)

    async def query(self, domain: str) -> WHOISResponse:
        """
        Query WHOIS for a domain.

        Returns:
            WHOISResponse whose status is NOT_FOUND on an exact no-match
            signal, FOUND on a registration indicator, AMBIGUOUS otherwise,
            or ERROR on network failure
        """
        tld = extract_tld(domain)
        server = self._servers.get(tld)
        if not server:
            return self._error(
                WHOISErrorCode.NO_SERVER,
                f"No WHOIS server configured for TLD: {tld}",
            )

        try:
            raw_response = await asyncio.wait_for(
                self._read_reply(domain, server),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            return self._error(
                WHOISErrorCode.TIMEOUT,
                f"WHOIS query timed out after {self._timeout}s",
            )
        except OSError as e:
            return self._error(WHOISErrorCode.NETWORK_ERROR, f"Socket error: {e}")

        return self._parse_response(raw_response, tld)

    async def _read_reply(self, domain: str, server: str) -> str:
        """Send the query with CRLF and read until the server closes."""
        reader, writer = await asyncio.open_connection(server, self.PORT)
        try:
            writer.write(f"{domain}\r\n".encode("utf-8"))
            await writer.drain()
            reply = bytearray()
            while len(reply) < self.MAX_RESPONSE_BYTES:
                chunk = await reader.read(4096)
                if not chunk:
                    break
                reply.extend(chunk)
            return reply.decode("utf-8", errors="replace")
        finally:
            writer.close()

    def _parse_response(self, raw_response: str, tld: str) -> WHOISResponse:
        """Classify a WHOIS reply and pull out registration fields when found."""
        text = raw_response or ""
        no_match = any(signal in text for signal in self._signals.get(tld, []))

        if no_match:
            status = WHOISStatus.NOT_FOUND
        elif text.strip() and any(marker in text for marker in REGISTRATION_INDICATORS):
            status = WHOISStatus.FOUND
        else:
            status = WHOISStatus.AMBIGUOUS

        response = WHOISResponse(
            status=status,
            raw_response=raw_response,
            no_match_signal_detected=no_match,
            error=None,
        )
        if status == WHOISStatus.FOUND:
            response.creation_date = _first_match(CREATION_DATE_PATTERNS, text)
            response.registrar = _first_match(REGISTRAR_PATTERNS, text)
            response.nameservers = _nameservers(text)
        return response

    @staticmethod
    def _error(code: WHOISErrorCode, message: str) -> WHOISResponse:
        return WHOISResponse(
            status=WHOISStatus.ERROR,
            raw_response=None,
            no_match_signal_detected=False,
            error=WHOISError(code=code, message=message),
        )


def _first_match(patterns: tuple, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return None


def _nameservers(text: str) -> list[str]:
    seen: list[str] = []
    for match in NAMESERVER_PATTERN.finditer(text):
        ns = match.group(1).strip().lower().rstrip(".")
        if ns and ns not in seen:
            seen.append(ns)
    return seen
