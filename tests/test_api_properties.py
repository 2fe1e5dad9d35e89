"""
Tests for the HTTP API.

The app is built with an offline analyzer and a pricing collector wired to
an httpx.MockTransport, so no request leaves the process.
"""

import io

import httpx
import pytest
from fastapi.testclient import TestClient

from domain_intel.api import create_app
from domain_intel.audit_logger import AuditLogger
from domain_intel.config import create_default_config
from domain_intel.http_settings import HTTPSettings
from domain_intel.pricing import PricingCollector
from domain_intel.trust_analyzer import TrustAnalyzer


PAGE = "<p>Get it from $8.88/yr. 40% off your first year</p>"


@pytest.fixture
def client():
    config = create_default_config(offline=True)
    config.pricing.cache_max_age_seconds = 120
    logger = AuditLogger(output_format="json", output_stream=io.StringIO())
    collector = PricingCollector(
        config,
        logger=logger,
        settings=HTTPSettings.from_config(config.http),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text=PAGE)),
    )
    app = create_app(
        config=config,
        logger=logger,
        analyzer=TrustAnalyzer(config, logger=logger),
        collector=collector,
    )
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_healthz(self, client: TestClient) -> None:
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPricingEndpoint:
    """GET /api/pricing?domain=..."""

    def test_offers_for_every_provider(self, client: TestClient) -> None:
        response = client.get("/api/pricing", params={"domain": "example.com"})
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=120"

        body = response.json()
        assert body["domain"] == "example.com"
        assert [offer["provider"] for offer in body["offers"]] == ["Hostinger", "Namecheap", "GoDaddy"]
        assert all(offer["price"] == "$8.88" for offer in body["offers"])
        assert all(offer["offer"] == "40% off" for offer in body["offers"])
        assert body["updatedAt"]

    @pytest.mark.parametrize("query", ["", "?domain=", "?domain=%20%20"])
    def test_missing_domain(self, client: TestClient, query: str) -> None:
        response = client.get("/api/pricing" + query)
        assert response.status_code == 400
        assert response.json() == {"error": "domain required"}


class TestTrustEndpoint:
    """GET /api/trust?url=..."""

    def test_government_site(self, client: TestClient) -> None:
        response = client.get("/api/trust", params={"url": "https://www.canada.ca/en.html"})
        assert response.status_code == 200
        body = response.json()
        assert body["domain"] == "canada.ca"
        assert body["trustScore"] == {"value": 100, "band": "VERY_HIGH"}
        assert body["signals"]["governmentCountry"] == "Canada"

    def test_regular_site(self, client: TestClient) -> None:
        body = client.get("/api/trust", params={"url": "https://example.com"}).json()
        assert body["trustScore"]["value"] == 50
        assert body["ssl"]["hasSSL"] is True
        assert body["registration"]["source"] == "none"

    def test_missing_url(self, client: TestClient) -> None:
        response = client.get("/api/trust")
        assert response.status_code == 400
        assert response.json() == {"error": "url required"}

    @pytest.mark.parametrize("url,message", [
        ("", "URL is required"),
        ("http://", "Invalid URL format"),
    ])
    def test_invalid_url(self, client: TestClient, url: str, message: str) -> None:
        response = client.get("/api/trust", params={"url": url})
        assert response.status_code == 422
        assert response.json() == {"error": message}
