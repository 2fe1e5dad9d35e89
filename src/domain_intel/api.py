"""FastAPI app exposing the pricing and trust endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager
from time import perf_counter
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .audit_logger import AuditLogger
from .config import SystemConfig, load_config_from_env
from .exceptions import ValidationError
from .pricing import PricingCollector
from .trust_analyzer import TrustAnalyzer

COMPONENT = "API"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    config: Optional[SystemConfig] = None,
    logger: Optional[AuditLogger] = None,
    analyzer: Optional[TrustAnalyzer] = None,
    collector: Optional[PricingCollector] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Components not passed in are built from config, which itself defaults
    to the environment configuration.
    """
    config = config or load_config_from_env()
    logger = logger or AuditLogger.from_config(config.logging)
    analyzer = analyzer or TrustAnalyzer(config, logger=logger)
    collector = collector or PricingCollector(config, logger=logger)
    cache_control = f"public, max-age={config.pricing.cache_max_age_seconds}"

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info(COMPONENT, "Application startup", {"version": __version__})
        try:
            yield
        finally:
            await analyzer.close()
            logger.info(COMPONENT, "Application shutdown")

    app = FastAPI(title="Domain Intel", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.analyzer = analyzer
    app.state.collector = collector

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = perf_counter()
        response = await call_next(request)
        logger.debug(
            COMPONENT,
            f"{request.method} {request.url.path} -> {response.status_code}",
            {"duration_ms": round((perf_counter() - started) * 1000, 2)},
        )
        return response

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    @app.get("/api/pricing")
    async def pricing(domain: Optional[str] = None):
        if not domain or not domain.strip():
            return _error(400, "domain required")

        report = await collector.fetch_offers(domain)
        return JSONResponse(
            content=report.to_dict(),
            headers={"Cache-Control": cache_control},
        )

    @app.get("/api/trust")
    async def trust(url: Optional[str] = None):
        if url is None:
            return _error(400, "url required")

        try:
            report = await analyzer.analyze(url)
        except ValidationError as e:
            return _error(422, e.message)
        return JSONResponse(content=report.to_dict())

    return app


app = create_app()


def main(host: str = "127.0.0.1", port: int = 8000, config: Optional[SystemConfig] = None) -> None:
    """Run the API with uvicorn, built from config or the environment."""
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")
