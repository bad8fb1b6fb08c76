"""FastAPI application factory"""

import logging
from typing import Optional

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_finder.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_finder.api.v1 import loans, parse, providers, search
from loan_finder.application.parsing import QueryParsingService
from loan_finder.application.search import LoanSearchService
from loan_finder.config import Settings, settings as default_settings
from loan_finder.domain.calculation import LoanCalculationService
from loan_finder.domain.catalog import LoanCatalog
from loan_finder.infrastructure.catalog.memory import InMemoryLoanCatalog
from loan_finder.infrastructure.catalog.seed import seed_catalog
from loan_finder.infrastructure.database.repositories import SqlLoanCatalog
from loan_finder.infrastructure.database.session import build_engine, build_session_factory
from loan_finder.infrastructure.observability.logging import setup_logging
from loan_finder.providers.base import AIProviderType, SupportedLanguage
from loan_finder.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

# Setup structured logging
setup_logging(default_settings.log_level)


def build_catalog(config: Settings) -> LoanCatalog:
    """Catalog for the configured backend, seeded with the default products when empty"""
    if config.catalog_backend == "database":
        catalog = SqlLoanCatalog(build_session_factory(build_engine(config.database_url)))
        if not catalog.find_all():
            for loan in seed_catalog(config.default_currency):
                catalog.save(loan)
            logger.info("Seeded loan catalog database")
        return catalog

    if config.catalog_backend != "memory":
        raise ValueError(f"Unknown catalog backend: {config.catalog_backend}")
    return InMemoryLoanCatalog(seed_catalog(config.default_currency))


def create_app(
    config: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None,
    catalog: Optional[LoanCatalog] = None,
) -> FastAPI:
    """Create and configure FastAPI application"""
    config = config or default_settings

    app = FastAPI(
        title="Loan Finder",
        description="Natural-language loan search over a bank product catalog",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Wire services once per application
    registry = registry or ProviderRegistry(config)
    preferred = AIProviderType(config.ai_provider.lower()) if config.ai_provider else None
    parsing_service = QueryParsingService(registry, preferred, SupportedLanguage(config.query_language))
    catalog = catalog if catalog is not None else build_catalog(config)

    app.state.settings = config
    app.state.registry = registry
    app.state.parsing_service = parsing_service
    app.state.catalog = catalog
    app.state.search_service = LoanSearchService(parsing_service, catalog, LoanCalculationService())

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": config.service_name,
            "provider": parsing_service.current_provider_info().type.value,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(search.router, prefix="/v1", tags=["search"])
    app.include_router(parse.router, prefix="/v1", tags=["parse"])
    app.include_router(providers.router, prefix="/v1", tags=["providers"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])

    return app


app = create_app()
