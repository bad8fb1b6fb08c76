"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient

from loan_finder.api.main import create_app
from loan_finder.config import Settings
from loan_finder.domain.value_objects import Money, Term
from loan_finder.infrastructure.catalog.memory import InMemoryLoanCatalog
from loan_finder.infrastructure.catalog.seed import seed_catalog
from loan_finder.infrastructure.database.repositories import SqlLoanCatalog
from loan_finder.infrastructure.database.session import build_engine, build_session_factory
from loan_finder.providers.registry import ProviderRegistry


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file"""
    values = dict(
        openai_api_key="",
        anthropic_api_key="",
        ai_provider=None,
        query_language="tr",
        provider_max_retries=1,
        provider_backoff_base=0.0,
        provider_timeout_seconds=5.0,
        catalog_backend="memory",
        default_currency="TRY",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    """No AI credentials: selection falls through to the keyword provider"""
    return make_settings()


@pytest.fixture
def keyed_settings() -> Settings:
    """Both AI credentials present with well-formed prefixes"""
    return make_settings(openai_api_key="sk-test-openai", anthropic_api_key="sk-ant-test-claude")


@pytest.fixture
def loan_catalog() -> InMemoryLoanCatalog:
    return InMemoryLoanCatalog(seed_catalog())


@pytest.fixture
def sql_catalog() -> SqlLoanCatalog:
    """SQL catalog on a private in-memory SQLite database"""
    catalog = SqlLoanCatalog(build_session_factory(build_engine("sqlite://")))
    for loan in seed_catalog():
        catalog.save(loan)
    return catalog


@pytest.fixture
def registry(test_settings: Settings) -> ProviderRegistry:
    return ProviderRegistry(test_settings)


@pytest.fixture
def client(test_settings: Settings, registry: ProviderRegistry, loan_catalog: InMemoryLoanCatalog) -> TestClient:
    """FastAPI test client on the keyword provider and the seeded in-memory catalog"""
    app = create_app(test_settings, registry, loan_catalog)
    return TestClient(app)


@pytest.fixture
def housing_loan(loan_catalog: InMemoryLoanCatalog):
    """Garanti BBVA housing loan: 1.95%, 150,000 - 8,000,000 TRY, up to 360 months"""
    return loan_catalog.find_by_id("konut-002")


@pytest.fixture
def two_million() -> Money:
    return Money.of(2_000_000)


@pytest.fixture
def sixty_months() -> Term:
    return Term(60)


@pytest.fixture
def settings_factory():
    """Build isolated Settings with per-test overrides"""
    return make_settings
