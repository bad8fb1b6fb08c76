"""Unit tests for the loan search orchestration"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from loan_finder.application.dtos import LoanSearchRequest, SearchFailureKind
from loan_finder.application.parsing import QueryParsingService, all_providers_failed
from loan_finder.application.search import LoanSearchService
from loan_finder.domain.value_objects import LoanType


@pytest.fixture
def search_service(registry, loan_catalog) -> LoanSearchService:
    """Search over the seeded catalog with the keyword provider (no credentials)"""
    return LoanSearchService(QueryParsingService(registry), loan_catalog)


def stub_parsing(parsed) -> MagicMock:
    parsing = MagicMock(spec=QueryParsingService)
    parsing.parse_query = AsyncMock(return_value=parsed)
    return parsing


async def test_housing_query_ranks_by_total_payment(search_service):
    response = await search_service.search(LoanSearchRequest(query="5 milyon 48 ay konut kredisi"))

    assert response.success is True
    assert response.error is None
    assert response.provider == "keyword"
    assert response.parsed_params.type == LoanType.HOUSING
    assert response.parsed_params.amount == 5_000_000
    assert response.parsed_params.term_months == 48
    assert [loan.id for loan in response.loans] == ["konut-001", "konut-002", "konut-003", "konut-004"]
    assert response.total_found == 4

    totals = [loan.total_payment for loan in response.loans]
    assert totals == sorted(totals)


async def test_yearly_term_adjective(search_service):
    response = await search_service.search(LoanSearchRequest(query="10 yıllık 2 milyon konut kredisi"))

    assert response.success is True
    assert response.parsed_params.term_months == 120
    assert response.total_found == 4


async def test_personal_query(search_service):
    response = await search_service.search(LoanSearchRequest(query="300 bin 24 ay ihtiyaç kredisi"))

    assert response.success is True
    assert [loan.id for loan in response.loans] == ["ihtiyac-001", "ihtiyac-003", "ihtiyac-002"]
    first = response.loans[0]
    assert first.bank_name == "Türkiye İş Bankası"
    assert first.currency == "TRY"
    assert first.total_interest == pytest.approx(first.total_payment - 300_000, abs=0.02)


async def test_no_eligible_loans_is_still_success(search_service):
    response = await search_service.search(LoanSearchRequest(query="Taşıt kredisi 1 milyon lira 10 yıl vade"))

    assert response.success is True
    assert response.parsed_params.term_months == 120
    assert response.loans == []
    assert response.total_found == 0


async def test_unparseable_query_is_parse_failure(search_service):
    response = await search_service.search(LoanSearchRequest(query="Bu sadece test metni kredi değil"))

    assert response.success is False
    assert response.error.kind == SearchFailureKind.PARSE_FAILURE
    assert response.error.message == "Could not determine loan type, amount, term from the query"
    assert response.loans == []
    assert response.parsed_params is None


async def test_partial_parse_names_missing_fields(search_service):
    response = await search_service.search(LoanSearchRequest(query="konut kredisi 2 milyon"))

    assert response.error.kind == SearchFailureKind.PARSE_FAILURE
    assert response.error.message == "Could not determine term from the query"


async def test_overrides_win_over_parsed_values(search_service):
    request = LoanSearchRequest(
        query="5 milyon 48 ay konut kredisi",
        type=LoanType.VEHICLE,
        amount=1_000_000,
        term_months=36,
    )

    response = await search_service.search(request)

    assert response.success is True
    assert response.parsed_params.type == LoanType.VEHICLE
    assert response.parsed_params.amount == 1_000_000
    assert response.parsed_params.term_months == 36
    assert [loan.id for loan in response.loans] == ["tasit-001", "tasit-003", "tasit-002"]


async def test_overrides_complete_a_partial_parse(search_service):
    response = await search_service.search(LoanSearchRequest(query="konut kredisi 2 milyon", term_months=120))

    assert response.success is True
    assert response.total_found == 4


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": -5},
        {"term_months": 400},
        {"term_months": 0},
    ],
)
async def test_invalid_values_are_validation_errors(search_service, overrides):
    response = await search_service.search(LoanSearchRequest(query="5 milyon 48 ay konut kredisi", **overrides))

    assert response.success is False
    assert response.error.kind == SearchFailureKind.VALIDATION_ERROR
    assert response.provider == "keyword"


async def test_foreign_currency_finds_nothing(search_service):
    response = await search_service.search(LoanSearchRequest(query="5 milyon 48 ay konut kredisi", currency="USD"))

    assert response.success is True
    assert response.parsed_params.currency == "USD"
    assert response.total_found == 0


async def test_catalog_failure_is_internal_error(registry):
    catalog = MagicMock()
    catalog.find_eligible.side_effect = RuntimeError("database is locked")
    service = LoanSearchService(QueryParsingService(registry), catalog)

    response = await service.search(LoanSearchRequest(query="5 milyon 48 ay konut kredisi"))

    assert response.success is False
    assert response.error.kind == SearchFailureKind.INTERNAL_ERROR
    assert response.error.message == "Internal error while searching loans"
    assert "database" not in response.error.message


async def test_all_providers_failed_is_parse_failure(loan_catalog):
    service = LoanSearchService(stub_parsing(all_providers_failed("konut")), loan_catalog)

    response = await service.search(LoanSearchRequest(query="konut"))

    assert response.success is False
    assert response.error.kind == SearchFailureKind.PARSE_FAILURE
    assert response.provider == "none"
    assert response.confidence == 0.0


async def test_parsing_exception_is_internal_error(loan_catalog):
    parsing = MagicMock(spec=QueryParsingService)
    parsing.parse_query = AsyncMock(side_effect=RuntimeError("boom"))
    service = LoanSearchService(parsing, loan_catalog)

    response = await service.search(LoanSearchRequest(query="konut"))

    assert response.error.kind == SearchFailureKind.INTERNAL_ERROR
    assert response.provider is None
