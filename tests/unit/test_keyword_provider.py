"""Unit tests for the deterministic keyword provider"""

import pytest

from loan_finder.domain.value_objects import LoanType
from loan_finder.providers.base import AIProviderType, ApiKeyStatus, ConnectionStatus, ProviderConfig
from loan_finder.providers.keyword import KeywordProvider, extract_amount, extract_term


@pytest.fixture
def provider() -> KeywordProvider:
    return KeywordProvider()


@pytest.mark.parametrize(
    "text,credit_type,amount,term",
    [
        ("5 milyon 48 ay konut", LoanType.HOUSING, 5_000_000, 48),
        ("2 milyon TL 60 ay vade konut kredisi istiyorum", LoanType.HOUSING, 2_000_000, 60),
        ("1.500.000 lira 48 aylık ev kredisi hesapla", LoanType.HOUSING, 1_500_000, 48),
        ("500 bin TL 5 yıl vadeli ihtiyaç kredisi", LoanType.PERSONAL, 500_000, 60),
        ("Araç alımı için 800000 TL 72 ay kredi", LoanType.VEHICLE, 800_000, 72),
        ("Taşıt kredisi 1 milyon lira 10 yıl vade", LoanType.VEHICLE, 1_000_000, 120),
        ("Ev satın almak için 3.5 milyon 120 ay konut kredisi", LoanType.HOUSING, 3_500_000, 120),
        ("300bin 24ay ihtiyaç", LoanType.PERSONAL, 300_000, 24),
        ("car loan 250k 36 months", LoanType.VEHICLE, 250_000, 36),
        ("10 yıllık 2 milyon konut kredisi", LoanType.HOUSING, 2_000_000, 120),
        ("3 senelik araç kredisi 400 bin", LoanType.VEHICLE, 400_000, 36),
        ("2 yillik 150 bin ihtiyac kredisi", LoanType.PERSONAL, 150_000, 24),
    ],
)
async def test_keyword_extracts_all_fields(provider, text, credit_type, amount, term):
    result = await provider.parse_query(text)

    assert result.credit_type == credit_type
    assert result.amount == pytest.approx(amount)
    assert result.term == term
    assert result.is_loan_query is True
    assert result.confidence > 0
    assert result.uncertainties == []
    assert result.provider == "keyword"


async def test_keyword_non_loan_text(provider):
    result = await provider.parse_query("Bugün hava çok güzel")

    assert result.credit_type is None
    assert result.amount is None
    assert result.term is None
    assert result.is_loan_query is False
    assert result.confidence == pytest.approx(0.1)
    assert set(result.uncertainties) == {"CREDIT_TYPE_NOT_FOUND", "AMOUNT_NOT_FOUND", "TERM_NOT_FOUND"}


async def test_keyword_loan_mention_without_parameters(provider):
    result = await provider.parse_query("Bu sadece test metni kredi değil")

    assert result.is_loan_query is True
    assert result.missing_fields == ["type", "amount", "term"]


async def test_keyword_confidence_grows_with_found_fields(provider):
    partial = await provider.parse_query("konut kredisi")
    complete = await provider.parse_query("konut kredisi 2 milyon 120 ay")

    assert 0 < partial.confidence < complete.confidence <= 0.95


async def test_keyword_parse_never_fails(provider):
    outcome = await provider.parse("")

    assert outcome.ok
    assert outcome.query.confidence == pytest.approx(0.1)


def test_term_is_removed_before_amount_search():
    months, phrase, remaining = extract_term("2000000 60 ay")

    assert months == 60
    assert phrase == "60 ay"
    assert extract_amount(remaining) == (2_000_000, "2000000")


def test_small_bare_numbers_are_not_amounts():
    assert extract_amount("12 kez") == (None, None)


async def test_keyword_provider_is_always_available(provider):
    diagnostics = await provider.get_diagnostics()

    assert provider.is_configured is True
    assert await provider.test_connectivity() is True
    assert diagnostics.api_key_status == ApiKeyStatus.CONFIGURED
    assert diagnostics.connection_status == ConnectionStatus.SUCCESS


def test_keyword_provider_rejects_other_configs():
    with pytest.raises(ValueError):
        KeywordProvider(ProviderConfig(type=AIProviderType.OPENAI))
