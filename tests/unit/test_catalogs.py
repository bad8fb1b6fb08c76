"""Unit tests for the in-memory and SQL loan catalogs"""

import pytest

from loan_finder.domain.value_objects import InterestRate, LoanType, Money, Term
from loan_finder.infrastructure.catalog.seed import PRODUCTS, seed_catalog


@pytest.fixture(params=["memory", "sql"])
def catalog(request, loan_catalog, sql_catalog):
    """Both catalog backends must behave the same"""
    return loan_catalog if request.param == "memory" else sql_catalog


def test_find_all_keeps_insertion_order(catalog):
    assert [loan.id for loan in catalog.find_all()] == [product[0] for product in PRODUCTS]


def test_find_by_id(catalog):
    loan = catalog.find_by_id("konut-002")

    assert loan.bank.name == "Garanti BBVA"
    assert loan.type == LoanType.HOUSING
    assert loan.interest_rate.rate == pytest.approx(1.95)
    assert loan.max_term.months == 360
    assert catalog.find_by_id("missing") is None


def test_find_by_type_returns_active_loans_only(catalog):
    catalog.save(catalog.find_by_id("tasit-002").deactivate())

    assert [loan.id for loan in catalog.find_by_type(LoanType.VEHICLE)] == ["tasit-001", "tasit-003"]


def test_find_eligible_applies_limits(catalog):
    eligible = catalog.find_eligible(LoanType.HOUSING, Money.of(9_000_000), Term(120))

    # konut-002 tops out at 8,000,000
    assert [loan.id for loan in eligible] == ["konut-001", "konut-003", "konut-004"]


def test_find_eligible_respects_term_limit(catalog):
    assert catalog.find_eligible(LoanType.PERSONAL, Money.of(100_000), Term(72)) == []


def test_find_eligible_ignores_other_currencies(catalog):
    assert catalog.find_eligible(LoanType.HOUSING, Money.of(1_000_000, "USD"), Term(60)) == []


def test_save_replaces_in_place(catalog):
    updated = catalog.find_by_id("konut-003").update_interest_rate(InterestRate(1.49))

    catalog.save(updated)

    ids = [loan.id for loan in catalog.find_all()]
    assert ids == [product[0] for product in PRODUCTS]
    assert catalog.find_by_id("konut-003").interest_rate.rate == pytest.approx(1.49)


def test_save_appends_new_loans(catalog):
    template = seed_catalog()[0]
    new_loan = type(template)(
        id="konut-005",
        bank=template.bank,
        type=LoanType.HOUSING,
        interest_rate=InterestRate(1.79),
        min_amount=Money.of(200_000),
        max_amount=Money.of(5_000_000),
        max_term=Term(240),
        eligibility_note="Kampanya dönemine özel",
    )

    catalog.save(new_loan)

    assert catalog.find_all()[-1].id == "konut-005"
    assert [loan.id for loan in catalog.find_by_type(LoanType.HOUSING)][-1] == "konut-005"


def test_delete(catalog):
    catalog.delete("ihtiyac-002")
    catalog.delete("missing")

    assert catalog.find_by_id("ihtiyac-002") is None
    assert len(catalog.find_all()) == len(PRODUCTS) - 1


def test_seed_catalog_shares_bank_instances():
    loans = {loan.id: loan for loan in seed_catalog()}

    assert loans["konut-001"].bank is loans["ihtiyac-001"].bank
    assert all(loan.currency == "TRY" for loan in loans.values())
    assert seed_catalog("EUR")[0].currency == "EUR"


def test_loans_of_one_bank_share_a_bank_instance(catalog):
    loans = {loan.id: loan for loan in catalog.find_all()}

    assert loans["konut-001"].bank is loans["ihtiyac-001"].bank
    assert loans["konut-002"].bank is loans["ihtiyac-003"].bank
    assert loans["konut-001"].bank is not loans["konut-002"].bank
