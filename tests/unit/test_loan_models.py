"""Unit tests for Bank and Loan entities"""

import pytest

from loan_finder.domain.exceptions import AmountOutOfRangeError, TermExceededError, ValidationError
from loan_finder.domain.models import Bank, Loan
from loan_finder.domain.value_objects import InterestRate, LoanType, Money, Term


def make_loan(**overrides) -> Loan:
    values = dict(
        id="test-001",
        bank=Bank(id="test-bank", name="Test Bankası"),
        type=LoanType.HOUSING,
        interest_rate=InterestRate(1.95),
        min_amount=Money.of(100_000),
        max_amount=Money.of(1_000_000),
        max_term=Term(120),
        eligibility_note="Test ürünü",
    )
    values.update(overrides)
    return Loan(**values)


def test_bank_requires_id_and_name():
    with pytest.raises(ValidationError):
        Bank(id="", name="X")
    with pytest.raises(ValidationError):
        Bank(id="x", name="   ")
    assert Bank(id="x", name="  Akbank ").name == "Akbank"


def test_bank_lifecycle_returns_new_instances():
    bank = Bank(id="x", name="Akbank")
    inactive = bank.deactivate()

    assert bank.is_active is True
    assert inactive.is_active is False
    assert inactive.updated_at >= bank.updated_at
    assert inactive.activate().is_active is True
    assert bank.rename("Akbank T.A.Ş.").name == "Akbank T.A.Ş."


def test_loan_rejects_min_above_max():
    with pytest.raises(ValidationError):
        make_loan(min_amount=Money.of(2_000_000), max_amount=Money.of(1_000_000))


def test_loan_requires_id_and_note():
    with pytest.raises(ValidationError):
        make_loan(id="")
    with pytest.raises(ValidationError):
        make_loan(eligibility_note=" ")


def test_eligibility_bounds_are_inclusive():
    loan = make_loan()

    assert loan.is_eligible(Money.of(100_000), Term(120))
    assert loan.is_eligible(Money.of(1_000_000), Term(1))
    assert not loan.is_eligible(Money.of("99999.99"), Term(60))
    assert not loan.is_eligible(Money.of("1000000.01"), Term(60))
    assert not loan.is_eligible(Money.of(500_000), Term(121))


def test_inactive_loan_is_never_eligible():
    loan = make_loan().deactivate()
    assert not loan.is_eligible(Money.of(500_000), Term(60))


def test_amount_in_other_currency_is_not_eligible():
    loan = make_loan()
    assert not loan.is_eligible_for_amount(Money.of(500_000, "USD"))


def test_payment_figures_for_ineligible_request_raise():
    loan = make_loan()

    with pytest.raises(AmountOutOfRangeError):
        loan.calculate_monthly_payment(Money.of(50_000), Term(60))
    with pytest.raises(TermExceededError):
        loan.calculate_total_payment(Money.of(500_000), Term(180))


def test_zero_rate_payment_is_principal_over_term():
    loan = make_loan(interest_rate=InterestRate(0))

    assert loan.calculate_monthly_payment(Money.of(120_000), Term(12)) == Money.of(10_000)
    assert loan.calculate_total_payment(Money.of(120_000), Term(12)) == Money.of(120_000)


def test_updates_return_new_instances():
    loan = make_loan()

    updated = loan.update_interest_rate(InterestRate(2.5)).update_eligibility_note("Yeni not")

    assert loan.interest_rate.rate == 1.95
    assert updated.interest_rate.rate == 2.5
    assert updated.eligibility_note == "Yeni not"
    assert updated.id == loan.id


def test_seeded_loans_of_a_bank_share_one_instance(loan_catalog):
    is_bank_loans = [loan for loan in loan_catalog.find_all() if loan.bank.id == "is-bankasi"]

    assert len(is_bank_loans) == 2
    assert is_bank_loans[0].bank is is_bank_loans[1].bank
