"""Unit tests for amortization schedule generation"""

import pytest

from loan_finder.domain.exceptions import EligibilityError
from loan_finder.domain.installments import generate_amortization_schedule
from loan_finder.domain.value_objects import InterestRate, Money, Term


def test_schedule_zero_rate_equal_split(housing_loan):
    """Test plan with evenly divisible amount and no interest"""
    loan = housing_loan.update_interest_rate(InterestRate.zero())
    installments = generate_amortization_schedule(loan, Money.of(240_000), Term(12))

    assert len(installments) == 12
    assert all(inst.payment == Money.of(20_000) for inst in installments)
    assert all(inst.interest == Money.zero() for inst in installments)
    assert installments[-1].remaining_balance == Money.zero()


def test_schedule_principal_sums_to_amount(housing_loan, two_million, sixty_months):
    """Test last installment absorbs rounding remainder"""
    installments = generate_amortization_schedule(housing_loan, two_million, sixty_months)

    assert [inst.month for inst in installments] == list(range(1, 61))
    assert sum(inst.principal.amount for inst in installments) == two_million.amount
    assert installments[-1].remaining_balance == Money.zero()


def test_schedule_interest_declines_and_principal_grows(housing_loan, two_million, sixty_months):
    installments = generate_amortization_schedule(housing_loan, two_million, sixty_months)

    assert installments[0].interest.amount > installments[-1].interest.amount
    assert installments[0].principal.amount < installments[-1].principal.amount
    # First month interest: 2,000,000 x 0.001625
    assert installments[0].interest == Money.of(3_250)


def test_schedule_payments_match_monthly_payment(housing_loan, two_million, sixty_months):
    monthly = housing_loan.calculate_monthly_payment(two_million, sixty_months)
    installments = generate_amortization_schedule(housing_loan, two_million, sixty_months)

    assert all(inst.payment == monthly for inst in installments[:-1])
    assert abs(installments[-1].payment.amount - monthly.amount) < 1


def test_schedule_for_ineligible_request_raises(housing_loan):
    with pytest.raises(EligibilityError):
        generate_amortization_schedule(housing_loan, Money.of(100_000), Term(60))


def test_schedule_interest_rounds_half_up(housing_loan):
    """Test interest on a half-cent boundary rounds up"""
    loan = housing_loan.update_interest_rate(InterestRate(12))
    installments = generate_amortization_schedule(loan, Money.of("150000.50"), Term(12))

    # 150,000.50 x 1% = 1,500.005
    assert installments[0].interest == Money.of("1500.01")
