"""Amortization schedule generation for fixed-payment loans"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List

from loan_finder.domain.models import Loan, Installment
from loan_finder.domain.value_objects import Money, Term, CENT


def generate_amortization_schedule(loan: Loan, amount: Money, term: Term) -> List[Installment]:
    """
    Generate the month-by-month repayment schedule of a loan.

    Requirements:
    - Equal monthly payments from the annuity formula
    - Each payment split into interest (on remaining balance) and principal
    - Last installment absorbs rounding remainder so principal sums to the amount

    Args:
        loan: Loan product (must accept amount and term)
        amount: Borrowed principal
        term: Number of monthly installments

    Returns:
        List of Installment objects, one per month

    Raises:
        EligibilityError: if the loan does not accept the amount or term

    Example:
        1,200.00 TRY over 12 months at 0% -> 12 x 100.00, balance reaches 0.00
    """
    monthly_payment = loan.calculate_monthly_payment(amount, term).amount
    rate = Decimal(str(loan.interest_rate.monthly_rate))
    currency = amount.currency

    balance = amount.amount
    installments = []
    for month in range(1, term.months + 1):
        interest = (balance * rate).quantize(CENT, rounding=ROUND_HALF_UP)

        if month == term.months:
            # Last installment clears whatever balance rounding left behind
            principal = balance
            payment = principal + interest
        else:
            principal = min(monthly_payment - interest, balance)
            payment = principal + interest

        balance -= principal
        installments.append(
            Installment(
                month=month,
                payment=Money(payment, currency),
                principal=Money(principal, currency),
                interest=Money(interest, currency),
                remaining_balance=Money(balance, currency),
            )
        )

    return installments
